from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx
from fastapi import HTTPException, Request, status
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from .enforcement import AccessGrant
from .routing import UpstreamRoute

LOGGER = logging.getLogger(__name__)

HOP_BY_HOP_HEADERS = frozenset(
	{
		"connection",
		"keep-alive",
		"proxy-authenticate",
		"proxy-authorization",
		"te",
		"trailer",
		"trailers",
		"transfer-encoding",
		"upgrade",
	}
)
IDENTITY_EMAIL_HEADER = "X-Authenticated-Email"
IDENTITY_ROLE_HEADER = "X-Authenticated-Role"
_IDENTITY_HEADERS = frozenset({IDENTITY_EMAIL_HEADER.lower(), IDENTITY_ROLE_HEADER.lower()})


def build_upstream_headers(
	headers: Iterable[tuple[str, str]],
	*,
	grant: AccessGrant | None = None,
	inject_identity: bool = False,
) -> list[tuple[str, str]]:
	forwarded = []
	for name, value in headers:
		lowered = name.lower()
		if lowered in HOP_BY_HOP_HEADERS or lowered in ("host", "content-length"):
			continue
		if inject_identity and lowered in _IDENTITY_HEADERS:
			# only the gateway may assert identity to upstream services
			continue
		forwarded.append((name, value))

	if inject_identity and grant is not None:
		forwarded.append((IDENTITY_EMAIL_HEADER, grant.email))
		forwarded.append((IDENTITY_ROLE_HEADER, grant.role.value))
	return forwarded


async def forward(
	request: Request,
	client: httpx.AsyncClient | None,
	route: UpstreamRoute,
	path: str,
	*,
	grant: AccessGrant | None = None,
	inject_identity: bool = False,
) -> StreamingResponse:
	if not route.upstream_url or client is None:
		raise HTTPException(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			detail="Upstream service is not configured",
		)

	url = route.upstream_url.rstrip("/") + route.upstream_path(path)
	if request.url.query:
		url = f"{url}?{request.url.query}"

	upstream_request = client.build_request(
		request.method,
		url,
		headers=build_upstream_headers(
			request.headers.items(), grant=grant, inject_identity=inject_identity
		),
		content=await request.body(),
	)
	try:
		upstream_response = await client.send(upstream_request, stream=True)
	except httpx.HTTPError as exc:
		LOGGER.warning("Upstream %s unreachable: %s", route.prefix, exc.__class__.__name__)
		raise HTTPException(
			status_code=status.HTTP_502_BAD_GATEWAY,
			detail="Upstream service unavailable",
		) from exc

	response = StreamingResponse(
		upstream_response.aiter_raw(),
		status_code=upstream_response.status_code,
		background=BackgroundTask(upstream_response.aclose),
	)
	response.raw_headers = [
		(name.encode("latin-1"), value.encode("latin-1"))
		for name, value in upstream_response.headers.multi_items()
		if name.lower() not in HOP_BY_HOP_HEADERS
	]
	return response
