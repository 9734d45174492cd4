from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
import httpx

from ..clients import AuthorityClient, get_authority_client, get_upstream_client
from ..config import get_settings
from ..enforcement import enforce_access
from ..proxy import forward
from ..routing import build_routes, is_protected, match_route


router = APIRouter(tags=["gateway"])

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@router.api_route("/{full_path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(
	full_path: str,
	request: Request,
	authority: AuthorityClient | None = Depends(get_authority_client),
	upstream: httpx.AsyncClient | None = Depends(get_upstream_client),
) -> Response:
	settings = get_settings()
	path = "/" + full_path

	route = match_route(build_routes(settings), path)
	if route is None:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

	grant = None
	if route.requires_auth or is_protected(path, settings.protected_prefixes):
		grant = await enforce_access(
			request.method,
			path,
			request.headers.get("authorization"),
			authority=authority,
			settings=settings,
		)

	return await forward(
		request,
		upstream,
		route,
		path,
		grant=grant,
		inject_identity=settings.forward_identity_headers,
	)
