from __future__ import annotations

import logging

import httpx
from fastapi import Request
from pydantic import ValidationError

from common import AuthenticationFailure, ValidationResult

from .config import Settings

LOGGER = logging.getLogger(__name__)


class AuthorityClient:
	"""
	Client for the token authority's ``GET /validate`` endpoint.

	Every outcome other than a well-formed ``valid: true`` answer (transport
	error, timeout, non-200 status, unparsable body) raises
	``AuthenticationFailure``. No retries and no caching: each call is one
	round trip.
	"""

	def __init__(self, client: httpx.AsyncClient):
		self._client = client

	async def validate(self, token: str) -> ValidationResult:
		try:
			response = await self._client.get("/validate", headers={"Authorization": f"Bearer {token}"})
		except httpx.HTTPError as exc:
			LOGGER.warning("Token validation call failed: %s", exc.__class__.__name__)
			raise AuthenticationFailure("Not authenticated") from exc

		if response.status_code != httpx.codes.OK:
			raise AuthenticationFailure("Not authenticated")

		try:
			result = ValidationResult.model_validate_json(response.content)
		except ValidationError as exc:
			LOGGER.warning("Token authority returned a malformed validation response")
			raise AuthenticationFailure("Not authenticated") from exc

		if not result.valid or not result.email:
			raise AuthenticationFailure("Not authenticated")
		return result

	async def ping(self) -> None:
		response = await self._client.get("/healthz", timeout=2.0)
		response.raise_for_status()

	async def aclose(self) -> None:
		await self._client.aclose()


def build_authority_client(settings: Settings) -> AuthorityClient | None:
	if not settings.auth_service_url:
		return None
	client = httpx.AsyncClient(
		base_url=settings.auth_service_url.rstrip("/"),
		timeout=settings.validation_timeout_seconds,
	)
	return AuthorityClient(client)


def build_upstream_client(settings: Settings) -> httpx.AsyncClient:
	return httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)


def get_authority_client(request: Request) -> AuthorityClient | None:
	return getattr(request.app.state, "authority_client", None)


def get_upstream_client(request: Request) -> httpx.AsyncClient | None:
	return getattr(request.app.state, "upstream_client", None)
