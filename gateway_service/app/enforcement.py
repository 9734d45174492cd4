from __future__ import annotations

import logging
from dataclasses import dataclass

from prometheus_client import Counter

from common import (
	AuthenticationFailure,
	AuthorizationFailure,
	Role,
	extract_bearer_token,
	resolve_role,
)

from .clients import AuthorityClient
from .config import Settings
from .rbac import is_authorized
from .routing import is_protected

LOGGER = logging.getLogger(__name__)

ACCESS_DECISIONS = Counter(
	"gateway_access_decisions_total",
	"Access decisions taken by the gateway enforcement filter",
	["outcome"],
)


@dataclass(frozen=True)
class AccessGrant:
	email: str
	role: Role
	name: str | None = None


async def _decide(
	method: str,
	path: str,
	authorization: str | None,
	authority: AuthorityClient | None,
	settings: Settings,
) -> AccessGrant:
	token = extract_bearer_token(authorization)
	if token is None:
		raise AuthenticationFailure("Not authenticated")

	if authority is None:
		LOGGER.error("Token authority is not configured; rejecting %s %s", method, path)
		raise AuthenticationFailure("Not authenticated")

	result = await authority.validate(token)
	role = resolve_role(result.role, settings.missing_role_fallback)

	if is_protected(path, settings.protected_prefixes) and not is_authorized(method, role):
		LOGGER.warning("Denied %s %s for %s (role %s)", method, path, result.email, role.value)
		raise AuthorizationFailure("Forbidden")

	return AccessGrant(email=result.email, role=role, name=result.name)


async def enforce_access(
	method: str,
	path: str,
	authorization: str | None,
	*,
	authority: AuthorityClient | None,
	settings: Settings,
) -> AccessGrant:
	"""
	Decide whether a request may be forwarded upstream.

	Extracts the bearer token, validates it with the token authority, resolves
	the role and, for protected paths, applies the method/role matrix. Returns
	the verified identity or raises ``AuthenticationFailure`` /
	``AuthorizationFailure``. Nothing is cached between requests.
	"""
	try:
		grant = await _decide(method, path, authorization, authority, settings)
	except AuthenticationFailure:
		ACCESS_DECISIONS.labels(outcome="unauthenticated").inc()
		raise
	except AuthorizationFailure:
		ACCESS_DECISIONS.labels(outcome="forbidden").inc()
		raise

	ACCESS_DECISIONS.labels(outcome="allowed").inc()
	return grant
