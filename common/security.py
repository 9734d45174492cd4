"""Credential helpers shared by the authority and the gateway."""
from fastapi.security.utils import get_authorization_scheme_param


def extract_bearer_token(authorization: str | None) -> str | None:
	"""
	Pull the token out of an ``Authorization: Bearer <token>`` header.

	Args:
		authorization: Raw header value, possibly absent

	Returns:
		The token, or None when the header is absent, uses another scheme,
		or carries an empty or whitespace-containing token
	"""
	if not authorization:
		return None
	scheme, token = get_authorization_scheme_param(authorization)
	if scheme.lower() != "bearer":
		return None
	token = token.strip()
	if not token or any(ch.isspace() for ch in token):
		return None
	return token
