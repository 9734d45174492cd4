from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from common import Role

from .config import get_settings


pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"


class TokenError(Exception):
	def __init__(self, detail: str):
		self.detail = detail
		super().__init__(detail)


def verify_password(plain_password: str, hashed_password: str) -> bool:
	try:
		return pwd_context.verify(plain_password, hashed_password)
	except ValueError:
		# stored hash is in a format this context cannot identify
		return False


def dummy_verify_password() -> None:
	"""Burn the same hashing work as a real check, for lookups that found nothing."""
	pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
	return pwd_context.hash(password)


def _now() -> datetime:
	return datetime.now(timezone.utc)


def create_access_token(
	*, email: str, role: Role, name: str | None = None, token_version: int = 0
) -> str:
	settings = get_settings()
	issued_at = _now()
	expire = issued_at + timedelta(minutes=settings.access_token_expire_minutes)
	payload = {
		"sub": email,
		"role": role.value,
		"type": ACCESS_TOKEN_TYPE,
		"ver": token_version,
		"iat": int(issued_at.timestamp()),
		"exp": int(expire.timestamp()),
	}
	if name:
		payload["name"] = name
	return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
	"""Verify signature and expiry and return the claims, or raise TokenError."""
	settings = get_settings()
	try:
		payload = jwt.decode(
			token,
			settings.jwt_secret,
			algorithms=[settings.jwt_algorithm],
			options={"require_exp": True},
		)
	except JWTError as exc:
		raise TokenError("Invalid token") from exc

	# Tokens minted before typed tokens existed carry no "type" claim
	if payload.get("type", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
		raise TokenError("Invalid token type")

	sub = payload.get("sub")
	if not isinstance(sub, str) or not sub.strip():
		raise TokenError("Invalid token payload")

	return payload
