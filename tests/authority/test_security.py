from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth_service.app.security import (
	TokenError,
	create_access_token,
	decode_token,
	get_password_hash,
	verify_password,
)
from common import Role


def _encode(settings, **claims) -> str:
	return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _in(minutes: int) -> int:
	return int((datetime.now(timezone.utc) + timedelta(minutes=minutes)).timestamp())


def test_access_token_carries_identity_role_and_expiry(auth_settings):
	token = create_access_token(email="nurse@clinic.test", role=Role.CLINICIAN, name="Nurse", token_version=3)

	claims = decode_token(token)

	assert claims["sub"] == "nurse@clinic.test"
	assert claims["role"] == "CLINICIAN"
	assert claims["name"] == "Nurse"
	assert claims["type"] == "access"
	assert claims["ver"] == 3
	lifetime = claims["exp"] - claims["iat"]
	assert lifetime == auth_settings.access_token_expire_minutes * 60


def test_access_token_omits_password_and_absent_name():
	claims = decode_token(create_access_token(email="a@clinic.test", role=Role.FRONT_DESK))
	assert "name" not in claims
	assert "password" not in claims


def test_expired_token_is_rejected(auth_settings):
	token = _encode(auth_settings, sub="a@clinic.test", role="ADMINISTRATOR", exp=_in(-5))
	with pytest.raises(TokenError):
		decode_token(token)


def test_token_signed_with_another_secret_is_rejected(auth_settings):
	token = jwt.encode(
		{"sub": "a@clinic.test", "exp": _in(5)}, "some-other-secret", algorithm=auth_settings.jwt_algorithm
	)
	with pytest.raises(TokenError):
		decode_token(token)


def test_token_without_expiry_is_rejected(auth_settings):
	token = _encode(auth_settings, sub="a@clinic.test", role="ADMINISTRATOR")
	with pytest.raises(TokenError):
		decode_token(token)


def test_token_without_subject_is_rejected(auth_settings):
	token = _encode(auth_settings, role="ADMINISTRATOR", exp=_in(5))
	with pytest.raises(TokenError):
		decode_token(token)


def test_non_access_token_is_rejected(auth_settings):
	token = _encode(auth_settings, sub="a@clinic.test", type="refresh", exp=_in(5))
	with pytest.raises(TokenError):
		decode_token(token)


def test_legacy_token_without_role_or_type_is_decoded(auth_settings):
	token = _encode(auth_settings, sub="legacy@clinic.test", exp=_in(5))
	claims = decode_token(token)
	assert claims["sub"] == "legacy@clinic.test"
	assert "role" not in claims


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
def test_malformed_token_is_rejected(garbage):
	with pytest.raises(TokenError):
		decode_token(garbage)


def test_password_hash_is_one_way_and_verifiable():
	hashed = get_password_hash("s3cret-pass")
	assert hashed != "s3cret-pass"
	assert verify_password("s3cret-pass", hashed)
	assert not verify_password("wrong-pass", hashed)


def test_unrecognised_stored_hash_never_verifies():
	assert not verify_password("plain", "plain")
