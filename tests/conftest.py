"""
Shared fixtures for the authority and gateway test suites.

Environment is configured before any service module is imported: both
services read their settings once, at import time.
"""

import json
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path

_DB_FILE = Path(tempfile.mkdtemp(prefix="care-access-tests-")) / "accounts.db"

os.environ["JWT_SECRET"] = "test-signing-secret-0123456789abcdef"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ["DATABASE_URL_ASYNC"] = f"sqlite+aiosqlite:///{_DB_FILE}"
os.environ["METRICS_ENABLED"] = "false"
os.environ["AUTH_SERVICE_URL"] = "http://auth.test"
os.environ["PATIENT_SERVICE_URL"] = "http://patients.test"
os.environ["ANALYTICS_SERVICE_URL"] = "http://analytics.test"

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402

from auth_service.app import models  # noqa: E402
from auth_service.app.config import get_settings as get_auth_settings  # noqa: E402
from auth_service.app.database import Base, SessionLocal  # noqa: E402
from auth_service.app.main import app as auth_app  # noqa: E402
from auth_service.app.security import get_password_hash  # noqa: E402
from gateway_service.app.clients import (  # noqa: E402
	AuthorityClient,
	get_authority_client,
	get_upstream_client,
)
from gateway_service.app.main import app as gateway_app  # noqa: E402


# -----------------------
# Account store
# -----------------------

@pytest.fixture(autouse=True)
def account_tables():
	engine = create_engine(os.environ["DATABASE_URL"])
	Base.metadata.create_all(engine)
	yield
	Base.metadata.drop_all(engine)
	engine.dispose()


@pytest.fixture
async def db_session():
	async with SessionLocal() as session:
		yield session


@pytest.fixture
def auth_settings():
	return get_auth_settings()


@pytest.fixture
def make_account():
	"""Insert an account directly, bypassing registration (legacy rows, admins)."""

	async def _make(
		email: str,
		password: str = "correct horse",
		*,
		role: str | None = "FRONT_DESK",
		name: str | None = "Test User",
	) -> models.Account:
		async with SessionLocal() as session:
			account = models.Account(
				email=email,
				password=get_password_hash(password),
				role=role,
				name=name,
			)
			session.add(account)
			await session.commit()
			await session.refresh(account)
			return account

	return _make


@pytest.fixture
async def auth_client():
	transport = httpx.ASGITransport(app=auth_app)
	async with httpx.AsyncClient(transport=transport, base_url="http://auth.test") as client:
		yield client


# -----------------------
# Gateway fakes
# -----------------------

class FakeAuthority:
	"""MockTransport handler standing in for the token authority's /validate."""

	def __init__(
		self,
		*,
		email: str | None = "user@clinic.test",
		role: str | None = "FRONT_DESK",
		valid: bool = True,
		status_code: int = 200,
		error: type[httpx.TransportError] | None = None,
		body: bytes | None = None,
	):
		self.email = email
		self.role = role
		self.valid = valid
		self.status_code = status_code
		self.error = error
		self.body = body
		self.requests: list[httpx.Request] = []

	@property
	def calls(self) -> int:
		return len(self.requests)

	def __call__(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		if self.error is not None:
			raise self.error("authority unavailable", request=request)
		if self.body is not None:
			return httpx.Response(self.status_code, content=self.body)
		if self.status_code != 200:
			return httpx.Response(self.status_code)
		payload = {"email": self.email, "valid": self.valid}
		if self.role is not None:
			payload["role"] = self.role
		return httpx.Response(200, json=payload)


class UpstreamRecorder:
	"""MockTransport handler recording every request forwarded upstream."""

	def __init__(self):
		self.requests: list[httpx.Request] = []

	@property
	def calls(self) -> int:
		return len(self.requests)

	def __call__(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		body = json.dumps({"method": request.method, "path": request.url.path}).encode()
		# unread stream, as a real upstream delivers it to the proxy
		return httpx.Response(
			200,
			stream=httpx.ByteStream(body),
			headers={
				"Content-Type": "application/json",
				"X-Upstream": request.url.host,
				"Connection": "keep-alive",
			},
		)


@pytest.fixture
def upstream():
	return UpstreamRecorder()


@pytest.fixture
def make_authority_client():
	def _make(transport: httpx.AsyncBaseTransport) -> AuthorityClient:
		return AuthorityClient(httpx.AsyncClient(transport=transport, base_url="http://auth.test"))

	return _make


@pytest.fixture
def gateway(upstream, make_authority_client):
	"""Build an in-process client for the gateway, wired to the given authority transport."""

	@asynccontextmanager
	async def _gateway(authority_transport: httpx.AsyncBaseTransport):
		authority = make_authority_client(authority_transport)
		upstream_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
		gateway_app.dependency_overrides[get_authority_client] = lambda: authority
		gateway_app.dependency_overrides[get_upstream_client] = lambda: upstream_client
		try:
			transport = httpx.ASGITransport(app=gateway_app)
			async with httpx.AsyncClient(transport=transport, base_url="http://gateway.test") as client:
				yield client
		finally:
			gateway_app.dependency_overrides.clear()
			await authority.aclose()
			await upstream_client.aclose()

	return _gateway
