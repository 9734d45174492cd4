from contextlib import asynccontextmanager

from fastapi import FastAPI

from common import configure_logging, configure_observability, install_error_handlers

from .clients import build_authority_client, build_upstream_client
from .config import get_settings
from .routers import gateway_router


settings = get_settings()
configure_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
	app.state.authority_client = build_authority_client(settings)
	app.state.upstream_client = build_upstream_client(settings)
	try:
		yield
	finally:
		if app.state.authority_client is not None:
			await app.state.authority_client.aclose()
		await app.state.upstream_client.aclose()


app = FastAPI(title=settings.app_name, lifespan=lifespan)


async def _check_auth_service(_: object) -> None:
	authority = getattr(app.state, "authority_client", None)
	if authority is None:
		return
	await authority.ping()


install_error_handlers(app)
configure_observability(
	app,
	settings=settings,
	get_db=None,
	extra_checks={"auth_service": _check_auth_service},
)

app.include_router(gateway_router, prefix=settings.root_prefix.rstrip("/"))
