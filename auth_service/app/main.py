from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool

from common import configure_logging, configure_observability, install_error_handlers

from .config import get_settings
from .database import async_engine, get_db
from .migrations_runner import run_migrations
from .routers import auth_router


settings = get_settings()
configure_logging(settings)


@asynccontextmanager
async def lifespan(_: FastAPI):
	if settings.run_migrations_on_startup:
		await run_in_threadpool(run_migrations)
	yield
	await async_engine.dispose()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

install_error_handlers(app)
configure_observability(app, settings=settings, get_db=get_db)

app.include_router(auth_router)
