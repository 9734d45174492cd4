"""Async database plumbing shared by services that own a database."""
from collections.abc import AsyncIterator
from typing import Any, Callable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool


class Base(DeclarativeBase):
	pass


def resolve_async_url(database_url: str, database_url_async: str | None) -> str:
	"""
	Derive the async driver URL from the sync one.

	Args:
		database_url: Sync URL, also used by Alembic
		database_url_async: Explicit async URL; wins when set

	Returns:
		URL usable with ``create_async_engine``

	Raises:
		ValueError: The scheme is not PostgreSQL and no async URL was given
	"""
	if database_url_async:
		return database_url_async
	if "+asyncpg" in database_url:
		return database_url
	replacements = [
		("+psycopg2", "+asyncpg"),
		("+psycopg", "+asyncpg"),
		("postgresql://", "postgresql+asyncpg://"),
		("postgres://", "postgresql+asyncpg://"),
	]
	for needle, replacement in replacements:
		if needle in database_url:
			return database_url.replace(needle, replacement, 1)
	raise ValueError(
		"Cannot derive an async database URL: set database_url_async or use PostgreSQL"
	)


def _pool_options(url: str, settings: Any) -> dict[str, Any]:
	# SQLite connections must not outlive the event loop that opened them
	if url.startswith("sqlite"):
		return {"poolclass": NullPool}
	return {
		"pool_pre_ping": True,
		"pool_size": settings.db_pool_size,
		"max_overflow": settings.db_max_overflow,
		"pool_timeout": settings.db_pool_timeout,
		"pool_recycle": settings.db_pool_recycle,
	}


def create_database_engines(
	get_settings: Callable,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
	"""Build the async engine and session factory from a service's DatabaseServiceSettings."""
	settings = get_settings()
	url = resolve_async_url(settings.database_url, settings.database_url_async)

	async_engine = create_async_engine(url, **_pool_options(url, settings))

	SessionLocal = async_sessionmaker(
		async_engine,
		expire_on_commit=False,
		autoflush=False,
		class_=AsyncSession,
	)

	return async_engine, SessionLocal


def make_get_db(SessionLocal: async_sessionmaker) -> Callable:
	async def get_db() -> AsyncIterator[AsyncSession]:
		async with SessionLocal() as session:
			yield session

	return get_db
