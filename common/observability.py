"""Health and metrics endpoints mounted on every service."""
from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

HealthCheck = Callable[[AsyncSession | None], Awaitable[None] | None]


class HealthCheckFailed(HTTPException):
	def __init__(self, check: str, exc: Exception):
		super().__init__(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			detail={"status": "error", "check": check, "error": str(exc)},
		)


async def ping_database(db: AsyncSession | None) -> None:
	await db.execute(text("SELECT 1"))


async def run_health_checks(
	checks: Mapping[str, HealthCheck], db: AsyncSession | None
) -> dict[str, str]:
	"""Run checks in order. The first failure aborts with a 503 naming the check."""
	results: dict[str, str] = {}
	for name, check in checks.items():
		try:
			outcome = check(db)
			if inspect.isawaitable(outcome):
				await outcome
		except Exception as exc:
			raise HealthCheckFailed(name, exc) from exc
		results[name] = "ok"
	return results


def _healthy(results: dict[str, str]) -> JSONResponse:
	return JSONResponse({"status": "ok", "checks": results})


def configure_observability(
	app: FastAPI,
	*,
	settings: Any,
	get_db: Callable[[], AsyncSession] | None = None,
	extra_checks: Mapping[str, HealthCheck] | None = None,
) -> None:
	"""
	Mount ``GET /healthz`` and ``GET /metrics``.

	With ``get_db`` the database is pinged before the extra checks; without it
	the database is reported as skipped. Request instrumentation is attached
	only when ``metrics_enabled`` is set, and ``/metrics`` answers 404 otherwise.
	"""
	metrics_enabled = bool(getattr(settings, "metrics_enabled", False))
	if metrics_enabled:
		app.state.instrumentator = Instrumentator().instrument(app)

	if get_db is not None:
		checks = {"database": ping_database, **(extra_checks or {})}

		@app.get("/healthz", include_in_schema=False)
		async def healthz(db: AsyncSession = Depends(get_db)) -> JSONResponse:
			return _healthy(await run_health_checks(checks, db))

	else:
		checks = dict(extra_checks or {})

		@app.get("/healthz", include_in_schema=False)
		async def healthz() -> JSONResponse:
			return _healthy({"database": "skipped", **await run_health_checks(checks, None)})

	@app.get("/metrics", include_in_schema=False)
	def metrics() -> Response:
		if not metrics_enabled:
			return JSONResponse({"detail": "Metrics disabled"}, status_code=status.HTTP_404_NOT_FOUND)
		return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
