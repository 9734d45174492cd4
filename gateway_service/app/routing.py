from __future__ import annotations

from dataclasses import dataclass

from .config import Settings


@dataclass(frozen=True)
class UpstreamRoute:
	prefix: str
	upstream_url: str | None
	requires_auth: bool = True
	strip: str = ""

	def upstream_path(self, path: str) -> str:
		if self.strip and path_matches(path, self.strip):
			return path[len(self.strip):] or "/"
		return path


def path_matches(path: str, prefix: str) -> bool:
	"""Segment-aware prefix test: ``/patients`` matches ``/patients/1`` but not ``/patientsx``."""
	prefix = prefix.rstrip("/")
	return path == prefix or path.startswith(prefix + "/")


def build_routes(settings: Settings) -> list[UpstreamRoute]:
	routes = [
		# user administration is authenticated here and authorised again by the auth service
		UpstreamRoute("/auth/users", settings.auth_service_url, requires_auth=True, strip="/auth"),
		UpstreamRoute("/auth", settings.auth_service_url, requires_auth=False, strip="/auth"),
		UpstreamRoute("/patients", settings.patient_service_url),
		UpstreamRoute("/analytics", settings.analytics_service_url),
	]
	return sorted(routes, key=lambda route: len(route.prefix), reverse=True)


def match_route(routes: list[UpstreamRoute], path: str) -> UpstreamRoute | None:
	for route in routes:
		if path_matches(path, route.prefix):
			return route
	return None


def is_protected(path: str, protected_prefixes: list[str]) -> bool:
	return any(path_matches(path, prefix) for prefix in protected_prefixes)
