from common import BaseServiceSettings, Role, make_get_settings
from common.roles import MISSING_ROLE_FALLBACK


class Settings(BaseServiceSettings):
	app_name: str = "API Gateway"
	root_prefix: str = "/api"

	auth_service_url: str | None = None
	patient_service_url: str | None = None
	analytics_service_url: str | None = None

	# Paths (after the root prefix is stripped) gated by the method/role matrix
	protected_prefixes: list[str] = ["/patients"]

	validation_timeout_seconds: float = 3.0
	upstream_timeout_seconds: float = 30.0
	missing_role_fallback: Role = MISSING_ROLE_FALLBACK
	forward_identity_headers: bool = False


get_settings = make_get_settings(Settings)
