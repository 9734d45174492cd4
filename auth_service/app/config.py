from common import DatabaseServiceSettings, Role, make_get_settings
from common.roles import MISSING_ROLE_FALLBACK


class Settings(DatabaseServiceSettings):
	app_name: str = "Auth Service"
	jwt_secret: str
	jwt_algorithm: str = "HS256"
	access_token_expire_minutes: int = 60
	missing_role_fallback: Role = MISSING_ROLE_FALLBACK
	# Reject tokens minted before the account's last role change
	enforce_token_version: bool = False
	run_migrations_on_startup: bool = False


get_settings = make_get_settings(Settings)
