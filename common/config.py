"""Settings base classes shared by every service."""
from functools import lru_cache
from typing import Callable

from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseServiceSettings(BaseSettings):
	app_name: str
	metrics_enabled: bool = True
	log_level: str = "INFO"

	model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class DatabaseServiceSettings(BaseServiceSettings):
	"""Settings of a service that owns a database."""

	database_url: str
	database_url_async: str | None = None

	# Connection pool; ignored for SQLite
	db_pool_size: int = 10
	db_max_overflow: int = 20
	db_pool_timeout: int = 30  # seconds
	db_pool_recycle: int = 1800  # seconds


def make_get_settings(settings_class: type[BaseServiceSettings]) -> Callable:
	"""
	Build a cached ``get_settings`` accessor for a service.

	Settings are read from the environment once per process.
	"""
	@lru_cache
	def get_settings() -> BaseServiceSettings:
		return settings_class()

	return get_settings
