import logging
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Any) -> None:
	"""Configure root logging once, at the service's ``log_level``."""
	level = str(getattr(settings, "log_level", "INFO")).upper()
	logging.basicConfig(level=level, format=LOG_FORMAT)
	logging.getLogger().setLevel(level)
