import logging
import os


def configure_logging() -> logging.Logger:
	level_name = os.environ.get("LOG_LEVEL", "DEBUG").upper()
	logging.basicConfig(level=level_name, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
	# httpx logs every request line at INFO
	logging.getLogger("httpx").setLevel(os.environ.get("HTTPX_LOG_LEVEL", "WARNING").upper())
	return logging.getLogger("standup_digest")
