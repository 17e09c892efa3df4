from .config import AppConfig, read_env
from .logging_config import configure_logging

__all__ = ["AppConfig", "configure_logging", "read_env"]
