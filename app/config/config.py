import os
import shlex


def read_env(name: str, default: str | None = None, required: bool = False) -> str | None:
	value = os.environ.get(name, default)
	if required and (value is None or value == ""):
		raise RuntimeError(f"Missing required environment variable: {name}")
	return value


def read_int_env(name: str, default: int) -> int:
	raw = read_env(name, str(default))
	try:
		return int(raw or default)
	except (TypeError, ValueError):
		return default


class AppConfig:
	def __init__(self) -> None:
		self.env = (read_env("ENV", "prod") or "prod").lower()
		self.host = read_env("HOST", "0.0.0.0")
		self.port = read_int_env("PORT", 8080)
		self.frontend_url = read_env("FRONTEND_URL", "http://localhost:3000") or "http://localhost:3000"
		self.github_api_url = (read_env("GITHUB_API_URL", "https://api.github.com") or "").rstrip("/")
		self.github_oauth_url = (read_env("GITHUB_OAUTH_URL", "https://github.com") or "").rstrip("/")
		self.github_client_id = read_env("GITHUB_CLIENT_ID")
		self.github_client_secret = read_env("GITHUB_CLIENT_SECRET")
		self.github_redirect_uri = read_env("GITHUB_REDIRECT_URI", "http://localhost:8080/auth/callback")
		self.github_token = read_env("GITHUB_TOKEN")
		self.agent_command = read_env("AGENT_COMMAND", "claude") or "claude"
		self.agent_print_args = self._read_args("AGENT_PRINT_ARGS", "--print")
		self.agent_timeout_ms = read_int_env("AGENT_TIMEOUT_MS", 300_000)
		self.daily_timeout_ms = read_int_env("DAILY_AGENT_TIMEOUT_MS", 120_000)
		self.weekly_timeout_ms = read_int_env("WEEKLY_AGENT_TIMEOUT_MS", 180_000)
		self.report_language = read_env("REPORT_LANGUAGE", "Spanish") or "Spanish"

	@property
	def cookie_secure(self) -> bool:
		return self.env == "prod"

	def require_github_token(self) -> str:
		return read_env("GITHUB_TOKEN", required=True) or ""

	@staticmethod
	def _read_args(name: str, default: str) -> list[str]:
		raw = read_env(name, default)
		if raw is None:
			return []
		return shlex.split(raw)
