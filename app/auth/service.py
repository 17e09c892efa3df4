from __future__ import annotations

import time
import uuid
from typing import Any

from ..config.config import AppConfig
from ..storage.json_store import update_json
from .provider import GitHubOAuthProvider

STATE_DOC = "oauth_state.json"
STATE_TTL_SECONDS = 10 * 60


def _provider() -> GitHubOAuthProvider:
	cfg = AppConfig()
	return GitHubOAuthProvider(
		oauth_url=cfg.github_oauth_url,
		api_url=cfg.github_api_url,
		client_id=cfg.github_client_id,
		client_secret=cfg.github_client_secret,
		redirect_uri=cfg.github_redirect_uri or "",
	)


def build_authorize_url(state: str) -> str:
	return _provider().build_authorize_url(state)


def exchange_code(code: str) -> dict[str, Any]:
	return _provider().exchange_code(code)


def api_get_user(access_token: str) -> dict[str, Any]:
	return _provider().api_get_user(access_token)


def create_state() -> str:
	state = uuid.uuid4().hex
	now = int(time.time())

	def mutate(states: dict[str, Any]) -> dict[str, Any]:
		fresh = {k: v for k, v in states.items() if now - int(v.get("created_at", 0)) < STATE_TTL_SECONDS}
		fresh[state] = {"created_at": now}
		return fresh

	update_json(STATE_DOC, {}, mutate)
	return state


def consume_state(state: str | None) -> bool:
	if not state:
		return False
	now = int(time.time())
	found: list[bool] = []

	def mutate(states: dict[str, Any]) -> dict[str, Any]:
		entry = states.pop(state, None)
		found.append(entry is not None and now - int(entry.get("created_at", 0)) < STATE_TTL_SECONDS)
		return states

	update_json(STATE_DOC, {}, mutate)
	return bool(found and found[-1])
