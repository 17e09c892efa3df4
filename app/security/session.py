import time
import uuid
from typing import Any

from fastapi import HTTPException, Request, Response

from ..config.config import AppConfig
from ..storage.json_store import load_json, update_json

SESSION_COOKIE = "sid"
SESSION_MAX_AGE = 7 * 24 * 3600
SESSION_DOC = "sessions.json"


def get_session(request: Request) -> dict[str, Any] | None:
	sid = request.cookies.get(SESSION_COOKIE)
	if not sid:
		return None
	sessions: dict[str, Any] = load_json(SESSION_DOC, {})
	sess = sessions.get(sid)
	if not sess or int(time.time()) - int(sess.get("created_at", 0)) > SESSION_MAX_AGE:
		return None
	return sess


def create_session(user: dict[str, Any], oauth_token: str | None = None) -> str:
	sid = str(uuid.uuid4())

	def mutate(sessions: dict[str, Any]) -> dict[str, Any]:
		sessions[sid] = {"user": user, "oauth_token": oauth_token, "created_at": int(time.time())}
		return sessions

	update_json(SESSION_DOC, {}, mutate)
	return sid


def set_session(response: Response, user: dict[str, Any], oauth_token: str | None = None) -> str:
	sid = create_session(user, oauth_token)
	response.set_cookie(
		key=SESSION_COOKIE,
		value=sid,
		max_age=SESSION_MAX_AGE,
		httponly=True,
		secure=AppConfig().cookie_secure,
		samesite="lax",
	)
	return sid


def clear_session(response: Response, request: Request) -> None:
	sid = request.cookies.get(SESSION_COOKIE)
	if not sid:
		return

	def mutate(sessions: dict[str, Any]) -> dict[str, Any]:
		sessions.pop(sid, None)
		return sessions

	update_json(SESSION_DOC, {}, mutate)
	response.delete_cookie(SESSION_COOKIE)


def require_auth(request: Request) -> dict[str, Any]:
	sess = get_session(request)
	if not sess or "user" not in sess:
		raise HTTPException(status_code=401, detail="Unauthorized")
	return sess


def require_github_session(request: Request) -> dict[str, Any]:
	"""Session that can act on GitHub: needs the access token and the author email."""
	sess = require_auth(request)
	if not sess.get("oauth_token") or not (sess["user"].get("email")):
		raise HTTPException(status_code=401, detail="Unauthorized")
	return sess
