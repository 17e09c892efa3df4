import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse

from ..config.config import AppConfig
from ..security.session import clear_session, require_auth, set_session
from . import service as auth_service

_LOGGER = logging.getLogger(__name__)
router = APIRouter(prefix="/auth")


@router.get("/login")
async def login() -> RedirectResponse:
	state = auth_service.create_state()
	return RedirectResponse(auth_service.build_authorize_url(state), status_code=302)


@router.get("/callback")
async def callback(code: str | None = None, state: str | None = None) -> RedirectResponse:
	if not code or not auth_service.consume_state(state):
		raise HTTPException(status_code=400, detail="Invalid or expired OAuth state")
	try:
		token_data = auth_service.exchange_code(code)
		access_token = token_data.get("access_token")
		if not access_token:
			raise HTTPException(status_code=400, detail="GitHub did not return an access token")
		gh_user = auth_service.api_get_user(access_token)
	except httpx.HTTPError as e:
		_LOGGER.warning("GitHub OAuth exchange failed", extra={"error": str(e)})
		raise HTTPException(status_code=502, detail="GitHub authentication failed")
	user = {
		"id": str(gh_user.get("id")),
		"login": gh_user.get("login"),
		"email": gh_user.get("email"),
		"name": gh_user.get("name"),
		"avatar_url": gh_user.get("avatar_url"),
	}
	response = RedirectResponse(AppConfig().frontend_url, status_code=302)
	set_session(response, user, oauth_token=access_token)
	_LOGGER.info("User signed in", extra={"user_id": user["id"]})
	return response


@router.post("/logout")
async def logout(request: Request) -> JSONResponse:
	response = JSONResponse({"success": True})
	clear_session(response, request)
	return response


@router.get("/me")
async def me(session: dict[str, Any] = Depends(require_auth)) -> dict[str, Any]:
	return session["user"]
