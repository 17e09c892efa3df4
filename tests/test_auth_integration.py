from urllib.parse import parse_qs, urlparse

import httpx

from app.auth import service as auth_service


def _login_state(client) -> str:
	resp = client.get("/auth/login")
	assert resp.status_code == 302
	location = urlparse(resp.headers["location"])
	assert location.path == "/login/oauth/authorize"
	return parse_qs(location.query)["state"][0]


def test_oauth_login_callback_me_logout(app_client, monkeypatch):
	monkeypatch.setattr(auth_service, "exchange_code", lambda code: {"access_token": "gh-token"})
	monkeypatch.setattr(
		auth_service,
		"api_get_user",
		lambda token: {"id": 42, "login": "dev", "email": "dev@example.com", "name": "Dev", "avatar_url": "http://a"},
	)

	state = _login_state(app_client)
	resp = app_client.get("/auth/callback", params={"code": "abc", "state": state})
	assert resp.status_code == 302
	assert resp.headers["location"] == "http://localhost:3000"
	assert "sid" in resp.cookies

	me = app_client.get("/auth/me")
	assert me.status_code == 200
	assert me.json()["id"] == "42"
	assert me.json()["email"] == "dev@example.com"

	sid = app_client.cookies.get("sid")
	out = app_client.post("/auth/logout")
	assert out.status_code == 200
	assert out.json() == {"success": True}
	# the old cookie must not resurrect the session
	app_client.cookies.clear()
	app_client.cookies.set("sid", sid)
	assert app_client.get("/auth/me").status_code == 401


def test_callback_rejects_unknown_or_reused_state(app_client, monkeypatch):
	monkeypatch.setattr(auth_service, "exchange_code", lambda code: {"access_token": "gh-token"})
	monkeypatch.setattr(auth_service, "api_get_user", lambda token: {"id": 1, "email": "a@b.c"})

	resp = app_client.get("/auth/callback", params={"code": "abc", "state": "forged"})
	assert resp.status_code == 400
	assert resp.json() == {"error": "Invalid or expired OAuth state"}

	state = _login_state(app_client)
	assert app_client.get("/auth/callback", params={"code": "abc", "state": state}).status_code == 302
	assert app_client.get("/auth/callback", params={"code": "abc", "state": state}).status_code == 400


def test_callback_reports_github_failure(app_client, monkeypatch):
	def fail(code):
		raise httpx.ConnectError("down")

	monkeypatch.setattr(auth_service, "exchange_code", fail)
	state = _login_state(app_client)
	resp = app_client.get("/auth/callback", params={"code": "abc", "state": state})
	assert resp.status_code == 502
	assert resp.json() == {"error": "GitHub authentication failed"}


def test_callback_without_access_token(app_client, monkeypatch):
	monkeypatch.setattr(auth_service, "exchange_code", lambda code: {"error": "bad_verification_code"})
	state = _login_state(app_client)
	resp = app_client.get("/auth/callback", params={"code": "abc", "state": state})
	assert resp.status_code == 400


def test_me_requires_session(app_client):
	resp = app_client.get("/auth/me")
	assert resp.status_code == 401
	assert resp.json() == {"error": "Unauthorized"}
