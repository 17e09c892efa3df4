from __future__ import annotations

import urllib.parse
from abc import ABC, abstractmethod
from typing import Any

import httpx

GITHUB_SCOPES = "read:user user:email read:org repo"


class OAuthProvider(ABC):
	@abstractmethod
	def build_authorize_url(self, state: str) -> str: ...

	@abstractmethod
	def exchange_code(self, code: str) -> dict[str, Any]: ...

	@abstractmethod
	def api_get_user(self, access_token: str) -> dict[str, Any]: ...


class GitHubOAuthProvider(OAuthProvider):
	def __init__(
		self,
		oauth_url: str,
		api_url: str,
		client_id: str | None,
		client_secret: str | None,
		redirect_uri: str,
		timeout: float = 15.0,
	) -> None:
		self.oauth_url = oauth_url.rstrip("/")
		self.api_url = api_url.rstrip("/")
		self.client_id = client_id or ""
		self.client_secret = client_secret or ""
		self.redirect_uri = redirect_uri
		self.timeout = timeout

	def build_authorize_url(self, state: str) -> str:
		params = {
			"client_id": self.client_id,
			"redirect_uri": self.redirect_uri,
			"scope": GITHUB_SCOPES,
			"state": state,
		}
		return f"{self.oauth_url}/login/oauth/authorize?{urllib.parse.urlencode(params)}"

	def exchange_code(self, code: str) -> dict[str, Any]:
		resp = httpx.post(
			f"{self.oauth_url}/login/oauth/access_token",
			headers={"Accept": "application/json"},
			data={
				"client_id": self.client_id,
				"client_secret": self.client_secret,
				"code": code,
				"redirect_uri": self.redirect_uri,
			},
			timeout=self.timeout,
		)
		resp.raise_for_status()
		return resp.json()

	def api_get_user(self, access_token: str) -> dict[str, Any]:
		headers = {"Accept": "application/vnd.github+json", "Authorization": f"Bearer {access_token}"}
		with httpx.Client(base_url=self.api_url, headers=headers, timeout=self.timeout) as client:
			resp = client.get("/user")
			resp.raise_for_status()
			user = resp.json()
			if not user.get("email"):
				# Private emails are only exposed through the emails endpoint
				emails = client.get("/user/emails")
				if emails.status_code == 200:
					primary = next((e for e in emails.json() if e.get("primary") and e.get("verified")), None)
					if primary:
						user["email"] = primary.get("email")
		return user
