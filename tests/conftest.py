import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so `import app` works under pytest
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
	sys.path.insert(0, str(ROOT_DIR))

from app.agent.generator import SummaryGenerator
from app.vcs.base import CommitSource
from app.vcs.exceptions import GitHubAPIError
from app.vcs.models import Commit, CommitAuthor, Organization, Repository


def make_commit(sha: str, message: str, email: str = "dev@example.com") -> Commit:
	return Commit(sha=sha, message=message, author=CommitAuthor(name="Dev", email=email, date="2025-03-04T10:00:00Z"))


class FakeCommitSource(CommitSource):
	def __init__(
		self,
		commits: dict[str, list[Commit]] | None = None,
		organizations: list[Organization] | None = None,
		fail_repo_listing: bool = False,
	) -> None:
		self.commits = commits or {}
		self.organizations = organizations or []
		self.fail_repo_listing = fail_repo_listing
		self.commit_calls: list[tuple[str, str, str, datetime, datetime]] = []
		self.repo_calls: list[str] = []
		self.closed = False

	async def list_organizations(self) -> list[Organization]:
		return list(self.organizations)

	async def list_org_repositories(self, org: str) -> list[Repository]:
		self.repo_calls.append(org)
		if self.fail_repo_listing:
			raise GitHubAPIError("boom", status_code=502)
		return [Repository(id=i, name=name, full_name=f"{org}/{name}") for i, name in enumerate(self.commits, start=1)]

	async def list_repo_commits(self, org, repo, author_email, since, until) -> list[Commit]:
		self.commit_calls.append((org, repo, author_email, since, until))
		return list(self.commits.get(repo, []))

	async def get_commit_detail(self, org, repo, sha):
		for c in self.commits.get(repo, []):
			if c.sha == sha:
				return c
		return None

	async def aclose(self) -> None:
		self.closed = True


class FakeInvoker:
	def __init__(self, available: bool = True, output: str = "AI summary", error: Exception | None = None) -> None:
		self.available = available
		self.output = output
		self.error = error
		self.prompts: list[str] = []
		self.timeouts: list[int | None] = []

	async def is_available(self) -> bool:
		return self.available

	async def invoke(self, prompt: str, timeout_ms: int | None = None, on_progress=None, on_stderr=None) -> str:
		self.prompts.append(prompt)
		self.timeouts.append(timeout_ms)
		if self.error is not None:
			raise self.error
		return self.output


@pytest.fixture
def tmp_data_dir(tmp_path, monkeypatch):
	# Force isolated data dir per test and rebuild the store singleton
	monkeypatch.setenv("DATA_DIR", str(tmp_path))
	monkeypatch.delenv("MONGO_URL", raising=False)
	monkeypatch.delenv("MONGO_HOST", raising=False)
	from app.storage.provider import reset_kv_store
	reset_kv_store()
	yield tmp_path
	reset_kv_store()


@pytest.fixture
def fake_source() -> FakeCommitSource:
	return FakeCommitSource(
		commits={
			"api": [make_commit("a" * 40, "Add login endpoint\n\nlong body"), make_commit("b" * 40, "Merge pull request #4 from x/y")],
			"web": [make_commit("c" * 40, "Fix navbar overflow")],
			"docs": [],
		},
		organizations=[Organization(id=10, login="acme", avatar_url="http://a/acme.png", description="Acme Inc")],
	)


@pytest.fixture
def fake_invoker() -> FakeInvoker:
	return FakeInvoker(available=False)


@pytest.fixture
def services(tmp_data_dir, monkeypatch, fake_source, fake_invoker):
	monkeypatch.setenv("FRONTEND_URL", "http://localhost:3000")
	monkeypatch.setenv("ENV", "dev")
	from app.config.config import AppConfig
	from app.reports.service import ReportService
	from app.server.bootstrap import Services

	def source_factory(token: str) -> FakeCommitSource:
		return fake_source

	reports = ReportService(source_factory=source_factory, generator=SummaryGenerator(fake_invoker), language="English")
	return Services(config=AppConfig(), source_factory=source_factory, invoker=fake_invoker, reports=reports)


@pytest.fixture
def app_client(services):
	from app.server.http import create_app
	app = create_app(services)
	return TestClient(app, follow_redirects=False)


DEFAULT_USER: dict[str, Any] = {"id": "42", "login": "dev", "email": "dev@example.com", "name": "Dev", "avatar_url": ""}


def login(client: TestClient, user: dict[str, Any] | None = None, token: str | None = "gh-token") -> dict[str, Any]:
	from app.security.session import SESSION_COOKIE, create_session
	user = user or DEFAULT_USER
	sid = create_session(user, oauth_token=token)
	client.cookies.set(SESSION_COOKIE, sid)
	return user


@pytest.fixture
def auth_client(app_client):
	login(app_client)
	return app_client
