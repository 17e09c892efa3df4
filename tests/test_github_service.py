import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from app.vcs.exceptions import GitHubAPIError
from app.vcs.github_service import PAGE_SIZE, GitHubService, to_github_timestamp


def _commit(i: int) -> dict:
	return {
		"sha": f"{i:040d}",
		"commit": {"message": f"commit {i}", "author": {"name": "Dev", "email": "dev@example.com", "date": "2025-03-04T10:00:00Z"}},
	}


def _repo(i: int) -> dict:
	return {"id": i, "name": f"repo-{i}", "full_name": f"acme/repo-{i}"}


def _run(service: GitHubService, coro):
	async def main():
		try:
			return await coro
		finally:
			await service.aclose()
	return asyncio.run(main())


def _service(handler) -> tuple[GitHubService, list[httpx.Request]]:
	seen: list[httpx.Request] = []

	def record(request: httpx.Request) -> httpx.Response:
		seen.append(request)
		return handler(request)

	return GitHubService("tok", transport=httpx.MockTransport(record)), seen


SINCE = datetime(2025, 3, 4, tzinfo=timezone.utc)
UNTIL = datetime(2025, 3, 4, 23, 59, 59, 999000, tzinfo=timezone.utc)


def test_timestamp_format_has_millis_and_z():
	assert to_github_timestamp(SINCE) == "2025-03-04T00:00:00.000Z"
	assert to_github_timestamp(UNTIL) == "2025-03-04T23:59:59.999Z"
	assert to_github_timestamp(datetime(2025, 3, 4, 8, 30)) == "2025-03-04T08:30:00.000Z"


def test_repositories_paginate_until_short_page():
	def handler(request):
		page = int(request.url.params["page"])
		size = PAGE_SIZE if page == 1 else 30
		start = (page - 1) * PAGE_SIZE
		return httpx.Response(200, json=[_repo(start + i) for i in range(size)])

	service, seen = _service(handler)
	repos = _run(service, service.list_org_repositories("acme"))
	assert len(repos) == 130
	assert len(seen) == 2
	assert seen[0].url.path == "/orgs/acme/repos"
	assert seen[0].url.params["per_page"] == "100"
	assert seen[0].url.params["type"] == "all"
	assert seen[0].headers["Authorization"] == "Bearer tok"


def test_exact_page_multiple_makes_one_extra_request():
	def handler(request):
		page = int(request.url.params["page"])
		if page == 1:
			return httpx.Response(200, json=[_commit(i) for i in range(PAGE_SIZE)])
		return httpx.Response(200, json=[])

	service, seen = _service(handler)
	commits = _run(service, service.list_repo_commits("acme", "api", "dev@example.com", SINCE, UNTIL))
	assert len(commits) == 100
	assert len(seen) == 2
	params = seen[0].url.params
	assert params["author"] == "dev@example.com"
	assert params["since"] == "2025-03-04T00:00:00.000Z"
	assert params["until"] == "2025-03-04T23:59:59.999Z"


def test_repository_listing_failure_propagates():
	service, _ = _service(lambda request: httpx.Response(403, json={"message": "Forbidden"}))
	with pytest.raises(GitHubAPIError) as exc_info:
		_run(service, service.list_org_repositories("acme"))
	assert exc_info.value.status_code == 403
	assert "Forbidden" in str(exc_info.value)


def test_commit_listing_failure_keeps_collected_pages():
	def handler(request):
		if request.url.params["page"] == "1":
			return httpx.Response(200, json=[_commit(i) for i in range(PAGE_SIZE)])
		return httpx.Response(500, json={"message": "oops"})

	service, seen = _service(handler)
	commits = _run(service, service.list_repo_commits("acme", "api", "dev@example.com", SINCE, UNTIL))
	assert len(commits) == 100
	assert len(seen) == 2


def test_empty_repository_yields_no_commits():
	service, _ = _service(lambda request: httpx.Response(409, json={"message": "Git Repository is empty."}))
	commits = _run(service, service.list_repo_commits("acme", "empty", "dev@example.com", SINCE, UNTIL))
	assert commits == []


def test_commit_detail_parses_stats_and_files():
	def handler(request):
		assert request.url.path == "/repos/acme/api/commits/abc"
		return httpx.Response(
			200,
			json={
				**_commit(1),
				"stats": {"additions": 10, "deletions": 2},
				"files": [{"filename": "app.py"}, {"filename": "README.md"}],
			},
		)

	service, _ = _service(handler)
	detail = _run(service, service.get_commit_detail("acme", "api", "abc"))
	assert detail is not None
	assert detail.additions == 10
	assert detail.deletions == 2
	assert detail.files == ["app.py", "README.md"]
	assert detail.summary == "commit 1"


def test_commit_detail_missing_returns_none():
	service, _ = _service(lambda request: httpx.Response(404, json={"message": "Not Found"}))
	assert _run(service, service.get_commit_detail("acme", "api", "nope")) is None


def test_list_organizations():
	def handler(request):
		assert request.url.path == "/user/orgs"
		return httpx.Response(200, json=[{"id": 7, "login": "acme", "avatar_url": "http://a", "description": None}])

	service, _ = _service(handler)
	orgs = _run(service, service.list_organizations())
	assert [(o.id, o.login, o.avatar_url) for o in orgs] == [(7, "acme", "http://a")]


def test_non_json_commit_page_is_skipped():
	service, _ = _service(
		lambda request: httpx.Response(200, text="<html>proxy error</html>", headers={"Content-Type": "text/html"})
	)
	commits = _run(service, service.list_repo_commits("acme", "api", "dev@example.com", SINCE, UNTIL))
	assert commits == []


def test_malformed_commit_item_keeps_earlier_pages():
	def handler(request):
		if request.url.params["page"] == "1":
			return httpx.Response(200, json=[_commit(i) for i in range(PAGE_SIZE)])
		return httpx.Response(200, json=[{"commit": {"message": "no sha"}}])

	service, _ = _service(handler)
	commits = _run(service, service.list_repo_commits("acme", "api", "dev@example.com", SINCE, UNTIL))
	assert len(commits) == 100


def test_non_list_commit_page_is_skipped():
	service, _ = _service(lambda request: httpx.Response(200, json={"message": "unexpected"}))
	commits = _run(service, service.list_repo_commits("acme", "api", "dev@example.com", SINCE, UNTIL))
	assert commits == []


def test_non_json_repository_listing_raises_api_error():
	service, _ = _service(lambda request: httpx.Response(200, text="<html>proxy error</html>"))
	with pytest.raises(GitHubAPIError):
		_run(service, service.list_org_repositories("acme"))


def test_malformed_commit_detail_returns_none():
	service, _ = _service(lambda request: httpx.Response(200, json={"commit": {}}))
	assert _run(service, service.get_commit_detail("acme", "api", "abc")) is None
