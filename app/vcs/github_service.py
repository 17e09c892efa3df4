import logging
from datetime import datetime, timezone
from typing import Any, AsyncIterator

import httpx

from .base import CommitSource
from .exceptions import GitHubAPIError
from .models import Commit, Organization, Repository

_LOGGER = logging.getLogger(__name__)

PAGE_SIZE = 100


def to_github_timestamp(value: datetime) -> str:
	if value.tzinfo is None:
		value = value.replace(tzinfo=timezone.utc)
	return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_commit(item: Any) -> Commit:
	try:
		return Commit.from_api(item)
	except (AttributeError, KeyError, TypeError, ValueError) as e:
		raise GitHubAPIError(f"Malformed commit payload: {e!r}") from e


class GitHubService(CommitSource):
	"""
	Async GitHub REST client for the calls report generation needs.
	Repository and commit listings walk every page of PAGE_SIZE items and stop
	on the first short page.
	"""

	def __init__(
		self,
		token: str,
		api_base_url: str = "https://api.github.com",
		timeout: float = 30.0,
		transport: httpx.AsyncBaseTransport | None = None,
	) -> None:
		self.api_base_url = api_base_url.rstrip("/")
		self.client = httpx.AsyncClient(
			base_url=self.api_base_url,
			headers={
				"Accept": "application/vnd.github+json",
				"Authorization": f"Bearer {token}",
				"X-GitHub-Api-Version": "2022-11-28",
			},
			timeout=timeout,
			transport=transport,
		)

	async def aclose(self) -> None:
		await self.client.aclose()

	async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
		try:
			resp = await self.client.get(path, params=params)
		except httpx.HTTPError as e:
			raise GitHubAPIError(f"GitHub request to {path} failed: {e}") from e
		if resp.status_code >= 400:
			try:
				detail = resp.json().get("message") or resp.text
			except ValueError:
				detail = resp.text
			raise GitHubAPIError(f"GitHub API returned {resp.status_code} for {path}: {detail}", status_code=resp.status_code)
		try:
			return resp.json()
		except ValueError as e:
			raise GitHubAPIError(f"GitHub API returned a non-JSON body for {path}", status_code=resp.status_code) from e

	async def _pages(self, path: str, params: dict[str, Any]) -> AsyncIterator[list[dict[str, Any]]]:
		page = 1
		while True:
			data = await self._get(path, {**params, "per_page": PAGE_SIZE, "page": page})
			if not isinstance(data, list):
				raise GitHubAPIError(f"Expected a list from {path}, got {type(data).__name__}")
			yield data
			if len(data) < PAGE_SIZE:
				break
			page += 1

	async def list_organizations(self) -> list[Organization]:
		data = await self._get("/user/orgs")
		return [Organization.from_api(item) for item in data]

	async def list_org_repositories(self, org: str) -> list[Repository]:
		repos: list[Repository] = []
		async for page in self._pages(f"/orgs/{org}/repos", {"type": "all"}):
			repos.extend(Repository.from_api(item) for item in page)
		return repos

	async def list_repo_commits(
		self,
		org: str,
		repo: str,
		author_email: str,
		since: datetime,
		until: datetime,
	) -> list[Commit]:
		commits: list[Commit] = []
		params = {
			"author": author_email,
			"since": to_github_timestamp(since),
			"until": to_github_timestamp(until),
		}
		try:
			async for page in self._pages(f"/repos/{org}/{repo}/commits", params):
				commits.extend(_parse_commit(item) for item in page)
		except GitHubAPIError as e:
			# Empty or inaccessible repositories must not abort a multi-repo scan
			_LOGGER.warning(
				"Skipping commits for %s/%s: %s",
				org,
				repo,
				e,
				extra={"repository": f"{org}/{repo}", "status_code": e.status_code, "collected": len(commits)},
			)
		return commits

	async def get_commit_detail(self, org: str, repo: str, sha: str) -> Commit | None:
		try:
			data = await self._get(f"/repos/{org}/{repo}/commits/{sha}")
			return _parse_commit(data)
		except GitHubAPIError as e:
			_LOGGER.info("Commit %s not available in %s/%s: %s", sha, org, repo, e)
			return None
