from abc import ABC, abstractmethod
from datetime import datetime

from .models import Commit, Organization, Repository


class CommitSource(ABC):
	"""
	Read-only view over a source-control provider, scoped to one credential.
	Report generation only depends on this interface so tests and other
	providers can stand in for GitHub.
	"""

	@abstractmethod
	async def list_organizations(self) -> list[Organization]: ...

	@abstractmethod
	async def list_org_repositories(self, org: str) -> list[Repository]: ...

	@abstractmethod
	async def list_repo_commits(
		self,
		org: str,
		repo: str,
		author_email: str,
		since: datetime,
		until: datetime,
	) -> list[Commit]: ...

	@abstractmethod
	async def get_commit_detail(self, org: str, repo: str, sha: str) -> Commit | None: ...

	async def aclose(self) -> None:
		return None

	async def __aenter__(self) -> "CommitSource":
		return self

	async def __aexit__(self, exc_type, exc, tb) -> None:
		await self.aclose()
