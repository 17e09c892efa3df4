from dataclasses import dataclass, field
from typing import Any


@dataclass
class Organization:
	id: int
	login: str
	avatar_url: str = ""
	description: str | None = None

	@classmethod
	def from_api(cls, data: dict[str, Any]) -> "Organization":
		return cls(
			id=int(data["id"]),
			login=data["login"],
			avatar_url=data.get("avatar_url") or "",
			description=data.get("description"),
		)


@dataclass
class Repository:
	id: int
	name: str
	full_name: str
	private: bool = False

	@classmethod
	def from_api(cls, data: dict[str, Any]) -> "Repository":
		return cls(
			id=int(data["id"]),
			name=data["name"],
			full_name=data.get("full_name") or data["name"],
			private=bool(data.get("private", False)),
		)


@dataclass
class CommitAuthor:
	name: str
	email: str
	date: str


@dataclass
class Commit:
	sha: str
	message: str
	author: CommitAuthor
	additions: int | None = None
	deletions: int | None = None
	files: list[str] = field(default_factory=list)

	@property
	def summary(self) -> str:
		return first_line(self.message)

	@classmethod
	def from_api(cls, data: dict[str, Any]) -> "Commit":
		commit = data.get("commit") or {}
		author = commit.get("author") or {}
		stats = data.get("stats") or {}
		return cls(
			sha=data["sha"],
			message=commit.get("message") or "",
			author=CommitAuthor(
				name=author.get("name") or "Unknown",
				email=author.get("email") or "",
				date=author.get("date") or "",
			),
			additions=stats.get("additions"),
			deletions=stats.get("deletions"),
			files=[f["filename"] for f in data.get("files") or [] if f.get("filename")],
		)


def first_line(message: str) -> str:
	return (message or "").split("\n", 1)[0].strip()
