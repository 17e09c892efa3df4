from dataclasses import dataclass, field
from datetime import date, datetime

from ..vcs.models import first_line


@dataclass
class SimpleCommit:
	sha: str
	message: str

	@property
	def short_sha(self) -> str:
		return self.sha[:7]

	@property
	def summary(self) -> str:
		return first_line(self.message)


@dataclass
class CommitsByRepo:
	repo_name: str
	commits: list[SimpleCommit] = field(default_factory=list)


@dataclass
class ReportWindow:
	start: datetime
	end: datetime

	@property
	def start_date(self) -> date:
		return self.start.date()

	@property
	def end_date(self) -> date:
		return self.end.date()


@dataclass
class GeneratedDaily:
	date: date
	content: str
	source: str = "fallback"


@dataclass
class GeneratedWeekly:
	week_start: date
	week_end: date
	content: str
	source: str = "fallback"
	from_dailies: bool = False


def _parse_ts(value: str) -> datetime:
	return datetime.fromisoformat(value)


@dataclass
class DailyReport:
	id: str
	user_id: str
	date: date
	content: str
	created_at: datetime
	updated_at: datetime

	def to_record(self) -> dict[str, str]:
		return {
			"id": self.id,
			"date": self.date.isoformat(),
			"content": self.content,
			"created_at": self.created_at.isoformat(),
			"updated_at": self.updated_at.isoformat(),
		}

	@classmethod
	def from_record(cls, user_id: str, record: dict[str, str]) -> "DailyReport":
		return cls(
			id=record["id"],
			user_id=user_id,
			date=date.fromisoformat(record["date"]),
			content=record.get("content") or "",
			created_at=_parse_ts(record["created_at"]),
			updated_at=_parse_ts(record.get("updated_at") or record["created_at"]),
		)


@dataclass
class WeeklyReport:
	id: str
	user_id: str
	week_start: date
	week_end: date
	content: str
	created_at: datetime
	updated_at: datetime

	def to_record(self) -> dict[str, str]:
		return {
			"id": self.id,
			"week_start": self.week_start.isoformat(),
			"week_end": self.week_end.isoformat(),
			"content": self.content,
			"created_at": self.created_at.isoformat(),
			"updated_at": self.updated_at.isoformat(),
		}

	@classmethod
	def from_record(cls, user_id: str, record: dict[str, str]) -> "WeeklyReport":
		return cls(
			id=record["id"],
			user_id=user_id,
			week_start=date.fromisoformat(record["week_start"]),
			week_end=date.fromisoformat(record["week_end"]),
			content=record.get("content") or "",
			created_at=_parse_ts(record["created_at"]),
			updated_at=_parse_ts(record.get("updated_at") or record["created_at"]),
		)
