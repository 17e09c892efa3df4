import datetime
from dataclasses import dataclass, field
from typing import Iterable

from . import store
from .models import DailyReport

PREVIEW_CHARS = 150


def compute_streak(report_dates: Iterable[datetime.date], today: datetime.date) -> int:
	"""
	Count consecutive days with a daily report ending today. A missing report
	for today does not break the streak yet, so counting may start at yesterday.
	"""
	days = set(report_dates)
	if today in days:
		cursor = today
	elif today - datetime.timedelta(days=1) in days:
		cursor = today - datetime.timedelta(days=1)
	else:
		return 0
	streak = 0
	while cursor in days:
		streak += 1
		cursor -= datetime.timedelta(days=1)
	return streak


def preview(content: str, limit: int = PREVIEW_CHARS) -> str:
	if len(content) <= limit:
		return content
	return content[:limit] + "..."


@dataclass
class DashboardStats:
	dailies_this_month: int
	weeklies_this_month: int
	streak: int
	recent_dailies: list[DailyReport] = field(default_factory=list)


def build_stats(user_id: str, now: datetime.datetime | None = None, recent: int = 5) -> DashboardStats:
	now = now or datetime.datetime.now(datetime.timezone.utc)
	start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
	return DashboardStats(
		dailies_this_month=store.count_dailies_created_since(user_id, start_of_month),
		weeklies_this_month=store.count_weeklies_created_since(user_id, start_of_month),
		streak=compute_streak(store.daily_dates(user_id), now.date()),
		recent_dailies=store.list_dailies(user_id, limit=recent),
	)
