import datetime
import uuid
from typing import Any

from ..storage.json_store import load_json, update_json
from .models import DailyReport, WeeklyReport

DAILY_DOC = "daily_reports.json"
WEEKLY_DOC = "weekly_reports.json"

Records = dict[str, list[dict[str, Any]]]


def _now() -> datetime.datetime:
	return datetime.datetime.now(datetime.timezone.utc)


def _user_records(doc: str, user_id: str) -> list[dict[str, Any]]:
	records: Records = load_json(doc, {})
	return records.get(user_id) or []


def save_daily(user_id: str, day: datetime.date, content: str) -> DailyReport:
	"""Create or replace the user's report for ``day``; at most one exists per date."""
	day_str = day.isoformat()
	saved: dict[str, Any] = {}

	def mutate(records: Records) -> Records:
		items = records.get(user_id) or []
		now_iso = _now().isoformat()
		for item in items:
			if item.get("date") == day_str:
				item["content"] = content
				item["updated_at"] = now_iso
				saved.update(item)
				break
		else:
			item = {
				"id": f"daily_{uuid.uuid4().hex[:12]}",
				"date": day_str,
				"content": content,
				"created_at": now_iso,
				"updated_at": now_iso,
			}
			items.append(item)
			saved.update(item)
		records[user_id] = items
		return records

	update_json(DAILY_DOC, {}, mutate)
	return DailyReport.from_record(user_id, saved)


def list_dailies(user_id: str, limit: int = 50) -> list[DailyReport]:
	items = [DailyReport.from_record(user_id, r) for r in _user_records(DAILY_DOC, user_id)]
	items.sort(key=lambda d: (d.date, d.created_at), reverse=True)
	return items[:limit]


def get_daily(user_id: str, report_id: str) -> DailyReport | None:
	for record in _user_records(DAILY_DOC, user_id):
		if record.get("id") == report_id:
			return DailyReport.from_record(user_id, record)
	return None


def delete_daily(user_id: str, report_id: str) -> bool:
	removed: list[bool] = []

	def mutate(records: Records) -> Records:
		items = records.get(user_id) or []
		kept = [r for r in items if r.get("id") != report_id]
		removed.append(len(kept) != len(items))
		records[user_id] = kept
		return records

	update_json(DAILY_DOC, {}, mutate)
	return bool(removed and removed[-1])


def dailies_between(user_id: str, start: datetime.date, end: datetime.date) -> list[DailyReport]:
	items = [
		DailyReport.from_record(user_id, r)
		for r in _user_records(DAILY_DOC, user_id)
		if start.isoformat() <= r.get("date", "") <= end.isoformat()
	]
	items.sort(key=lambda d: d.date)
	return items


def daily_dates(user_id: str) -> list[datetime.date]:
	return [datetime.date.fromisoformat(r["date"]) for r in _user_records(DAILY_DOC, user_id) if r.get("date")]


def count_dailies_created_since(user_id: str, since: datetime.datetime) -> int:
	return sum(1 for r in _user_records(DAILY_DOC, user_id) if datetime.datetime.fromisoformat(r["created_at"]) >= since)


def upsert_weekly(user_id: str, week_start: datetime.date, content: str) -> WeeklyReport:
	"""Create or replace the report for the week starting at ``week_start``."""
	start_str = week_start.isoformat()
	end_str = (week_start + datetime.timedelta(days=6)).isoformat()
	saved: dict[str, Any] = {}

	def mutate(records: Records) -> Records:
		items = records.get(user_id) or []
		now_iso = _now().isoformat()
		for item in items:
			if item.get("week_start") == start_str:
				item["content"] = content
				item["week_end"] = end_str
				item["updated_at"] = now_iso
				saved.update(item)
				break
		else:
			item = {
				"id": f"weekly_{uuid.uuid4().hex[:12]}",
				"week_start": start_str,
				"week_end": end_str,
				"content": content,
				"created_at": now_iso,
				"updated_at": now_iso,
			}
			items.append(item)
			saved.update(item)
		records[user_id] = items
		return records

	update_json(WEEKLY_DOC, {}, mutate)
	return WeeklyReport.from_record(user_id, saved)


def list_weeklies(user_id: str, limit: int = 20) -> list[WeeklyReport]:
	items = [WeeklyReport.from_record(user_id, r) for r in _user_records(WEEKLY_DOC, user_id)]
	items.sort(key=lambda w: w.week_start, reverse=True)
	return items[:limit]


def get_weekly(user_id: str, report_id: str) -> WeeklyReport | None:
	for record in _user_records(WEEKLY_DOC, user_id):
		if record.get("id") == report_id:
			return WeeklyReport.from_record(user_id, record)
	return None


def delete_weekly(user_id: str, report_id: str) -> bool:
	removed: list[bool] = []

	def mutate(records: Records) -> Records:
		items = records.get(user_id) or []
		kept = [r for r in items if r.get("id") != report_id]
		removed.append(len(kept) != len(items))
		records[user_id] = kept
		return records

	update_json(WEEKLY_DOC, {}, mutate)
	return bool(removed and removed[-1])


def count_weeklies_created_since(user_id: str, since: datetime.datetime) -> int:
	return sum(1 for r in _user_records(WEEKLY_DOC, user_id) if datetime.datetime.fromisoformat(r["created_at"]) >= since)
