from datetime import date, datetime, time, timedelta, timezone

from .models import ReportWindow

DAY_END = time(23, 59, 59, 999_000)


def parse_day(value: str | date) -> date:
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value
	# Accept full ISO timestamps as well as bare dates
	return date.fromisoformat(value.strip()[:10])


def day_window(day: date) -> ReportWindow:
	return ReportWindow(
		start=datetime.combine(day, time.min, tzinfo=timezone.utc),
		end=datetime.combine(day, DAY_END, tzinfo=timezone.utc),
	)


def week_window(week_start: date) -> ReportWindow:
	return ReportWindow(
		start=datetime.combine(week_start, time.min, tzinfo=timezone.utc),
		end=datetime.combine(week_start + timedelta(days=6), DAY_END, tzinfo=timezone.utc),
	)


def format_day(value: date | datetime) -> str:
	if isinstance(value, datetime):
		value = value.date()
	return value.isoformat()
