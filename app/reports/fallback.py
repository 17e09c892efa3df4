from datetime import date
from typing import Sequence

from .models import CommitsByRepo
from .windows import format_day


def _commit_lines(commits_by_repo: Sequence[CommitsByRepo]) -> list[str]:
	lines: list[str] = []
	for repo in commits_by_repo:
		lines.append(f"**{repo.repo_name}:**")
		lines.extend(f"- {c.summary}" for c in repo.commits)
		lines.append("")
	return lines


def daily_fallback(commits_by_repo: Sequence[CommitsByRepo], day: date, organization: str | None = None) -> str:
	day_str = format_day(day)
	lines = [f"Daily Report - {day_str}", ""]
	if not commits_by_repo:
		scope = f" in {organization}" if organization else ""
		lines.append(f"No commits found for {day_str}{scope}.")
	else:
		lines.extend(_commit_lines(commits_by_repo))
	return "\n".join(lines).strip()


def weekly_fallback(
	dailies: Sequence[str],
	commits_by_repo: Sequence[CommitsByRepo],
	week_start: date,
	week_end: date,
) -> str:
	lines = [f"Weekly Report - {format_day(week_start)} to {format_day(week_end)}", ""]
	if dailies:
		lines.extend(["## Summary from Daily Reports", ""])
		for i, text in enumerate(dailies, start=1):
			lines.extend([f"### Day {i}", text, ""])
	elif commits_by_repo:
		lines.extend(["## Summary from Commits", ""])
		lines.extend(_commit_lines(commits_by_repo))
	else:
		lines.append("No activity recorded for this week.")
	return "\n".join(lines).strip()
