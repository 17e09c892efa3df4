import datetime
import logging
from typing import Callable, Literal, Sequence

from ..agent.generator import SummaryGenerator
from ..vcs.base import CommitSource
from . import store
from .fallback import daily_fallback, weekly_fallback
from .filters import is_merge_commit
from .models import CommitsByRepo, GeneratedDaily, GeneratedWeekly, ReportWindow, SimpleCommit, WeeklyReport
from .prompts import DEFAULT_LANGUAGE, build_daily_prompt, build_weekly_prompt
from .windows import day_window, parse_day, week_window

_LOGGER = logging.getLogger(__name__)

WeeklySource = Literal["dailys", "commits"]
CommitSourceFactory = Callable[[str], CommitSource]


class ReportValidationError(ValueError):
	"""Raised when a generation request is missing required inputs."""


class ReportService:
	"""
	Orchestrates report generation: resolve the window, collect commits (or
	prior daily reports), build the prompt and summarize it with the agent or
	the fallback formatter. Repositories are scanned one after another.
	"""

	def __init__(
		self,
		source_factory: CommitSourceFactory,
		generator: SummaryGenerator,
		daily_timeout_ms: int = 120_000,
		weekly_timeout_ms: int = 180_000,
		language: str = DEFAULT_LANGUAGE,
	) -> None:
		self.source_factory = source_factory
		self.generator = generator
		self.daily_timeout_ms = daily_timeout_ms
		self.weekly_timeout_ms = weekly_timeout_ms
		self.language = language

	async def collect_commits(
		self,
		source: CommitSource,
		organization: str,
		repo_names: Sequence[str],
		author_email: str,
		window: ReportWindow,
	) -> list[CommitsByRepo]:
		result: list[CommitsByRepo] = []
		for name in repo_names:
			commits = await source.list_repo_commits(organization, name, author_email, window.start, window.end)
			kept = [SimpleCommit(sha=c.sha, message=c.message) for c in commits if not is_merge_commit(c.message)]
			if kept:
				result.append(CommitsByRepo(repo_name=name, commits=kept))
		_LOGGER.debug(
			"Collected commits",
			extra={"organization": organization, "repositories": len(result), "window_start": window.start.isoformat()},
		)
		return result

	async def generate_dailies(
		self,
		token: str,
		author_email: str,
		dates: Sequence[str | datetime.date],
		organization: str | None,
	) -> list[GeneratedDaily]:
		if not dates:
			raise ReportValidationError("At least one date is required")
		if not organization:
			raise ReportValidationError("Organization is required")
		try:
			days = [parse_day(d) for d in dates]
		except ValueError as e:
			raise ReportValidationError(f"Invalid date: {e}") from e

		generated: list[GeneratedDaily] = []
		async with self.source_factory(token) as source:
			repos = await source.list_org_repositories(organization)
			repo_names = [r.name for r in repos]
			for day in days:
				commits_by_repo = await self.collect_commits(source, organization, repo_names, author_email, day_window(day))
				prompt = build_daily_prompt(commits_by_repo, language=self.language)
				summary = await self.generator.generate(
					prompt,
					fallback=lambda: daily_fallback(commits_by_repo, day, organization),
					timeout_ms=self.daily_timeout_ms,
					stage=f"daily:{day.isoformat()}",
				)
				generated.append(GeneratedDaily(date=day, content=summary.content, source=summary.source))
		return generated

	async def build_weekly(
		self,
		token: str,
		author_email: str,
		week_start: str | datetime.date | None,
		organization: str | None,
		source: WeeklySource = "dailys",
		user_id: str | None = None,
	) -> GeneratedWeekly:
		if not week_start:
			raise ReportValidationError("Week start date is required")
		if not organization:
			raise ReportValidationError("Organization is required")
		try:
			start_day = parse_day(week_start)
		except ValueError as e:
			raise ReportValidationError(f"Invalid week start: {e}") from e
		window = week_window(start_day)

		daily_contents: list[str] = []
		if source == "dailys" and user_id:
			daily_contents = [d.content for d in store.dailies_between(user_id, window.start_date, window.end_date)]

		commits_by_repo: list[CommitsByRepo] = []
		if not daily_contents:
			async with self.source_factory(token) as commit_source:
				repos = await commit_source.list_org_repositories(organization)
				commits_by_repo = await self.collect_commits(
					commit_source, organization, [r.name for r in repos], author_email, window
				)

		prompt = build_weekly_prompt(daily_contents, commits_by_repo or None, language=self.language)
		summary = await self.generator.generate(
			prompt,
			fallback=lambda: weekly_fallback(daily_contents, commits_by_repo, window.start_date, window.end_date),
			timeout_ms=self.weekly_timeout_ms,
			stage=f"weekly:{start_day.isoformat()}",
		)
		return GeneratedWeekly(
			week_start=window.start_date,
			week_end=window.end_date,
			content=summary.content,
			source=summary.source,
			from_dailies=bool(daily_contents),
		)

	async def generate_weekly(
		self,
		user_id: str,
		token: str,
		author_email: str,
		week_start: str | datetime.date | None,
		organization: str | None,
		source: WeeklySource = "dailys",
	) -> WeeklyReport:
		weekly = await self.build_weekly(token, author_email, week_start, organization, source=source, user_id=user_id)
		return store.upsert_weekly(user_id, weekly.week_start, weekly.content)
