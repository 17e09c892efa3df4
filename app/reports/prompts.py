from typing import Sequence

from .models import CommitsByRepo

DEFAULT_LANGUAGE = "Spanish"

NO_DAILY_ACTIVITY_PROMPT = "No commits found for this day. Generate a brief message indicating no activity."
NO_WEEKLY_ACTIVITY_PROMPT = (
	"There are no daily reports or commits available for this week. "
	"Generate a brief message indicating that no activity was recorded."
)


def render_commit_listing(commits_by_repo: Sequence[CommitsByRepo]) -> str:
	blocks: list[str] = []
	for repo in commits_by_repo:
		lines = [f"## {repo.repo_name}"]
		lines.extend(f"- {c.short_sha}: {c.summary}" for c in repo.commits)
		blocks.append("\n".join(lines))
	return "\n\n".join(blocks)


def build_daily_prompt(commits_by_repo: Sequence[CommitsByRepo], language: str = DEFAULT_LANGUAGE) -> str:
	if not commits_by_repo:
		return NO_DAILY_ACTIVITY_PROMPT
	return (
		"Analyze the following GitHub commits and write a summary for a daily standup.\n\n"
		"The format must be:\n"
		"- Grouped by repository/project\n"
		f"- Written in {language}\n"
		"- Concise bullet points describing what was done (a professional interpretation, not the literal commit message)\n"
		"- At most 2-3 bullets per repository\n"
		"- Past-tense verbs (implemented, fixed, updated, etc.)\n"
		"- If there are many commits of the same kind, group them into a single bullet\n\n"
		"COMMITS:\n"
		f"{render_commit_listing(commits_by_repo)}\n\n"
		"Write the daily:"
	)


def build_weekly_prompt(
	dailies: Sequence[str],
	commits_by_repo: Sequence[CommitsByRepo] | None = None,
	language: str = DEFAULT_LANGUAGE,
) -> str:
	if dailies:
		sections = "\n\n".join(f"### Day {i}\n{text}" for i, text in enumerate(dailies, start=1))
		return (
			"Write a weekly summary based on these daily reports:\n\n"
			f"{sections}\n\n"
			"The summary must:\n"
			"- Group work by project or main theme\n"
			"- Highlight the most important achievements of the week\n"
			"- Mention the kinds of work (features, bugfixes, refactoring, etc.)\n"
			"- Be concise but complete (10-15 bullets in total at most)\n"
			f"- Be written in {language}\n"
			"- Use professional language suitable for a spoken presentation"
		)

	if not commits_by_repo:
		return NO_WEEKLY_ACTIVITY_PROMPT

	return (
		"Analyze the following GitHub commits and write a complete weekly summary.\n\n"
		"The format must be:\n"
		"- Grouped by project or main theme\n"
		"- Highlight the most important achievements\n"
		"- Mention the kinds of work (features, bugfixes, refactoring, etc.)\n"
		"- 10-15 bullets in total at most\n"
		f"- Written in {language}\n"
		"- Professional language suitable for a spoken presentation\n\n"
		"COMMITS OF THE WEEK:\n"
		f"{render_commit_listing(commits_by_repo)}\n\n"
		"Write the weekly:"
	)
