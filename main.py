import argparse
import asyncio
import json
import sys

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from app.agent.diagnostics import diagnose_agent
from app.config.config import AppConfig
from app.config.logging_config import configure_logging
from app.reports.service import ReportValidationError
from app.server.bootstrap import build_services
from app.server.http import create_app
from app.vcs.exceptions import GitHubAPIError
from app.vcs.github_service import GitHubService

_LOGGER = configure_logging()


def cmd_serve(args: argparse.Namespace) -> None:
	cfg = AppConfig()
	app = create_app(build_services(cfg))
	uvicorn.run(app, host=cfg.host, port=cfg.port, log_level=args.log_level)


def cmd_list_orgs(args: argparse.Namespace) -> None:
	cfg = AppConfig()

	async def run() -> None:
		async with GitHubService(cfg.require_github_token(), api_base_url=cfg.github_api_url) as service:
			for org in await service.list_organizations():
				print(f"{org.id}\t{org.login}\t{org.description or ''}")

	asyncio.run(run())


def cmd_daily(args: argparse.Namespace) -> None:
	cfg = AppConfig()
	services = build_services(cfg)
	generated = asyncio.run(
		services.reports.generate_dailies(
			token=cfg.require_github_token(),
			author_email=args.author,
			dates=args.date,
			organization=args.org,
		)
	)
	for item in generated:
		print(f"# {item.date.isoformat()} ({item.source})")
		print(item.content)
		print()


def cmd_weekly(args: argparse.Namespace) -> None:
	cfg = AppConfig()
	services = build_services(cfg)
	weekly = asyncio.run(
		services.reports.build_weekly(
			token=cfg.require_github_token(),
			author_email=args.author,
			week_start=args.week_start,
			organization=args.org,
			source="commits",
		)
	)
	print(f"# {weekly.week_start.isoformat()} - {weekly.week_end.isoformat()} ({weekly.source})")
	print(weekly.content)


def cmd_check_agent(args: argparse.Namespace) -> None:
	services = build_services(AppConfig())
	report = asyncio.run(diagnose_agent(services.invoker))
	print(json.dumps(report.to_dict(), indent=2))


def build_arg_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="Daily and weekly standup summaries from GitHub commits")
	sub = parser.add_subparsers(dest="command", required=True)

	p_srv = sub.add_parser("serve", help="Run the HTTP API server")
	p_srv.add_argument("--log-level", default="info", help="uvicorn log level")
	p_srv.set_defaults(func=cmd_serve)

	p_orgs = sub.add_parser("list-orgs", help="List organizations visible to GITHUB_TOKEN")
	p_orgs.set_defaults(func=cmd_list_orgs)

	p_daily = sub.add_parser("daily", help="Print daily summaries without saving them")
	p_daily.add_argument("--org", required=True, help="GitHub organization login")
	p_daily.add_argument("--date", action="append", required=True, help="Day to summarize, YYYY-MM-DD (repeatable)")
	p_daily.add_argument("--author", required=True, help="Commit author email")
	p_daily.set_defaults(func=cmd_daily)

	p_weekly = sub.add_parser("weekly", help="Print a weekly summary built from commits")
	p_weekly.add_argument("--org", required=True, help="GitHub organization login")
	p_weekly.add_argument("--week-start", required=True, help="First day of the week, YYYY-MM-DD")
	p_weekly.add_argument("--author", required=True, help="Commit author email")
	p_weekly.set_defaults(func=cmd_weekly)

	p_check = sub.add_parser("check-agent", help="Diagnose the text-generation agent installation")
	p_check.set_defaults(func=cmd_check_agent)
	return parser


def main() -> None:
	parser = build_arg_parser()
	args = parser.parse_args()
	try:
		args.func(args)
	except ReportValidationError as e:
		parser.error(str(e))
	except GitHubAPIError as e:
		print(f"GitHub error: {e}", file=sys.stderr)
		sys.exit(1)


if __name__ == "__main__":
	main()
