from dataclasses import dataclass

from fastapi import Request

from ..agent.generator import SummaryGenerator
from ..agent.invoker import AgentInvoker
from ..config.config import AppConfig
from ..reports.service import CommitSourceFactory, ReportService
from ..vcs.github_service import GitHubService


@dataclass
class Services:
    config: AppConfig
    source_factory: CommitSourceFactory
    invoker: AgentInvoker
    reports: ReportService


def build_services(cfg: AppConfig) -> Services:
    def source_factory(token: str) -> GitHubService:
        return GitHubService(token, api_base_url=cfg.github_api_url)

    invoker = AgentInvoker(
        command=cfg.agent_command,
        print_args=cfg.agent_print_args,
        default_timeout_ms=cfg.agent_timeout_ms,
    )
    reports = ReportService(
        source_factory=source_factory,
        generator=SummaryGenerator(invoker),
        daily_timeout_ms=cfg.daily_timeout_ms,
        weekly_timeout_ms=cfg.weekly_timeout_ms,
        language=cfg.report_language,
    )
    return Services(config=cfg, source_factory=source_factory, invoker=invoker, reports=reports)


def get_services(request: Request) -> Services:
    return request.app.state.services
