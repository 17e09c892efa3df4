import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..security.session import require_auth, require_github_session
from ..server.bootstrap import Services, get_services
from ..server.models import (
	DailyGenerateRequest,
	DailyItem,
	DailyListResponse,
	DailyResponse,
	DailySaveRequest,
	GeneratedDailiesResponse,
	GeneratedDailyItem,
	RecentDailyItem,
	StatsResponse,
	SuccessResponse,
	WeeklyGenerateRequest,
	WeeklyItem,
	WeeklyListResponse,
	WeeklyResponse,
)
from ..vcs.exceptions import GitHubAPIError
from . import store
from .service import ReportValidationError
from .stats import build_stats, preview

_LOGGER = logging.getLogger(__name__)
router = APIRouter()


@router.get("/daily", response_model=DailyListResponse, response_model_exclude_none=True)
async def list_dailies(session: dict[str, Any] = Depends(require_auth)) -> DailyListResponse:
	reports = store.list_dailies(session["user"]["id"], limit=50)
	return DailyListResponse(dailys=[DailyItem.from_report(r) for r in reports])


@router.post("/daily", response_model=DailyResponse)
async def save_daily(body: DailySaveRequest, session: dict[str, Any] = Depends(require_auth)) -> DailyResponse:
	if body.day is None:
		raise HTTPException(status_code=400, detail="Date is required")
	if not (body.content or "").strip():
		raise HTTPException(status_code=400, detail="Content is required")
	report = store.save_daily(session["user"]["id"], body.day, body.content or "")
	return DailyResponse(daily=DailyItem.from_report(report, with_updated=True))


@router.post("/daily/generate", response_model=GeneratedDailiesResponse)
async def generate_dailies(
	body: DailyGenerateRequest,
	session: dict[str, Any] = Depends(require_github_session),
	services: Services = Depends(get_services),
) -> GeneratedDailiesResponse:
	user = session["user"]
	try:
		generated = await services.reports.generate_dailies(
			token=session["oauth_token"],
			author_email=user["email"],
			dates=body.dates,
			organization=body.organization,
		)
	except ReportValidationError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except GitHubAPIError:
		_LOGGER.exception("Daily generation failed while listing repositories", extra={"organization": body.organization})
		raise HTTPException(status_code=500, detail="Failed to generate daily")
	if body.save:
		for item in generated:
			store.save_daily(user["id"], item.date, item.content)
	return GeneratedDailiesResponse(
		dailys=[GeneratedDailyItem(date=item.date.isoformat(), content=item.content) for item in generated]
	)


@router.get("/daily/{report_id}", response_model=DailyResponse)
async def get_daily(report_id: str, session: dict[str, Any] = Depends(require_auth)) -> DailyResponse:
	report = store.get_daily(session["user"]["id"], report_id)
	if report is None:
		raise HTTPException(status_code=404, detail="Daily not found")
	return DailyResponse(daily=DailyItem.from_report(report, with_updated=True))


@router.delete("/daily/{report_id}", response_model=SuccessResponse)
async def delete_daily(report_id: str, session: dict[str, Any] = Depends(require_auth)) -> SuccessResponse:
	store.delete_daily(session["user"]["id"], report_id)
	return SuccessResponse()


@router.get("/weekly", response_model=WeeklyListResponse)
async def list_weeklies(session: dict[str, Any] = Depends(require_auth)) -> WeeklyListResponse:
	reports = store.list_weeklies(session["user"]["id"], limit=20)
	return WeeklyListResponse(weeklys=[WeeklyItem.from_report(r) for r in reports])


@router.post("/weekly/generate", response_model=WeeklyResponse, response_model_exclude_none=True)
async def generate_weekly(
	body: WeeklyGenerateRequest,
	session: dict[str, Any] = Depends(require_github_session),
	services: Services = Depends(get_services),
) -> WeeklyResponse:
	user = session["user"]
	try:
		report = await services.reports.generate_weekly(
			user_id=user["id"],
			token=session["oauth_token"],
			author_email=user["email"],
			week_start=body.week_start,
			organization=body.organization,
			source=body.source,
		)
	except ReportValidationError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except GitHubAPIError:
		_LOGGER.exception("Weekly generation failed while listing repositories", extra={"organization": body.organization})
		raise HTTPException(status_code=500, detail="Failed to generate weekly")
	return WeeklyResponse(weekly=WeeklyItem.from_report(report, with_timestamps=False))


@router.get("/weekly/{report_id}", response_model=WeeklyResponse)
async def get_weekly(report_id: str, session: dict[str, Any] = Depends(require_auth)) -> WeeklyResponse:
	report = store.get_weekly(session["user"]["id"], report_id)
	if report is None:
		raise HTTPException(status_code=404, detail="Weekly not found")
	return WeeklyResponse(weekly=WeeklyItem.from_report(report, with_updated=True))


@router.delete("/weekly/{report_id}", response_model=SuccessResponse)
async def delete_weekly(report_id: str, session: dict[str, Any] = Depends(require_auth)) -> SuccessResponse:
	store.delete_weekly(session["user"]["id"], report_id)
	return SuccessResponse()


@router.get("/stats", response_model=StatsResponse)
async def stats(session: dict[str, Any] = Depends(require_auth)) -> StatsResponse:
	result = build_stats(session["user"]["id"])
	return StatsResponse(
		dailies_this_month=result.dailies_this_month,
		weeklies_this_month=result.weeklies_this_month,
		streak=result.streak,
		recent_dailies=[
			RecentDailyItem(id=d.id, date=d.date.isoformat(), content=preview(d.content)) for d in result.recent_dailies
		],
	)
