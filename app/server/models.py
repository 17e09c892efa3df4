from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..reports.models import DailyReport, WeeklyReport


class StatusResponse(BaseModel):
	status: Literal["ok"]


class SuccessResponse(BaseModel):
	success: bool = True


class CamelModel(BaseModel):
	model_config = ConfigDict(populate_by_name=True)


# Requests

class DailyGenerateRequest(BaseModel):
	dates: list[date] = []
	organization: Optional[str] = None
	save: bool = False


class DailySaveRequest(CamelModel):
	day: Optional[date] = Field(default=None, alias="date")
	content: Optional[str] = None


class WeeklyGenerateRequest(CamelModel):
	week_start: Optional[date] = Field(default=None, alias="weekStart")
	source: Literal["dailys", "commits"] = "dailys"
	organization: Optional[str] = None


class OrganizationIn(BaseModel):
	id: int
	login: str
	avatar_url: str = ""
	description: Optional[str] = None


class TrackedOrganizationsRequest(BaseModel):
	organizations: Optional[list[OrganizationIn]] = None


# Responses

class DailyItem(CamelModel):
	id: str
	date: str
	content: str
	created_at: datetime = Field(alias="createdAt")
	updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

	@classmethod
	def from_report(cls, report: DailyReport, with_updated: bool = False) -> "DailyItem":
		return cls(
			id=report.id,
			date=report.date.isoformat(),
			content=report.content,
			created_at=report.created_at,
			updated_at=report.updated_at if with_updated else None,
		)


class DailyListResponse(BaseModel):
	dailys: list[DailyItem]


class DailyResponse(BaseModel):
	daily: DailyItem


class GeneratedDailyItem(BaseModel):
	date: str
	content: str


class GeneratedDailiesResponse(BaseModel):
	dailys: list[GeneratedDailyItem]


class WeeklyItem(CamelModel):
	id: str
	week_start: str = Field(alias="weekStart")
	week_end: str = Field(alias="weekEnd")
	content: str
	created_at: Optional[datetime] = Field(default=None, alias="createdAt")
	updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

	@classmethod
	def from_report(cls, report: WeeklyReport, with_timestamps: bool = True, with_updated: bool = False) -> "WeeklyItem":
		return cls(
			id=report.id,
			week_start=report.week_start.isoformat(),
			week_end=report.week_end.isoformat(),
			content=report.content,
			created_at=report.created_at if with_timestamps else None,
			updated_at=report.updated_at if with_updated else None,
		)


class WeeklyListResponse(BaseModel):
	weeklys: list[WeeklyItem]


class WeeklyResponse(BaseModel):
	weekly: WeeklyItem


class OrganizationItem(BaseModel):
	id: int
	login: str
	avatar_url: str = ""
	description: Optional[str] = None


class OrganizationsResponse(BaseModel):
	organizations: list[OrganizationItem]


class TrackedOrganizationItem(CamelModel):
	id: int
	login: str
	name: str
	avatar_url: str = Field(default="", alias="avatarUrl")


class TrackedOrganizationsResponse(BaseModel):
	organizations: list[TrackedOrganizationItem]


class RecentDailyItem(BaseModel):
	id: str
	date: str
	content: str


class StatsResponse(CamelModel):
	dailies_this_month: int = Field(alias="dailysThisMonth")
	weeklies_this_month: int = Field(alias="weeklysThisMonth")
	streak: int
	recent_dailies: list[RecentDailyItem] = Field(alias="recentDailys")
