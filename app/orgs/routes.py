import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..security.session import require_auth
from ..server.bootstrap import Services, get_services
from ..server.models import (
	OrganizationItem,
	OrganizationsResponse,
	SuccessResponse,
	TrackedOrganizationItem,
	TrackedOrganizationsRequest,
	TrackedOrganizationsResponse,
)
from ..vcs.exceptions import GitHubAPIError
from . import service as orgs_service

_LOGGER = logging.getLogger(__name__)
router = APIRouter()


@router.get("/github/orgs", response_model=OrganizationsResponse)
async def github_organizations(
	session: dict[str, Any] = Depends(require_auth),
	services: Services = Depends(get_services),
) -> OrganizationsResponse:
	token = session.get("oauth_token")
	if not token:
		raise HTTPException(status_code=401, detail="Unauthorized")
	try:
		async with services.source_factory(token) as source:
			orgs = await source.list_organizations()
	except GitHubAPIError:
		_LOGGER.exception("Failed to fetch organizations")
		raise HTTPException(status_code=500, detail="Failed to fetch organizations")
	return OrganizationsResponse(
		organizations=[
			OrganizationItem(id=o.id, login=o.login, avatar_url=o.avatar_url, description=o.description) for o in orgs
		]
	)


@router.get("/settings/organizations", response_model=TrackedOrganizationsResponse)
async def tracked_organizations(session: dict[str, Any] = Depends(require_auth)) -> TrackedOrganizationsResponse:
	items = orgs_service.list_tracked(session["user"]["id"])
	return TrackedOrganizationsResponse(organizations=[TrackedOrganizationItem(**item) for item in items])


@router.post("/settings/organizations", response_model=SuccessResponse)
async def save_tracked_organizations(
	body: TrackedOrganizationsRequest,
	session: dict[str, Any] = Depends(require_auth),
) -> SuccessResponse:
	if body.organizations is None:
		raise HTTPException(status_code=400, detail="Organizations array is required")
	orgs_service.replace_tracked(session["user"]["id"], [o.model_dump() for o in body.organizations])
	return SuccessResponse()
