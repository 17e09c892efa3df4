from typing import Any

from fastapi import APIRouter, Depends

from ..security.session import require_auth
from ..server.bootstrap import Services, get_services
from .diagnostics import diagnose_agent

router = APIRouter()


@router.get("/debug/agent")
async def agent_diagnostics(
	_: dict[str, Any] = Depends(require_auth),
	services: Services = Depends(get_services),
) -> dict[str, Any]:
	report = await diagnose_agent(services.invoker)
	return report.to_dict()
