import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..agent.routes import router as agent_router
from ..auth.routes import router as auth_router
from ..config.logging_config import configure_logging
from ..orgs.routes import router as orgs_router
from ..reports.routes import router as reports_router
from .bootstrap import Services
from .models import StatusResponse

configure_logging()
logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"Invalid request body: {location} {message}".strip() if location else f"Invalid request body: {message}"


def create_app(services: Services) -> FastAPI:
    app = FastAPI(title="Standup Digest")
    app.state.services = services
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[services.config.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected request body", extra={"path": request.url.path, "errors": len(exc.errors())})
        return JSONResponse({"error": _validation_message(exc)}, status_code=400)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    @app.get("/health", response_model=StatusResponse)
    async def health() -> StatusResponse:
        return StatusResponse(status="ok")

    api_router = APIRouter()
    api_router.include_router(reports_router)
    api_router.include_router(orgs_router)
    api_router.include_router(agent_router)

    app.include_router(auth_router)
    app.include_router(api_router, prefix="/api")

    return app
