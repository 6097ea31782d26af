"""FastAPI application factory."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kota.api.routers import sessions, skills, tools
from kota.core.context import SharedContext
from kota.core.exceptions import KotaError

_STATUS_BY_KIND = {
    "not_found": 404,
    "validation": 422,
    "parse": 400,
}


async def kota_error_handler(request: Request, exc: KotaError) -> JSONResponse:
    """Render a KotaError with the handler result convention."""
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(exc.kind, 500), content=exc.to_result()
    )


def create_app(context: SharedContext) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="kota API",
        description="HTTP API for kota sessions, skills and tools",
        version="0.1.0",
    )
    app.state.context = context
    app.add_exception_handler(KotaError, kota_error_handler)

    app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
    app.include_router(skills.router, prefix="/skills", tags=["skills"])
    app.include_router(tools.router, prefix="/tools", tags=["tools"])

    return app
