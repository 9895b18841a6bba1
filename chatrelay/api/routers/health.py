"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: fastapi, sqlalchemy, chatrelay.api.deps
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from chatrelay.api.deps import RelayContainer, get_container


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    active_sessions: int | None = None


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(container: RelayContainer = Depends(get_container)) -> HealthResponse:
    """Basic health check."""
    return HealthResponse(
        status="healthy",
        message="Relay healthy",
        active_sessions=len(container.registry),
    )


@router.get("/db", response_model=HealthResponse)
async def health_check_db(container: RelayContainer = Depends(get_container)):
    """Database health check."""
    try:
        async with container.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(status="unhealthy", message=type(e).__name__).model_dump(),
        )
    return HealthResponse(status="healthy", message="Database connection OK")
