"""
REST API Endpoints for FSC Lookups

Provides HTTP API for:
- Health checks
- Household lookup by FSC reference number
- Session pool statistics
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from fsclookup.config.constants import (
    CAPACITY_ERROR_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    MISSING_NUMBER_MESSAGE,
)
from fsclookup.models.household import Found, NotFound
from fsclookup.services.portal import (
    CapacityError,
    LookupService,
    ValidationError,
    get_lookup_service,
)
from fsclookup.version import VERSION


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str = VERSION


def create_api_router(service: LookupService | None = None) -> APIRouter:
    """
    Create FastAPI router with all API endpoints.

    Args:
        service: Lookup service to use (defaults to the global instance)

    Returns:
        Configured APIRouter instance
    """
    router = APIRouter()

    def _service() -> LookupService:
        return service or get_lookup_service()

    # -------------------------------------------------------------------------
    # Health Check
    # -------------------------------------------------------------------------

    @router.get("/health", response_model=HealthResponse)
    async def health_check():
        """
        Health check endpoint.

        Returns:
            Health status response
        """
        logger.debug("Health check requested")
        return HealthResponse(status="ok")

    # -------------------------------------------------------------------------
    # FSC Lookup
    # -------------------------------------------------------------------------

    @router.get("/fsc")
    async def lookup_fsc(no: str | None = Query(default=None)):
        """
        Look up a ration card household by FSC reference number.

        Example: GET /fsc?no=FSC0000001234

        Args:
            no: FSC reference number

        Returns:
            200 with the household record, 400 if the number is missing,
            404 if the portal has no record, 503 if all sessions are busy,
            500 on any other failure
        """
        try:
            outcome = await _service().lookup(no)
        except ValidationError as e:
            logger.info(f"Rejected lookup: {e}")
            return JSONResponse(status_code=400, content={"error": MISSING_NUMBER_MESSAGE})

        if isinstance(outcome, Found):
            return JSONResponse(content=outcome.record.to_dict())

        if isinstance(outcome, NotFound):
            return JSONResponse(status_code=404, content={"error": outcome.reason})

        if isinstance(outcome.cause, CapacityError):
            return JSONResponse(status_code=503, content={"error": CAPACITY_ERROR_MESSAGE})

        logger.error(f"Lookup for {no} failed: {outcome.error_type}: {outcome.cause}")
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @router.get("/stats")
    async def get_stats():
        """
        Get lookup statistics.

        Returns:
            Session pool usage and outcome counters
        """
        return JSONResponse(content=_service().get_stats())

    return router
