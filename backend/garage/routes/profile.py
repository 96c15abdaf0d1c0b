"""
Profile routes — read and overwrite a customer's saved garage.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Query

from garage.core.exceptions import GarageProxyException, TransportError, ValidationError
from garage.schemas.profile import (
    FilterDefaultsResponse,
    SelectionResponse,
    SelectionSaveRequest,
    SelectionSaveResponse,
)
from garage.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


def build_profile_router(service: ProfileService) -> APIRouter:
    router = APIRouter(tags=["profile"])

    @router.get("/profile/selection", response_model=SelectionResponse)
    async def get_selection(customerId: Optional[str] = Query(default=None)):
        if not customerId:
            raise ValidationError("customerId is required")
        try:
            items = await service.get_selection(customerId)
        except GarageProxyException:
            raise
        except Exception as exc:  # pragma: no cover
            logger.exception("Error fetching garage")
            raise TransportError(str(exc)) from exc
        return SelectionResponse(success=True, items=items, count=len(items))

    @router.post("/profile/selection", response_model=SelectionSaveResponse)
    async def save_selection(payload: SelectionSaveRequest = Body(...)):
        """Overwrite the customer's garage with the full list sent."""
        try:
            stored = await service.save_selection(payload.customerId, payload.items)
        except GarageProxyException:
            raise
        except Exception as exc:  # pragma: no cover
            logger.exception("Error saving garage")
            raise TransportError(str(exc)) from exc
        return SelectionSaveResponse(success=True, stored=stored)

    @router.get("/profile/selection/filters", response_model=FilterDefaultsResponse, response_model_exclude_none=True)
    async def get_filter_defaults(customerId: Optional[str] = Query(default=None)):
        """Default collection filters derived from the first vehicle in the garage."""
        if not customerId:
            raise ValidationError("customerId is required")
        try:
            vehicles, defaults, params = await service.get_filter_defaults(customerId)
        except GarageProxyException:
            raise
        except Exception as exc:  # pragma: no cover
            logger.exception("Error resolving garage filters")
            raise TransportError(str(exc)) from exc
        return FilterDefaultsResponse(
            success=True,
            items=vehicles,
            count=len(vehicles),
            defaultFilters=defaults,
            filterParams=params,
        )

    return router
