"""
Services API Endpoints

Catalog listing and server-side price resolution for a chosen service.
The browser never supplies a price; it only names a service.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Any, Dict, List
import logging

from ..services.service_selector import ServiceSelector
from .dependencies import get_service_selector

logger = logging.getLogger(__name__)

router = APIRouter()


class ValidateServiceRequest(BaseModel):
    """Request to resolve a service by name. Type checks happen in ServiceSelector."""
    name: Any = None


@router.get("/services")
async def list_services_endpoint(
    selector: ServiceSelector = Depends(get_service_selector)
) -> List[Dict[str, Any]]:
    """
    List the service catalog.

    Returns:
        [{"id": int, "name": str, "price": number}, ...]
    """
    services = await selector.list_services()
    return [service.model_dump() for service in services]


@router.post("/validate-service")
async def validate_service_endpoint(
    request: ValidateServiceRequest,
    selector: ServiceSelector = Depends(get_service_selector)
) -> Dict[str, Any]:
    """
    Resolve a service name to its canonical name and price.

    Request Body:
        {"name": str}  # case-insensitive, surrounding whitespace ignored

    Returns:
        {"name": str, "price": number}

    Errors:
        400 VALIDATION_ERROR: name missing, empty or not a string
        404 SERVICE_NOT_FOUND: no such service
        400 PRICE_TOO_LOW: service priced below the configured floor

    Example:
        POST /api/validate-service {"name": " basic service "}
        -> {"name": "Basic Service", "price": 100}
    """
    selection = await selector.select(request.name)
    logger.debug(f"Service validated: {selection.name} ({selection.price})")
    return selection.model_dump()
