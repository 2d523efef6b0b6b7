"""
PayPal Configuration Endpoint

Hands the public PayPal client id to the checkout page so it can load the
PayPal JS SDK. The secret never leaves the server.
"""
from fastapi import APIRouter, Depends
from typing import Dict
import logging

from ..config import Settings
from ..exceptions import MissingPayPalClientIdError
from .dependencies import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/paypal")
async def get_paypal_config_endpoint(
    settings: Settings = Depends(get_settings)
) -> Dict[str, str]:
    """
    Get the PayPal client id.

    Returns:
        {"clientId": str}

    Errors:
        500 MISSING_PAYPAL_CLIENT_ID when PAYPAL_CLIENT_ID is not set

    Example:
        GET /config/paypal
    """
    if not settings.paypal_client_id:
        logger.error("PayPal Client ID missing: set PAYPAL_CLIENT_ID")
        raise MissingPayPalClientIdError()

    return {"clientId": settings.paypal_client_id}
