"""
Payments API Endpoints

Pre-payment check for user-entered amounts. The checkout page only opens a
PayPal order for the normalized amount returned here.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Any, Dict

from ..services.amount_validator import CustomAmountValidator
from .dependencies import get_amount_validator

router = APIRouter()


class ValidateCustomAmountRequest(BaseModel):
    amount: Any = None


@router.post("/validate-custom")
async def validate_custom_amount_endpoint(
    request: ValidateCustomAmountRequest,
    validator: CustomAmountValidator = Depends(get_amount_validator)
) -> Dict[str, str]:
    """
    Validate a custom payment amount.

    Request Body:
        {"amount": number | str}  # "12,34" is read as 12.34

    Returns:
        {"amount": str}  # two fraction digits, e.g. "75.50"

    Errors:
        400 VALIDATION_ERROR: not a positive number
        400 AMOUNT_TOO_LOW: below the configured minimum
    """
    return {"amount": validator.validate(request.amount)}
