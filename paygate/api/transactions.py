"""
Transactions API Endpoints

Records PayPal captures reported by the checkout page and looks them up.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Any, Dict
import logging

from ..exceptions import TransactionNotFoundError
from ..services.transaction_service import TransactionRecorder
from .dependencies import get_transaction_recorder

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Request Models
# ============================================================================

class SaveTransactionRequest(BaseModel):
    """
    Completed capture as reported by the PayPal JS SDK.

    Fields are untyped here on purpose: TransactionRecorder validates them and
    reports every bad field in one VALIDATION_ERROR.
    """
    transaction_id: Any = None
    payer_name: Any = None
    payer_email: Any = None
    amount: Any = None
    currency: Any = None
    payment_status: Any = None
    service_type: Any = None


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/save-transaction")
async def save_transaction_endpoint(
    request: SaveTransactionRequest,
    recorder: TransactionRecorder = Depends(get_transaction_recorder)
) -> Dict[str, Any]:
    """
    Record a completed payment.

    Request Body:
        {
            "transaction_id": str,
            "payer_name": str,
            "payer_email": str,
            "amount": number | str,
            "currency": str,  # optional, 3 letters
            "payment_status": str,  # optional
            "service_type": str  # optional
        }

    Returns:
        {"success": true, "message": str, "transaction": Transaction}

    Errors:
        400 VALIDATION_ERROR: per-field details, nothing stored
        409 DUPLICATE_TRANSACTION: transaction_id already recorded
        500 DATABASE_ERROR: storage failure (details logged only)

    The receipt email is scheduled, not sent, by the time this returns.
    """
    transaction = await recorder.record(request.model_dump())

    return {
        "success": True,
        "message": "Transaction saved",
        "transaction": transaction.model_dump(mode="json"),
    }


@router.get("/api/transactions/{transaction_id}")
async def get_transaction_endpoint(
    transaction_id: str,
    recorder: TransactionRecorder = Depends(get_transaction_recorder)
) -> Dict[str, Any]:
    """
    Get a recorded transaction.

    Path Parameters:
        transaction_id: PayPal capture id

    Example:
        GET /api/transactions/5O190127TN364715T
    """
    logger.debug(f"Retrieving transaction: {transaction_id}")

    transaction = await recorder.get(transaction_id)

    if transaction is None:
        raise TransactionNotFoundError(f"No transaction found with ID: {transaction_id}")

    return {"success": True, "transaction": transaction.model_dump(mode="json")}
