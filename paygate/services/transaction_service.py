"""
Transaction Service

Validates completed-payment confirmations and records them exactly once.

Flow:
1. Every field runs through its own ordered check chain
2. All field failures are reported together (VALIDATION_ERROR), nothing stored
3. One INSERT in its own session; the unique transaction_id constraint
   decides between recorded and DUPLICATE_TRANSACTION
4. Receipt email handed to the notifier; its outcome never reaches the caller
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..db.init_db import Database
from ..db.models import TransactionModel
from ..exceptions import InputValidationError, DuplicateTransactionError, DatabaseError
from ..models.transactions import Transaction
from .notification_service import ReceiptNotifier
from .validation import (
    Ok,
    Err,
    Check,
    Result,
    numeric,
    optional_text,
    positive,
    required_text,
    run_checks,
    sanitize_text,
    to_two_places,
    valid_email,
)

logger = logging.getLogger(__name__)


CURRENCY_MESSAGE = "Currency must be a 3-letter code."


def _is_unique_violation(error: IntegrityError) -> bool:
    """SQLite says "UNIQUE constraint failed", PostgreSQL "duplicate key"."""
    reason = str(error.orig).lower()
    return "unique" in reason or "duplicate" in reason


def _three_letter_code(value: Optional[str]) -> Result:
    if value is None:
        return Ok(None)
    if len(value) != 3:
        return Err("VALIDATION_ERROR", CURRENCY_MESSAGE, "currency")
    return Ok(value.upper())


FIELD_CHECKS: Dict[str, List[Check]] = {
    "transaction_id": [required_text("transaction_id", "Transaction ID is required.", max_length=255)],
    "payer_name": [required_text("payer_name", "Payer name is required.", max_length=255)],
    "payer_email": [valid_email("payer_email", "A valid email is required.", max_length=320)],
    "amount": [
        numeric("amount", "Amount must be numeric."),
        positive("amount", "Amount must be numeric."),
    ],
    "currency": [optional_text("currency", CURRENCY_MESSAGE), _three_letter_code],
    "payment_status": [optional_text("payment_status", "Payment status must be text.", max_length=64)],
    "service_type": [optional_text("service_type", "Service type must be text.", max_length=255)],
}


def validate_transaction_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run every field's checks and return the sanitized values.

    Raises:
        InputValidationError: with one {"field", "message"} entry per bad field
    """
    values: Dict[str, Any] = {}
    errors: List[Dict[str, str]] = []

    for field, checks in FIELD_CHECKS.items():
        result = run_checks(payload.get(field), checks)
        if isinstance(result, Err):
            errors.append({"field": result.field or field, "message": result.message})
        else:
            values[field] = result.value

    if errors:
        raise InputValidationError(errors[0]["message"], details=errors)

    values["amount"] = to_two_places(values["amount"])
    return values


class TransactionRecorder:
    """
    Records completed PayPal captures.

    Args:
        database: Storage handle
        notifier: Receipt scheduler, None to disable receipts
        default_currency: Used when the payload has no currency
    """

    def __init__(
        self,
        database: Database,
        notifier: Optional[ReceiptNotifier] = None,
        default_currency: str = "USD"
    ):
        self.database = database
        self.notifier = notifier
        self.default_currency = default_currency

    async def record(self, payload: Dict[str, Any]) -> Transaction:
        """
        Validate and persist a transaction.

        Args:
            payload: transaction_id, payer_name, payer_email, amount,
                currency?, payment_status?, service_type?

        Returns:
            Stored Transaction including id and created_at

        Raises:
            InputValidationError: payload failed validation (nothing stored)
            DuplicateTransactionError: transaction_id already recorded
            DatabaseError: any other storage failure
        """
        try:
            values = validate_transaction_payload(payload)
        except InputValidationError as e:
            logger.warning(f"Validation error: {e.details}")
            raise

        values["currency"] = values["currency"] or self.default_currency

        db_transaction = TransactionModel(**values)

        async with self.database.session() as session:
            try:
                session.add(db_transaction)
                await session.commit()
                await session.refresh(db_transaction)
            except IntegrityError as e:
                await session.rollback()
                if not _is_unique_violation(e):
                    logger.error(
                        f"Constraint violation saving transaction {values['transaction_id']}: {e.orig}"
                    )
                    raise DatabaseError() from e
                logger.warning(
                    f"Duplicate transaction rejected: {values['transaction_id']} ({e.orig})"
                )
                raise DuplicateTransactionError(
                    "Transaction has already been recorded",
                    details={"transaction_id": values["transaction_id"]}
                ) from e
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(
                    f"Database error saving transaction {values['transaction_id']}: {e}",
                    exc_info=True
                )
                raise DatabaseError() from e

        transaction = Transaction.model_validate(db_transaction)

        logger.info(
            f"Transaction saved: {transaction.transaction_id}, "
            f"payer={transaction.payer_email}, amount={transaction.amount} {transaction.currency}"
        )

        self._schedule_receipt(transaction)
        return transaction

    def _schedule_receipt(self, transaction: Transaction) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.schedule_receipt(transaction)
        except Exception as e:
            logger.error(
                f"Failed to schedule receipt for {transaction.transaction_id}: {e}",
                exc_info=True
            )

    async def get(self, transaction_id: str) -> Optional[Transaction]:
        """
        Retrieve transaction by its provider id.

        Returns:
            Transaction or None if not found
        """
        transaction_id = sanitize_text(transaction_id)

        async with self.database.session() as session:
            db_transaction = await session.scalar(
                select(TransactionModel).where(TransactionModel.transaction_id == transaction_id)
            )

        if db_transaction is None:
            return None
        return Transaction.model_validate(db_transaction)
