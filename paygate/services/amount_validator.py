"""
Custom Amount Validator

Checks a user-entered payment amount before a PayPal order is created.
"""
import logging
from decimal import Decimal
from typing import Any, Optional

from ..exceptions import InputValidationError, AmountTooLowError
from .validation import Ok, Err, Result, numeric, positive, run_checks, to_two_places

logger = logging.getLogger(__name__)

INVALID_AMOUNT = "Amount must be a positive number."


class CustomAmountValidator:
    """
    Validation order: parses to a finite number, is positive, meets the floor.

    Args:
        min_amount: Smallest accepted amount (None disables the floor)
    """

    def __init__(self, min_amount: Optional[Decimal] = Decimal("50")):
        self.min_amount = min_amount
        self.checks = [
            numeric("amount", INVALID_AMOUNT),
            positive("amount", INVALID_AMOUNT),
            self._at_least_minimum,
        ]

    def _at_least_minimum(self, amount: Decimal) -> Result:
        if self.min_amount is not None and amount < self.min_amount:
            return Err(
                "AMOUNT_TOO_LOW",
                f"Minimum amount is {self.min_amount:.2f}, received {amount}",
                "amount"
            )
        return Ok(amount)

    def validate(self, raw: Any) -> str:
        """
        Return the amount formatted with two fraction digits.

        Raises:
            InputValidationError: not numeric, not finite, or not positive
            AmountTooLowError: below min_amount
        """
        result = run_checks(raw, self.checks)

        if isinstance(result, Err):
            logger.info(f"Custom amount rejected: {result.code} ({raw!r})")
            if result.code == "AMOUNT_TOO_LOW":
                raise AmountTooLowError(
                    result.message,
                    details={"minimum": float(self.min_amount)}
                )
            raise InputValidationError(
                result.message,
                details=[{"field": result.field, "message": result.message}]
            )

        return f"{to_two_places(result.value):.2f}"
