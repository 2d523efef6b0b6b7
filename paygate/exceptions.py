"""
PayGate Exception Hierarchy

Every error a caller can see carries a stable upper-case code and is rendered
through the same envelope:

    {"success": false, "error": {"code", "message", "details", "requestId"}}
"""
from typing import Optional, Any, Dict


class PaymentGatewayError(Exception):
    """
    Base exception for all errors surfaced to API callers.

    Messages must be safe to expose; storage and provider internals are
    logged where they happen and never copied into `message`.
    """

    status_code = 500

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Any] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self, request_id: Optional[str] = None) -> Dict[str, Any]:
        """Convert exception to API error envelope."""
        error: Dict[str, Any] = {
            "code": self.error_code,
            "message": self.message,
        }
        if self.details is not None:
            error["details"] = self.details
        if request_id:
            error["requestId"] = request_id
        return {"success": False, "error": error}


class InputValidationError(PaymentGatewayError):
    """
    Request shape or type is wrong. Client-correctable.

    `details` is a list of {"field": ..., "message": ...} entries.
    """

    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ServiceNotFoundError(PaymentGatewayError):
    """
    No catalog entry matches the requested name.

    The message is deliberately generic so the catalog cannot be probed.
    """

    status_code = 404

    def __init__(self, message: str = "Invalid service selection", details: Optional[Any] = None):
        super().__init__("SERVICE_NOT_FOUND", message, details)


class PriceTooLowError(PaymentGatewayError):
    """Matched catalog price is below the configured minimum sale price."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__("PRICE_TOO_LOW", message, details)


class AmountTooLowError(PaymentGatewayError):
    """Custom amount is below the configured minimum."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__("AMOUNT_TOO_LOW", message, details)


class TransactionNotFoundError(PaymentGatewayError):
    status_code = 404

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__("TRANSACTION_NOT_FOUND", message, details)


class DuplicateTransactionError(PaymentGatewayError):
    """
    A transaction with this transaction_id is already recorded.

    Safe to treat as success by a retrying client: the first insert won.
    """

    status_code = 409

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__("DUPLICATE_TRANSACTION", message, details)


class DatabaseError(PaymentGatewayError):
    status_code = 500

    def __init__(self, message: str = "Database error", details: Optional[Any] = None):
        super().__init__("DATABASE_ERROR", message, details)


class MissingPayPalClientIdError(PaymentGatewayError):
    """PAYPAL_CLIENT_ID is not configured."""

    status_code = 500

    def __init__(self, message: str = "PayPal Client ID not found", details: Optional[Any] = None):
        super().__init__("MISSING_PAYPAL_CLIENT_ID", message, details)
