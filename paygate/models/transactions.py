"""
Pydantic Transaction Model

Represents a recorded payment capture as returned to API callers.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_serializer


class Transaction(BaseModel):
    """
    Stored transaction record.

    Notes:
    - String fields hold sanitized (HTML-escaped) values
    - amount is stored with two fraction digits and serialized as a number
    - id and created_at are assigned by the database
    """
    id: int
    transaction_id: str = Field(min_length=1)
    payer_name: str = Field(min_length=1)
    payer_email: str
    amount: Decimal = Field(gt=0)
    currency: str = Field(min_length=3, max_length=3)
    payment_status: Optional[str] = None
    service_type: Optional[str] = None
    created_at: datetime

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": 1,
                "transaction_id": "5O190127TN364715T",
                "payer_name": "Jane Doe",
                "payer_email": "jane@example.com",
                "amount": 150.00,
                "currency": "USD",
                "payment_status": "COMPLETED",
                "service_type": "Premium Service",
                "created_at": "2025-10-17T14:35:00Z"
            }
        }
    }
