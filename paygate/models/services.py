"""
Pydantic Service Models

Catalog entries and the result of a service selection.
"""
from decimal import Decimal
from pydantic import BaseModel, Field, field_serializer


class Service(BaseModel):
    """Catalog entry as listed by GET /api/services."""
    id: int
    name: str
    price: Decimal = Field(gt=0)

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

    model_config = {"from_attributes": True}


class ServiceSelection(BaseModel):
    """Canonical name and price for a validated service choice."""
    name: str
    price: Decimal = Field(gt=0)

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

    model_config = {
        "json_schema_extra": {
            "example": {"name": "Basic Service", "price": 100}
        }
    }
