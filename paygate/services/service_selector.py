"""
Service Selector

Resolves a requested service name to its canonical catalog entry and price.
"""
import html
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, func

from ..db.init_db import Database
from ..db.models import ServiceModel
from ..exceptions import InputValidationError, ServiceNotFoundError, PriceTooLowError
from ..models.services import Service, ServiceSelection
from .validation import Err, required_text, run_checks

logger = logging.getLogger(__name__)

NAME_CHECKS = [required_text("name", "Service name is required.")]


class ServiceSelector:
    """
    Case-insensitive catalog lookup with an optional minimum price.

    Args:
        database: Storage handle
        min_price: Reject matched services priced below this (None disables)
    """

    def __init__(self, database: Database, min_price: Optional[Decimal] = None):
        self.database = database
        self.min_price = min_price

    async def select(self, name) -> ServiceSelection:
        """
        Validate a service choice.

        Raises:
            InputValidationError: name missing, empty or not a string
            ServiceNotFoundError: no catalog entry matches
            PriceTooLowError: matched price is below min_price
        """
        result = run_checks(name, NAME_CHECKS)
        if isinstance(result, Err):
            raise InputValidationError(
                result.message,
                details=[{"field": result.field, "message": result.message}]
            )

        # Catalog names are stored as plain text, not escaped
        key = html.unescape(result.value).lower()

        async with self.database.session() as session:
            # Unique index on lower(name) means at most one row; order_by keeps
            # the choice deterministic regardless.
            service = await session.scalar(
                select(ServiceModel)
                .where(func.lower(ServiceModel.name) == key)
                .order_by(ServiceModel.id)
                .limit(1)
            )

        if service is None:
            logger.info("Service selection rejected: no catalog match")
            raise ServiceNotFoundError()

        if self.min_price is not None and service.price < self.min_price:
            logger.warning(
                f"Service '{service.name}' priced {service.price} is below floor {self.min_price}"
            )
            raise PriceTooLowError(
                f"Service price must be at least {self.min_price:.2f}",
                details={"minimum": float(self.min_price)}
            )

        return ServiceSelection(name=service.name, price=service.price)

    async def list_services(self) -> List[Service]:
        async with self.database.session() as session:
            rows = await session.scalars(select(ServiceModel).order_by(ServiceModel.id))
            return [Service.model_validate(row) for row in rows]
