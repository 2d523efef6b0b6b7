"""
SQLAlchemy ORM Models for PayGate

services: catalog entries, read-only to requests.
transactions: append-only ledger of completed payment captures.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, Numeric, Index, CheckConstraint, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ServiceModel(Base):
    """
    ORM model for services table.

    Names are unique case-insensitively (see uq_services_name_ci below).
    """
    __tablename__ = "services"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("price > 0", name="service_price_positive"),
    )


Index("uq_services_name_ci", func.lower(ServiceModel.name), unique=True)


class TransactionModel(Base):
    """
    ORM model for transactions table.

    transaction_id is the payment provider's capture id. The unique
    constraint is what turns a retried submission into DUPLICATE_TRANSACTION.
    """
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(String(255), nullable=False, unique=True)
    payer_name = Column(String(255), nullable=False)
    payer_email = Column(String(320), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    payment_status = Column(String(64))
    service_type = Column(String(255))
    created_at = Column(DateTime, nullable=False, default=_utcnow, index=True)

    __table_args__ = (
        CheckConstraint("length(currency) = 3", name="currency_length_check"),
    )
