"""
Database package for PayGate.

Exports the database handle, initialization and ORM models.
"""
from .init_db import Database, initialize_database, SERVICE_CATALOG
from .models import (
    Base,
    ServiceModel,
    TransactionModel,
)

__all__ = [
    "Database",
    "initialize_database",
    "SERVICE_CATALOG",
    "Base",
    "ServiceModel",
    "TransactionModel",
]
