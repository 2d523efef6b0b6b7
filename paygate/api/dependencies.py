"""
FastAPI dependencies for the components created in the app lifespan.
"""
from fastapi import Request

from ..config import Settings
from ..services.amount_validator import CustomAmountValidator
from ..services.service_selector import ServiceSelector
from ..services.transaction_service import TransactionRecorder


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_service_selector(request: Request) -> ServiceSelector:
    return request.app.state.service_selector


def get_amount_validator(request: Request) -> CustomAmountValidator:
    return request.app.state.amount_validator


def get_transaction_recorder(request: Request) -> TransactionRecorder:
    return request.app.state.transaction_recorder
