"""
Pytest configuration and shared fixtures for PayGate tests.
"""
import pytest
import pytest_asyncio
from decimal import Decimal
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from paygate.config import Settings
from paygate.db.init_db import Database, initialize_database
from paygate.main import create_app


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file, email disabled"""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'paygate_test.db'}",
        database_timeout=30.0,
        paypal_client_id="test-client-id",
        min_custom_amount=Decimal("50"),
        min_service_price=None,
        email_user=None,
        email_pass=None,
        log_file=None,
    )


@pytest_asyncio.fixture
async def database(settings):
    """Initialized database with the seeded service catalog"""
    db = Database(settings.database_url, timeout=settings.database_timeout)
    await initialize_database(db)
    yield db
    await db.dispose()


@pytest.fixture
def mock_notifier():
    """Receipt notifier double that records scheduled receipts"""
    notifier = MagicMock()
    notifier.schedule_receipt = MagicMock(return_value="receipt_job")
    return notifier


@pytest.fixture
def valid_payload():
    """Completed PayPal capture as posted by the checkout page"""
    return {
        "transaction_id": "TX1",
        "payer_name": "Jane Doe",
        "payer_email": "jane@example.com",
        "amount": "150.00",
        "currency": "USD",
        "payment_status": "COMPLETED",
        "service_type": "Premium Service",
    }


@pytest.fixture
def client(settings):
    """TestClient with the app lifespan running"""
    with TestClient(create_app(settings)) as test_client:
        yield test_client
