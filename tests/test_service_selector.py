"""
Unit tests for ServiceSelector.

Tests focus on:
- Case- and whitespace-insensitive lookup
- Generic rejection of unknown names
- Minimum price floor
- Catalog uniqueness
"""
import pytest
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from paygate.db.models import ServiceModel
from paygate.exceptions import InputValidationError, ServiceNotFoundError, PriceTooLowError
from paygate.services.service_selector import ServiceSelector


class TestSelect:
    """Tests for ServiceSelector.select"""

    @pytest.mark.asyncio
    async def test_name_variants_resolve_to_same_service(self, database):
        """Any case variant with surrounding whitespace matches the canonical entry"""
        selector = ServiceSelector(database)

        for name in ["Basic Service", " basic service ", "BASIC SERVICE", "\tBaSiC sErViCe\n"]:
            selection = await selector.select(name)
            assert selection.name == "Basic Service"
            assert selection.price == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_serializes_price_as_number(self, database):
        selection = await ServiceSelector(database).select("premium service")

        assert selection.model_dump() == {"name": "Premium Service", "price": 200.0}

    @pytest.mark.asyncio
    async def test_unknown_name_is_generic_not_found(self, database):
        """Unknown names never hint at close matches"""
        selector = ServiceSelector(database)

        for name in ["Basic", "Basic Services", "Gold Service", "<b>Basic Service</b>"]:
            with pytest.raises(ServiceNotFoundError) as exc_info:
                await selector.select(name)
            assert exc_info.value.error_code == "SERVICE_NOT_FOUND"
            assert exc_info.value.message == "Invalid service selection"
            assert exc_info.value.details is None

    @pytest.mark.asyncio
    async def test_invalid_name_is_validation_error(self, database):
        selector = ServiceSelector(database)

        for name in [None, "", "   ", 42, ["Basic Service"]]:
            with pytest.raises(InputValidationError) as exc_info:
                await selector.select(name)
            assert exc_info.value.details == [
                {"field": "name", "message": "Service name is required."}
            ]

    @pytest.mark.asyncio
    async def test_price_below_floor_rejected(self, database):
        """With floor=300, a 100-priced service is PRICE_TOO_LOW"""
        selector = ServiceSelector(database, min_price=Decimal("300"))

        with pytest.raises(PriceTooLowError) as exc_info:
            await selector.select("Basic Service")

        assert exc_info.value.error_code == "PRICE_TOO_LOW"
        assert "300.00" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_price_at_floor_accepted(self, database):
        selector = ServiceSelector(database, min_price=Decimal("300"))

        selection = await selector.select("enterprise service")

        assert selection.name == "Enterprise Service"
        assert selection.price == Decimal("300.00")


class TestCatalog:
    """Tests for catalog listing and seeding"""

    @pytest.mark.asyncio
    async def test_list_services(self, database):
        services = await ServiceSelector(database).list_services()

        assert [s.model_dump() for s in services] == [
            {"id": 1, "name": "Basic Service", "price": 100.0},
            {"id": 2, "name": "Premium Service", "price": 200.0},
            {"id": 3, "name": "Enterprise Service", "price": 300.0},
        ]

    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, database):
        assert await database.seed_services() == 0

        services = await ServiceSelector(database).list_services()
        assert len(services) == 3

    @pytest.mark.asyncio
    async def test_names_unique_case_insensitively(self, database):
        """A second 'basic service' row cannot exist, so lookups never tie"""
        async with database.session() as session:
            session.add(ServiceModel(name="basic service", price=Decimal("1.00")))
            with pytest.raises(IntegrityError):
                await session.commit()

    @pytest.mark.asyncio
    async def test_names_with_markup_characters_selectable(self, database):
        """Catalog names are plain text; escaped lookup keys still match them"""
        async with database.session() as session:
            session.add(ServiceModel(name="R&D Partner's Plan", price=Decimal("250.00")))
            await session.commit()

        selection = await ServiceSelector(database).select(" r&d partner's plan ")

        assert selection.name == "R&D Partner's Plan"
        assert selection.price == Decimal("250.00")
