"""
Database Lifecycle

Owns the async engine and session factory for PayGate. One Database instance
is created at startup, injected into the components that need storage, and
disposed on shutdown. Sessions are scoped per operation via
`async with database.session()`.
"""
import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator, Dict, List, Any

from sqlalchemy import event, select, func, text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from .models import Base, ServiceModel

logger = logging.getLogger(__name__)


# Catalog seeded into an empty services table
SERVICE_CATALOG: List[Dict[str, Any]] = [
    {"id": 1, "name": "Basic Service", "price": Decimal("100.00")},
    {"id": 2, "name": "Premium Service", "price": Decimal("200.00")},
    {"id": 3, "name": "Enterprise Service", "price": Decimal("300.00")},
]


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    """WAL for concurrent readers, NORMAL sync for throughput."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


class Database:
    """
    Explicitly owned storage handle.

    Args:
        url: SQLAlchemy async URL (sqlite+aiosqlite:///... by default)
        timeout: Seconds to wait for a connection or a SQLite write lock
        echo: Log emitted SQL
    """

    def __init__(self, url: str, timeout: float = 30.0, echo: bool = False):
        self.url = url
        is_sqlite = url.startswith("sqlite")

        engine_options: Dict[str, Any] = {
            "echo": echo,
            "pool_pre_ping": True,  # Verify connections before using
        }
        if is_sqlite:
            engine_options["connect_args"] = {
                "timeout": timeout,  # lock acquisition
                "check_same_thread": False,
            }
        else:
            engine_options["pool_timeout"] = timeout
            engine_options["pool_recycle"] = 3600

        self.engine = create_async_engine(url, **engine_options)

        if is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_pragmas)

        self._sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Acquire a session for one operation; always released on exit."""
        async with self._sessionmaker() as session:
            yield session

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def seed_services(self, catalog: List[Dict[str, Any]] = SERVICE_CATALOG) -> int:
        """
        Insert the catalog if the services table is empty.

        Returns:
            Number of services inserted
        """
        async with self.session() as session:
            count = await session.scalar(select(func.count()).select_from(ServiceModel))
            if count:
                logger.debug(f"Services table already holds {count} rows, skipping seed")
                return 0

            session.add_all([ServiceModel(**entry) for entry in catalog])
            await session.commit()

        logger.info(f"Seeded {len(catalog)} services")
        return len(catalog)

    async def ping(self) -> bool:
        """Return True if a trivial query succeeds."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")


async def initialize_database(database: Database) -> None:
    """
    Create all tables and seed the service catalog.

    Called during FastAPI startup.
    """
    logger.info(f"Initializing database at: {database.engine.url.render_as_string(hide_password=True)}")
    await database.create_tables()
    await database.seed_services()

