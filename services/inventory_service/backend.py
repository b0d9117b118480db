"""
Startup selection of the inventory backend.

The choice is made once per process: if the database answers within the
connect timeout the connected store is used for the whole run, otherwise
the in-memory fallback is. There is no failover later on.
"""
import asyncio

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from shared.config.database import Base, build_engine
from shared.config.settings import Settings
from shared.exceptions import BackendUnavailable
from shared.observability import booking_inventory_fallback_mode
from services.lesson_service.models import Lesson as LessonRow

from .fixtures import SAMPLE_LESSONS
from .repository import ConnectedInventory, FallbackInventory, InventoryStore

logger = structlog.get_logger(__name__)


async def _prepare_schema(engine, seed: bool) -> int:
    """Create missing tables and seed an empty lesson table. Returns rows seeded."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        if not seed:
            return 0
        count = await conn.scalar(select(func.count()).select_from(LessonRow))
        if count:
            return 0
        rows = [{k: v for k, v in lesson.items() if k != "id"} for lesson in SAMPLE_LESSONS]
        await conn.execute(LessonRow.__table__.insert(), rows)
        return len(rows)


async def open_connected_inventory(settings: Settings) -> ConnectedInventory:
    try:
        engine = build_engine(settings)
    except (SQLAlchemyError, ImportError, ValueError) as exc:
        raise BackendUnavailable(f"Cannot configure database engine: {exc}") from exc

    try:
        seeded = await asyncio.wait_for(
            _prepare_schema(engine, settings.seed_empty_store),
            timeout=settings.db_connect_timeout,
        )
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
        await engine.dispose()
        raise BackendUnavailable(f"Database unreachable: {exc}") from exc

    if seeded:
        logger.info("lessons_seeded", count=seeded)
    return ConnectedInventory(engine)


async def open_inventory(settings: Settings) -> InventoryStore:
    """Return the inventory store this process will use for its lifetime."""
    if not settings.database_url:
        logger.warning("database_url_missing", mode="fallback")
        booking_inventory_fallback_mode.set(1)
        return FallbackInventory()

    try:
        store = await open_connected_inventory(settings)
    except BackendUnavailable as exc:
        logger.error("backend_unavailable", error=str(exc), mode="fallback")
        booking_inventory_fallback_mode.set(1)
        return FallbackInventory()

    logger.info("backend_connected", mode="connected")
    booking_inventory_fallback_mode.set(0)
    return store
