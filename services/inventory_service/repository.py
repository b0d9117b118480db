"""
Lesson inventory backends.

Two interchangeable stores share one async contract:

* ``ConnectedInventory`` persists through SQLAlchemy. Reservations are a
  single conditional ``UPDATE ... WHERE spaces >= :quantity`` so concurrent
  orders can never drive ``spaces`` below zero.
* ``FallbackInventory`` keeps the sample lessons in process. Every
  read-modify-write of a lesson happens under that lesson's own lock, so
  unrelated lessons never contend.

Both return normalized copies; the records they own never leave the store.
"""
import asyncio
import itertools
import threading
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from enum import Enum
from numbers import Real
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from shared.config.database import build_sessionmaker
from shared.exceptions import RetrievalFailure, ValidationError
from services.lesson_service.models import Lesson as LessonRow
from services.lesson_service.schemas import Lesson
from services.order_service.models import Order as OrderRow, OrderItem as OrderItemRow
from services.order_service.schemas import OrderDraft, OrderItemRecord, OrderRecord

from .fixtures import SAMPLE_LESSONS
from .normalize import DISPLAY_FIELDS, normalize
from .policy import can_reserve, reservable

logger = structlog.get_logger(__name__)

MUTABLE_FIELDS = frozenset(DISPLAY_FIELDS)


class InventoryMode(str, Enum):
    CONNECTED = "connected"
    FALLBACK = "fallback"


class ReservationOutcome(str, Enum):
    RESERVED = "reserved"
    INSUFFICIENT_SPACES = "insufficient_spaces"
    NOT_FOUND = "not_found"


class InventoryStore(Protocol):
    mode: InventoryMode
    durable: bool

    async def list_lessons(self) -> List[Lesson]: ...

    async def get_lesson(self, lesson_id: str) -> Optional[Lesson]: ...

    async def update_lesson(self, lesson_id: str, patch: Mapping) -> Optional[Lesson]: ...

    async def reserve_spaces(self, lesson_id: str, quantity: int) -> ReservationOutcome: ...

    async def release_spaces(self, lesson_id: str, quantity: int) -> bool: ...

    async def create_order(self, draft: OrderDraft) -> OrderRecord: ...

    async def get_order(self, order_id: str) -> Optional[OrderRecord]: ...

    async def close(self) -> None: ...


def clean_patch(patch: Mapping) -> dict:
    """Restrict ``patch`` to the mutable lesson fields and check their values."""
    changes = {key: value for key, value in patch.items() if key in MUTABLE_FIELDS}
    if not changes:
        raise ValidationError("No updatable lesson fields supplied")
    if "spaces" in changes:
        spaces = changes["spaces"]
        if isinstance(spaces, bool) or not isinstance(spaces, int) or spaces < 0:
            raise ValidationError("spaces must be a non-negative integer")
    if "price" in changes:
        price = changes["price"]
        if isinstance(price, bool) or not isinstance(price, Real) or price < 0:
            raise ValidationError("price must be a non-negative number")
    return changes


def _check_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("quantity must be a positive integer")


class FallbackInventory:
    mode = InventoryMode.FALLBACK
    durable = False

    def __init__(self, lessons: Iterable[dict] = SAMPLE_LESSONS):
        self._lessons: List[dict] = [dict(lesson) for lesson in lessons]
        self._by_id: Dict[str, dict] = {lesson["id"]: lesson for lesson in self._lessons}
        self._locks: Dict[str, threading.Lock] = {
            lesson_id: threading.Lock() for lesson_id in self._by_id
        }
        self._orders: Dict[str, OrderRecord] = {}
        self._orders_lock = threading.Lock()
        self._order_ids = itertools.count(1)

    async def list_lessons(self) -> List[Lesson]:
        return [normalize(lesson) for lesson in self._lessons]

    async def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        lesson = self._by_id.get(lesson_id)
        return normalize(lesson) if lesson is not None else None

    async def update_lesson(self, lesson_id: str, patch: Mapping) -> Optional[Lesson]:
        lesson = self._by_id.get(lesson_id)
        if lesson is None:
            return None
        changes = clean_patch(patch)
        with self._locks[lesson_id]:
            lesson.update(changes)
            updated = normalize(lesson)
        logger.info("lesson_updated", lesson_id=lesson_id, fields=sorted(changes), mode=self.mode.value)
        return updated

    async def reserve_spaces(self, lesson_id: str, quantity: int) -> ReservationOutcome:
        _check_quantity(quantity)
        lesson = self._by_id.get(lesson_id)
        if lesson is None:
            return ReservationOutcome.NOT_FOUND
        with self._locks[lesson_id]:
            if not can_reserve(normalize(lesson), quantity):
                return ReservationOutcome.INSUFFICIENT_SPACES
            lesson["spaces"] -= quantity
            remaining = lesson["spaces"]
        logger.info("spaces_reserved", lesson_id=lesson_id, quantity=quantity, remaining=remaining)
        return ReservationOutcome.RESERVED

    async def release_spaces(self, lesson_id: str, quantity: int) -> bool:
        _check_quantity(quantity)
        lesson = self._by_id.get(lesson_id)
        if lesson is None:
            return False
        with self._locks[lesson_id]:
            lesson["spaces"] += quantity
            remaining = lesson["spaces"]
        logger.info("spaces_released", lesson_id=lesson_id, quantity=quantity, remaining=remaining)
        return True

    async def create_order(self, draft: OrderDraft) -> OrderRecord:
        with self._orders_lock:
            order_id = str(next(self._order_ids))
            record = OrderRecord(
                id=order_id,
                created_at=datetime.now(timezone.utc),
                **draft.model_dump(),
            )
            self._orders[order_id] = record
        logger.warning("order_not_persisted", order_id=order_id, mode=self.mode.value)
        return record.model_copy(deep=True)

    async def get_order(self, order_id: str) -> Optional[OrderRecord]:
        record = self._orders.get(order_id)
        return record.model_copy(deep=True) if record is not None else None

    async def close(self) -> None:
        return None


# Ids are int4 serials; anything outside this range cannot name a row.
MAX_PRIMARY_KEY = 2**31 - 1


def _primary_key(identifier: str) -> Optional[int]:
    try:
        pk = int(identifier)
    except (TypeError, ValueError):
        return None
    if not 1 <= pk <= MAX_PRIMARY_KEY:
        return None
    return pk


def _order_record(order: OrderRow) -> OrderRecord:
    return OrderRecord(
        id=str(order.id),
        name=order.name,
        phone=order.phone,
        email=order.email,
        total=order.total,
        created_at=order.created_at,
        items=[
            OrderItemRecord(lesson_id=item.lesson_id, quantity=item.quantity, price=item.price)
            for item in order.items
        ],
    )


class ConnectedInventory:
    mode = InventoryMode.CONNECTED
    durable = True

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._sessions = build_sessionmaker(engine)

    @asynccontextmanager
    async def _session(self, action: str):
        try:
            async with self._sessions() as session:
                yield session
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            logger.error("retrieval_failure", action=action, error=str(exc))
            raise RetrievalFailure(action) from exc

    async def list_lessons(self) -> List[Lesson]:
        async with self._session("fetch lessons") as session:
            result = await session.execute(select(LessonRow).order_by(LessonRow.id))
            return [normalize(row) for row in result.scalars().all()]

    async def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        pk = _primary_key(lesson_id)
        if pk is None:
            return None
        async with self._session("fetch lesson") as session:
            row = await session.get(LessonRow, pk)
            return normalize(row) if row is not None else None

    async def update_lesson(self, lesson_id: str, patch: Mapping) -> Optional[Lesson]:
        pk = _primary_key(lesson_id)
        if pk is None:
            return None
        async with self._session("update lesson") as session:
            row = await session.get(LessonRow, pk)
            if row is None:
                return None
            changes = clean_patch(patch)
            for field, value in changes.items():
                setattr(row, field, value)
            await session.commit()
            await session.refresh(row)
            updated = normalize(row)
        logger.info("lesson_updated", lesson_id=lesson_id, fields=sorted(changes), mode=self.mode.value)
        return updated

    async def reserve_spaces(self, lesson_id: str, quantity: int) -> ReservationOutcome:
        _check_quantity(quantity)
        pk = _primary_key(lesson_id)
        if pk is None:
            return ReservationOutcome.NOT_FOUND
        stmt = (
            update(LessonRow)
            .where(LessonRow.id == pk, reservable(LessonRow.spaces, quantity))
            .values(spaces=LessonRow.spaces - quantity)
            .execution_options(synchronize_session=False)
        )
        async with self._session("reserve spaces") as session:
            result = await session.execute(stmt)
            await session.commit()
            if result.rowcount == 1:
                logger.info("spaces_reserved", lesson_id=lesson_id, quantity=quantity)
                return ReservationOutcome.RESERVED
            exists = await session.scalar(select(LessonRow.id).where(LessonRow.id == pk))
        if exists is None:
            return ReservationOutcome.NOT_FOUND
        return ReservationOutcome.INSUFFICIENT_SPACES

    async def release_spaces(self, lesson_id: str, quantity: int) -> bool:
        _check_quantity(quantity)
        pk = _primary_key(lesson_id)
        if pk is None:
            return False
        stmt = (
            update(LessonRow)
            .where(LessonRow.id == pk)
            .values(spaces=LessonRow.spaces + quantity)
            .execution_options(synchronize_session=False)
        )
        async with self._session("release spaces") as session:
            result = await session.execute(stmt)
            await session.commit()
        logger.info("spaces_released", lesson_id=lesson_id, quantity=quantity)
        return result.rowcount == 1

    async def create_order(self, draft: OrderDraft) -> OrderRecord:
        order = OrderRow(
            name=draft.name,
            phone=draft.phone,
            email=draft.email,
            total=draft.total,
            created_at=datetime.now(timezone.utc),
            items=[
                OrderItemRow(
                    position=position,
                    lesson_id=item.lesson_id,
                    quantity=item.quantity,
                    price=item.price,
                )
                for position, item in enumerate(draft.items)
            ],
        )
        async with self._session("save order") as session:
            session.add(order)
            await session.commit()
        logger.info("order_stored", order_id=order.id)
        return _order_record(order)

    async def get_order(self, order_id: str) -> Optional[OrderRecord]:
        pk = _primary_key(order_id)
        if pk is None:
            return None
        async with self._session("fetch order") as session:
            order = await session.get(OrderRow, pk)
            return _order_record(order) if order is not None else None

    async def close(self) -> None:
        await self._engine.dispose()
