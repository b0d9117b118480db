"""
Order placement.

An order is accepted all-or-nothing:

1. validate the request,
2. resolve every lesson and pre-check availability for the combined
   demand per lesson (no lock held, nothing reserved yet),
3. reserve spaces item by item through the inventory store,
4. persist the order.

Steps 3 and 4 run as a saga. If a reservation loses a race with another
order, or the store fails part way through, every reservation already
made for this order is released before the error reaches the caller.
"""
import asyncio
import time
from typing import Dict, List

import structlog

from shared.exceptions import BookingError, InsufficientSpaces, NotFound, RetrievalFailure, ValidationError
from shared.observability import booking_order_duration_seconds, booking_orders_total
from services.inventory_service.policy import can_reserve
from services.inventory_service.repository import InventoryMode, InventoryStore, ReservationOutcome
from services.lesson_service.schemas import Lesson
from .saga import SagaOrchestrator
from .schemas import OrderCreate, OrderDraft, OrderItemCreate, OrderItemRecord, OrderPlaced, OrderRecord

logger = structlog.get_logger(__name__)

# --- ACTIONS ---

def reserve_step(inventory: InventoryStore, lesson_id: str, quantity: int):
    async def reserve(ctx: dict):
        outcome = await inventory.reserve_spaces(lesson_id, quantity)
        if outcome is ReservationOutcome.NOT_FOUND:
            raise NotFound("Lesson", lesson_id)
        if outcome is ReservationOutcome.INSUFFICIENT_SPACES:
            raise InsufficientSpaces(lesson_id, quantity)
    return reserve

def create_order_step(inventory: InventoryStore):
    async def create_order(ctx: dict):
        ctx["order"] = await inventory.create_order(ctx["draft"])
    return create_order

# --- COMPENSATIONS (Rollbacks) ---

def release_step(inventory: InventoryStore, lesson_id: str, quantity: int):
    async def release(ctx: dict):
        if not await inventory.release_spaces(lesson_id, quantity):
            raise NotFound("Lesson", lesson_id)
    return release

# --- BUILDER FACTORY ---

def build_order_saga(inventory: InventoryStore, items: List[OrderItemCreate]) -> SagaOrchestrator:
    saga = SagaOrchestrator()
    for item in items:
        saga.add_step(
            f"reserve_spaces:{item.lesson_id}",
            reserve_step(inventory, item.lesson_id, item.quantity),
            release_step(inventory, item.lesson_id, item.quantity),
        )
    saga.add_step("create_order", create_order_step(inventory), None) # Last step, nothing to undo
    return saga


class OrderService:

    @staticmethod
    def validate(request: OrderCreate) -> None:
        if not (request.name or "").strip() or not (request.phone or "").strip() or not request.items:
            raise ValidationError("name, phone and items are required")
        for item in request.items:
            if not item.lesson_id:
                raise ValidationError("every item needs a lessonId")
            if item.quantity <= 0:
                raise ValidationError(f"quantity for lesson {item.lesson_id} must be a positive integer")
        if request.total is not None and request.total < 0:
            raise ValidationError("total must not be negative")

    @staticmethod
    async def _resolve_lessons(inventory: InventoryStore, items: List[OrderItemCreate]) -> Dict[str, Lesson]:
        lessons: Dict[str, Lesson] = {}
        for item in items:
            if item.lesson_id in lessons:
                continue
            lesson = await inventory.get_lesson(item.lesson_id)
            if lesson is None:
                raise ValidationError(f"Lesson {item.lesson_id} does not exist")
            lessons[item.lesson_id] = lesson
        return lessons

    @staticmethod
    def _check_availability(lessons: Dict[str, Lesson], items: List[OrderItemCreate]) -> None:
        demand: Dict[str, int] = {}
        for item in items:
            demand[item.lesson_id] = demand.get(item.lesson_id, 0) + item.quantity
        for lesson_id, quantity in demand.items():
            lesson = lessons[lesson_id]
            if not can_reserve(lesson, quantity):
                raise InsufficientSpaces(lesson_id, quantity, lesson.spaces)

    @staticmethod
    def _draft(request: OrderCreate, lessons: Dict[str, Lesson]) -> OrderDraft:
        items = [
            OrderItemRecord(
                lesson_id=item.lesson_id,
                quantity=item.quantity,
                price=lessons[item.lesson_id].price,
            )
            for item in request.items
        ]
        if request.total is not None:
            total = request.total
        else:
            total = round(sum(item.price * item.quantity for item in items), 2)
        return OrderDraft(
            name=request.name.strip(),
            phone=request.phone.strip(),
            email=request.email or None,
            items=items,
            total=total,
        )

    @staticmethod
    async def place_order(inventory: InventoryStore, request: OrderCreate) -> OrderPlaced:
        started = time.perf_counter()
        try:
            OrderService.validate(request)
            lessons = await OrderService._resolve_lessons(inventory, request.items)
            OrderService._check_availability(lessons, request.items)
            ctx = {"draft": OrderService._draft(request, lessons)}
            await build_order_saga(inventory, request.items).execute(ctx)
        except asyncio.CancelledError:
            booking_orders_total.labels(status="cancelled").inc()
            logger.warning("order_cancelled")
            raise
        except RetrievalFailure:
            booking_orders_total.labels(status="failed").inc()
            raise
        except BookingError as e:
            booking_orders_total.labels(status="rejected").inc()
            logger.info("order_rejected", reason=str(e))
            raise
        finally:
            booking_order_duration_seconds.observe(time.perf_counter() - started)

        order: OrderRecord = ctx["order"]
        booking_orders_total.labels(status="placed").inc()
        logger.info("order_placed", order_id=order.id, items=len(order.items), mode=inventory.mode.value)

        if inventory.mode is InventoryMode.FALLBACK:
            message = "Order stored in memory (fallback mode, not persisted)"
        else:
            message = "Order stored"
        return OrderPlaced(order_id=order.id, final_total=order.total, mode=inventory.mode.value, message=message)

    @staticmethod
    async def get_order(inventory: InventoryStore, order_id: str) -> OrderRecord:
        order = await inventory.get_order(order_id)
        if order is None:
            raise NotFound("Order", order_id)
        return order
