"""Contract tests run against both the connected and the fallback store."""
import asyncio
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from shared.exceptions import ValidationError
from services.inventory_service.repository import InventoryMode, ReservationOutcome
from services.order_service.schemas import OrderDraft, OrderItemRecord


async def test_list_lessons_returns_sample_set(inventory):
    lessons = await inventory.list_lessons()
    assert [l.id for l in lessons] == [str(i) for i in range(1, 11)]
    assert lessons[0].subject == "Math"
    assert lessons[0].spaces == 5


async def test_get_lesson(inventory):
    lesson = await inventory.get_lesson("2")
    assert lesson.subject == "Science"
    assert lesson.location == "West London"
    assert await inventory.get_lesson("999") is None
    assert await inventory.get_lesson("not-an-id") is None


async def test_returned_lessons_are_copies(inventory):
    lesson = await inventory.get_lesson("1")
    lesson.spaces = 0
    assert (await inventory.get_lesson("1")).spaces == 5


async def test_update_sets_only_given_fields(inventory):
    updated = await inventory.update_lesson("1", {"spaces": 10})
    assert updated.spaces == 10
    assert updated.subject == "Math"
    assert updated.price == 21
    assert (await inventory.get_lesson("1")).spaces == 10


async def test_update_ignores_unknown_fields(inventory):
    updated = await inventory.update_lesson("3", {"location": "Online", "id": "99", "colour": "red"})
    assert updated.id == "3"
    assert updated.location == "Online"


@pytest.mark.parametrize("patch", [{}, {"colour": "red"}, {"spaces": -1}, {"price": -5}, {"spaces": 1.5}])
async def test_update_rejects_bad_patch(inventory, patch):
    with pytest.raises(ValidationError):
        await inventory.update_lesson("1", patch)
    assert (await inventory.get_lesson("1")).spaces == 5


async def test_update_unknown_lesson(inventory):
    assert await inventory.update_lesson("999", {"spaces": 1}) is None


async def test_update_unknown_lesson_is_checked_before_patch(inventory):
    assert await inventory.update_lesson("999", {}) is None


@pytest.mark.parametrize("lesson_id", ["99999999999999999999", "2147483648", "-1", "0"])
async def test_out_of_range_ids_are_unknown(inventory, lesson_id):
    assert await inventory.get_lesson(lesson_id) is None
    assert await inventory.update_lesson(lesson_id, {"spaces": 1}) is None
    assert await inventory.reserve_spaces(lesson_id, 1) is ReservationOutcome.NOT_FOUND
    assert await inventory.release_spaces(lesson_id, 1) is False
    assert await inventory.get_order(lesson_id) is None


async def test_reserve_decrements(inventory):
    assert await inventory.reserve_spaces("1", 3) is ReservationOutcome.RESERVED
    assert (await inventory.get_lesson("1")).spaces == 2


async def test_reserve_refuses_more_than_available(inventory):
    await inventory.update_lesson("1", {"spaces": 2})
    assert await inventory.reserve_spaces("1", 5) is ReservationOutcome.INSUFFICIENT_SPACES
    assert (await inventory.get_lesson("1")).spaces == 2


async def test_reserve_exact_remaining(inventory):
    assert await inventory.reserve_spaces("4", 4) is ReservationOutcome.RESERVED
    assert (await inventory.get_lesson("4")).spaces == 0
    assert await inventory.reserve_spaces("4", 1) is ReservationOutcome.INSUFFICIENT_SPACES


async def test_reserve_unknown_lesson(inventory):
    assert await inventory.reserve_spaces("999", 1) is ReservationOutcome.NOT_FOUND


@pytest.mark.parametrize("quantity", [0, -2])
async def test_reserve_requires_positive_quantity(inventory, quantity):
    with pytest.raises(ValidationError):
        await inventory.reserve_spaces("1", quantity)


async def test_release_restores_spaces(inventory):
    await inventory.reserve_spaces("2", 4)
    assert await inventory.release_spaces("2", 4) is True
    assert (await inventory.get_lesson("2")).spaces == 6
    assert await inventory.release_spaces("999", 1) is False


async def test_concurrent_reservations_never_oversell(inventory):
    random.seed(7)
    quantities = [random.randint(1, 3) for _ in range(20)]
    outcomes = await asyncio.gather(*(inventory.reserve_spaces("1", q) for q in quantities))

    reserved = sum(q for q, o in zip(quantities, outcomes) if o is ReservationOutcome.RESERVED)
    final = (await inventory.get_lesson("1")).spaces
    assert final == 5 - reserved
    assert final >= 0
    assert reserved > 0


async def test_create_and_get_order(inventory):
    draft = OrderDraft(
        name="Ada",
        phone="07123",
        email=None,
        items=[OrderItemRecord(lesson_id="1", quantity=2, price=21.0)],
        total=42.0,
    )
    record = await inventory.create_order(draft)
    assert record.id
    assert record.created_at is not None

    fetched = await inventory.get_order(record.id)
    assert fetched.name == "Ada"
    assert fetched.total == 42.0
    assert [(i.lesson_id, i.quantity) for i in fetched.items] == [("1", 2)]
    assert await inventory.get_order("999") is None


async def test_mode_flags(fallback, connected):
    assert fallback.mode is InventoryMode.FALLBACK and fallback.durable is False
    assert connected.mode is InventoryMode.CONNECTED and connected.durable is True


def test_fallback_lock_holds_across_threads(fallback):
    def reserve():
        return asyncio.run(fallback.reserve_spaces("8", 1))

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(lambda _: reserve(), range(40)))

    assert outcomes.count(ReservationOutcome.RESERVED) == 10
    assert asyncio.run(fallback.get_lesson("8")).spaces == 0
