from typing import List, Mapping, Optional

from shared.exceptions import NotFound
from services.inventory_service.repository import InventoryStore
from .schemas import Lesson
from .search import search

class LessonService:

    @staticmethod
    async def list_lessons(inventory: InventoryStore) -> List[Lesson]:
        return await inventory.list_lessons()

    @staticmethod
    async def search_lessons(inventory: InventoryStore, query: Optional[str]) -> List[Lesson]:
        lessons = await inventory.list_lessons()
        return search(lessons, query or "")

    @staticmethod
    async def get_lesson(inventory: InventoryStore, lesson_id: str) -> Lesson:
        lesson = await inventory.get_lesson(lesson_id)
        if lesson is None:
            raise NotFound("Lesson", lesson_id)
        return lesson

    @staticmethod
    async def update_lesson(inventory: InventoryStore, lesson_id: str, patch: Mapping) -> Lesson:
        lesson = await inventory.update_lesson(lesson_id, patch)
        if lesson is None:
            raise NotFound("Lesson", lesson_id)
        return lesson
