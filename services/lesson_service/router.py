from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from shared.exceptions import NotFound, RetrievalFailure, ValidationError
from services.inventory_service.dependencies import get_inventory
from services.inventory_service.repository import InventoryStore
from .schemas import Lesson, LessonUpdate
from .service import LessonService

router = APIRouter()


@router.get("/lessons", response_model=List[Lesson])
async def list_lessons(inventory: InventoryStore = Depends(get_inventory)):
    try:
        return await LessonService.list_lessons(inventory)
    except RetrievalFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch lessons")


@router.get("/search", response_model=List[Lesson])
async def search_lessons(
    q: Optional[str] = Query(default=None),
    inventory: InventoryStore = Depends(get_inventory),
):
    try:
        return await LessonService.search_lessons(inventory, q)
    except RetrievalFailure:
        raise HTTPException(status_code=500, detail="Search failed")


@router.get("/lessons/{lesson_id}", response_model=Lesson)
async def get_lesson(lesson_id: str, inventory: InventoryStore = Depends(get_inventory)):
    try:
        return await LessonService.get_lesson(inventory, lesson_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RetrievalFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch lesson")


@router.put("/lessons/{lesson_id}", response_model=Lesson)
async def update_lesson(
    lesson_id: str,
    payload: LessonUpdate,
    inventory: InventoryStore = Depends(get_inventory),
):
    try:
        return await LessonService.update_lesson(inventory, lesson_id, payload.as_patch())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RetrievalFailure:
        raise HTTPException(status_code=500, detail="Failed to update lesson")
