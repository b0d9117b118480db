"""Maps store-native lesson records onto the wire ``Lesson`` shape.

Connected records are ORM rows whose native id is an integer primary key;
fallback records are plain dicts carrying a fixture id. Callers only ever
see the result of ``normalize``, never the records themselves.
"""
from collections.abc import Mapping
from typing import Any

from services.lesson_service.schemas import Lesson

DISPLAY_FIELDS = ("subject", "location", "price", "spaces", "description", "image")


def _read(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _native_id(record: Any) -> Any:
    if isinstance(record, Mapping):
        return record.get("_id", record.get("id"))
    return getattr(record, "id")


def normalize(record: Any) -> Lesson:
    values = {name: _read(record, name) for name in DISPLAY_FIELDS}
    return Lesson(id=str(_native_id(record)), **values)
