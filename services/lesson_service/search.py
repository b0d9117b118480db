"""
Free-text lesson search.

Matching is a plain case-insensitive substring test against
``"<subject> <location> <price> <spaces>"``. Existing web clients rely on
exactly this behaviour (e.g. ``"21 5"`` finds a 21-pound lesson with five
spaces left), so it is deliberately not tokenized or fuzzy.
"""
from typing import Iterable, List

from .schemas import Lesson


def _number_text(value) -> str:
    # 21.0 -> "21", as the web client renders prices
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def haystack(lesson: Lesson) -> str:
    return " ".join(
        (lesson.subject, lesson.location, _number_text(lesson.price), _number_text(lesson.spaces))
    ).lower()


def search(lessons: Iterable[Lesson], query: str) -> List[Lesson]:
    lessons = list(lessons)
    if not query:
        return lessons
    needle = query.lower()
    return [lesson for lesson in lessons if needle in haystack(lesson)]
