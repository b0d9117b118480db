"""Availability rule for reserving lesson spaces.

``can_reserve`` is the in-process form used by the order pre-check and the
fallback store; ``reservable`` is the same predicate as an SQL expression
for the connected store's conditional update.
"""
from typing import Any


def can_reserve(lesson: Any, quantity: int) -> bool:
    return quantity > 0 and quantity <= lesson.spaces


def reservable(spaces_column, quantity: int):
    return spaces_column >= quantity
