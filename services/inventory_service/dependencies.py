from fastapi import Request

from .repository import InventoryStore


def get_inventory(request: Request) -> InventoryStore:
    """The store chosen at startup, handed to routes instead of a global."""
    return request.app.state.inventory
