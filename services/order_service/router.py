from fastapi import APIRouter, Depends, HTTPException

from shared.exceptions import InsufficientSpaces, NotFound, RetrievalFailure, ValidationError
from services.inventory_service.dependencies import get_inventory
from services.inventory_service.repository import InventoryStore
from .schemas import OrderCreate, OrderPlaced, OrderRecord
from .service import OrderService

router = APIRouter()

@router.post("/orders", response_model=OrderPlaced, status_code=201)
async def create_order(order: OrderCreate, inventory: InventoryStore = Depends(get_inventory)):
    try:
        return await OrderService.place_order(inventory, order)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InsufficientSpaces as e:
        raise HTTPException(status_code=409, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RetrievalFailure:
        raise HTTPException(status_code=500, detail="Failed to save order")

@router.get("/orders/{order_id}", response_model=OrderRecord)
async def get_order(order_id: str, inventory: InventoryStore = Depends(get_inventory)):
    try:
        return await OrderService.get_order(inventory, order_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RetrievalFailure:
        raise HTTPException(status_code=500, detail="Failed to fetch order")
