from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

class OrderItemCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lesson_id: str = Field(alias="lessonId")
    quantity: int

    @field_validator("lesson_id", mode="before")
    @classmethod
    def _lesson_id_as_text(cls, value):
        # Web clients send fixture ids both as "1" and 1
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

class OrderCreate(BaseModel):
    # Presence and emptiness are checked by OrderService so direct callers
    # get the same ValidationError as HTTP clients.
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    items: List[OrderItemCreate] = Field(default_factory=list)
    total: Optional[float] = None

class OrderItemRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    lesson_id: str = Field(alias="lessonId")
    quantity: int
    price: Optional[float] = None

class OrderDraft(BaseModel):
    """A validated order ready to be persisted; has no id yet."""
    name: str
    phone: str
    email: Optional[str] = None
    items: List[OrderItemRecord]
    total: float

class OrderRecord(OrderDraft):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    created_at: datetime = Field(alias="createdAt")

class OrderPlaced(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderId")
    final_total: float = Field(alias="finalTotal")
    mode: str
    message: str
