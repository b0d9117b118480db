from pydantic import BaseModel, Field
from typing import Optional

class Lesson(BaseModel):
    """Wire-facing lesson shape, identical for both inventory backends."""
    id: str
    subject: str
    location: str
    price: float
    spaces: int
    description: Optional[str] = None
    image: Optional[str] = None

    class Config:
        from_attributes = True

class LessonUpdate(BaseModel):
    """Sparse patch of the mutable lesson fields. Unknown keys are dropped."""
    subject: Optional[str] = None
    location: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    spaces: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    image: Optional[str] = None

    class Config:
        extra = "ignore"

    def as_patch(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)
