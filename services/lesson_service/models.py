from sqlalchemy import Column, Integer, String, Float, CheckConstraint
from shared.config.database import Base

class Lesson(Base):
    __tablename__ = "lessons"
    __table_args__ = (
        CheckConstraint("spaces >= 0", name="ck_lessons_spaces_non_negative"),
        CheckConstraint("price >= 0", name="ck_lessons_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String, nullable=False)
    location = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    spaces = Column(Integer, nullable=False, default=0)
    description = Column(String, nullable=True)
    image = Column(String, nullable=True)
