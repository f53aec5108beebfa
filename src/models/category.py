"""Category model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Category(Base, TimestampMixin):
    """Category a task is filed under. Provisioned outside the API."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)

    # Relationships
    tasks = relationship("Task", back_populates="category")
