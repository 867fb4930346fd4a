# models/map_length.py

from sqlalchemy import Column, Integer, String
from models.base import BaseModel


class MapLength(BaseModel):
    __tablename__ = "map_lengths"

    name = Column(String(20), unique=True, nullable=False)
    description = Column(String(100), nullable=True)
    order = Column(Integer, unique=True, nullable=False)

    def __repr__(self):
        return f"<MapLength {self.name} ({self.order})>"
