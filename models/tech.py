# models/tech.py

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from models.base import BaseModel


class Tech(BaseModel):
    """Техника прохождения (wavedash, hyperdash, ...)"""
    __tablename__ = "tech_list"

    name = Column(String(50), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    default_difficulty_id = Column(Integer, ForeignKey("difficulties.id"), nullable=False)

    # Relationships
    difficulty = relationship("Difficulty", lazy="selectin")

    def __repr__(self):
        return f"<Tech {self.name}>"


class MapToTech(BaseModel):
    """Связь ревизии карты с техникой"""
    __tablename__ = "maps_to_tech"

    map_details_id = Column(Integer, ForeignKey("maps_details.id", ondelete="CASCADE"), nullable=False, index=True)
    tech_id = Column(Integer, ForeignKey("tech_list.id"), nullable=False)
    full_clear_only = Column(Boolean, default=False, nullable=False)

    # Relationships
    map_details = relationship("MapDetails", back_populates="tech_links")
    tech = relationship("Tech", lazy="selectin")

    def __repr__(self):
        return f"<MapToTech details={self.map_details_id} tech={self.tech_id} fc={self.full_clear_only}>"
