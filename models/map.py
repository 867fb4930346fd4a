# models/map.py

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from models.base import BaseModel, RevisionMixin
import enum


class MapSide(enum.Enum):
    """Сторона главы (только для Normal модов)"""
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class Map(BaseModel):
    __tablename__ = "maps"

    mod_id = Column(Integer, ForeignKey("mods.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    mod = relationship("Mod", back_populates="maps")
    details = relationship(
        "MapDetails",
        back_populates="map",
        cascade="all, delete-orphan",
        order_by="MapDetails.revision",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Map(id={self.id}, mod={self.mod_id})>"


class MapDetails(RevisionMixin, BaseModel):
    """Ревизия данных карты"""
    __tablename__ = "maps_details"

    map_id = Column(Integer, ForeignKey("maps.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    canonical_difficulty_id = Column(Integer, ForeignKey("difficulties.id"), nullable=False)
    length_id = Column(Integer, ForeignKey("map_lengths.id"), nullable=False)
    description = Column(String(500), nullable=True)
    notes = Column(String(500), nullable=True)
    minimum_mod_version = Column(String(50), nullable=True)
    map_removed_from_mod = Column(Boolean, default=False, nullable=False)

    # Маппер: либо пользователь сайта, либо просто имя
    mapper_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    mapper_name_string = Column(String(50), nullable=True)

    # Normal моды
    chapter = Column(Integer, nullable=True)
    side = Column(SQLEnum(MapSide), nullable=True)

    # Остальные типы модов
    mod_difficulty_id = Column(Integer, ForeignKey("difficulties.id"), nullable=True)
    overall_rank = Column(Integer, nullable=True)  # только Contest

    # Relationships
    map = relationship("Map", back_populates="details")
    length = relationship("MapLength", lazy="selectin")
    canonical_difficulty = relationship("Difficulty", foreign_keys=[canonical_difficulty_id], lazy="selectin")
    mod_difficulty = relationship("Difficulty", foreign_keys=[mod_difficulty_id], lazy="selectin")
    tech_links = relationship(
        "MapToTech",
        back_populates="map_details",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<MapDetails(map={self.map_id}, rev={self.revision}, name='{self.name}')>"
