# models/mod.py

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from models.base import BaseModel, RevisionMixin
import enum


class ModType(enum.Enum):
    """Типы модов"""
    NORMAL = "Normal"      # Обычный мод с главами (chapter/side)
    COLLAB = "Collab"
    CONTEST = "Contest"    # У карт есть overall_rank
    LOBBY = "Lobby"


class Mod(BaseModel):
    """
    Идентичность мода. Все изменяемые поля живут в ModDetails (по ревизиям),
    чтобы правки проходили модерацию отдельно.
    """
    __tablename__ = "mods"

    # Relationships
    details = relationship(
        "ModDetails",
        back_populates="mod",
        cascade="all, delete-orphan",
        order_by="ModDetails.revision",
        lazy="selectin",
    )
    difficulties = relationship(
        "Difficulty",
        back_populates="mod",
        cascade="all, delete-orphan",
        foreign_keys="Difficulty.parent_mod_id",
        lazy="selectin",
    )
    maps = relationship(
        "Map",
        back_populates="mod",
        cascade="all, delete-orphan",
        order_by="Map.id",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Mod(id={self.id}, revisions={len(self.details)})>"


class ModDetails(RevisionMixin, BaseModel):
    """Ревизия данных мода"""
    __tablename__ = "mods_details"

    mod_id = Column(Integer, ForeignKey("mods.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(SQLEnum(ModType), default=ModType.NORMAL, nullable=False)
    name = Column(String(200), nullable=False)
    publisher_id = Column(Integer, ForeignKey("publishers.id"), nullable=False, index=True)
    content_warning = Column(Boolean, default=False, nullable=False)
    notes = Column(String(500), nullable=True)
    short_description = Column(String(150), nullable=False)
    long_description = Column(Text, nullable=True)
    gamebanana_mod_id = Column(Integer, nullable=True, index=True)

    # Relationships
    mod = relationship("Mod", back_populates="details")
    publisher = relationship("Publisher", back_populates="mod_details", lazy="selectin")

    def __repr__(self):
        return f"<ModDetails(mod={self.mod_id}, rev={self.revision}, name='{self.name}')>"
