# models/difficulty.py

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from models.base import BaseModel


class Difficulty(BaseModel):
    """
    Сложность. parent_mod_id = NULL - дерево сложностей по умолчанию.
    parent_difficulty_id = NULL - родительская (верхнего уровня) сложность.
    order уникален и непрерывен (1..N) среди соседей.
    """
    __tablename__ = "difficulties"

    name = Column(String(50), nullable=False)
    description = Column(String(100), nullable=True)
    order = Column(Integer, nullable=False)

    parent_mod_id = Column(Integer, ForeignKey("mods.id", ondelete="CASCADE"), nullable=True, index=True)
    parent_difficulty_id = Column(
        Integer, ForeignKey("difficulties.id", ondelete="CASCADE"), nullable=True, index=True
    )

    # Relationships
    mod = relationship("Mod", back_populates="difficulties", foreign_keys=[parent_mod_id])
    parent = relationship(
        "Difficulty",
        remote_side="Difficulty.id",
        back_populates="children",
        lazy="selectin",
        join_depth=1,
    )
    children = relationship("Difficulty", back_populates="parent", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("parent_mod_id", "parent_difficulty_id", "order", name="uq_difficulty_order"),
    )

    def __repr__(self):
        return f"<Difficulty(id={self.id}, name='{self.name}', order={self.order})>"
