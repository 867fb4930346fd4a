# models/publisher.py

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from models.base import BaseModel


class Publisher(BaseModel):
    """Издатель мода (аккаунт на GameBanana)"""
    __tablename__ = "publishers"

    name = Column(String(100), nullable=False, index=True)
    gamebanana_id = Column(Integer, unique=True, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Relationships
    user = relationship("User", back_populates="publishers")
    mod_details = relationship("ModDetails", back_populates="publisher")

    def __repr__(self):
        return f"<Publisher(id={self.id}, name='{self.name}', gb={self.gamebanana_id})>"
