# models/user.py

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from models.base import BaseModel
import enum


class AccountStatus(enum.Enum):
    """Статус аккаунта"""
    ACTIVE = "Active"
    DELETED = "Deleted"
    BANNED = "Banned"


class User(BaseModel):
    __tablename__ = "users"

    display_name = Column(String(50), nullable=False)
    discord_id = Column(String(50), unique=True, nullable=True)
    discord_username = Column(String(32), nullable=True)
    discord_discrim = Column(String(4), nullable=True)
    display_discord = Column(Boolean, default=False)

    # Права через запятую: "Admin,Map_Moderator"
    permissions = Column(String(255), default="", nullable=False)
    account_status = Column(SQLEnum(AccountStatus), default=AccountStatus.ACTIVE, nullable=False)
    time_deleted_or_banned = Column(DateTime, nullable=True)

    # RELATIONSHIPS
    publishers = relationship("Publisher", back_populates="user", lazy="selectin")

    @property
    def permissions_array(self) -> list:
        """Список прав пользователя"""
        if not self.permissions:
            return []
        return [p.strip() for p in self.permissions.split(",") if p.strip()]

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.display_name}')>"
