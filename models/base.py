#/models/base.py

"""
Базовые классы моделей. Импортируется первым, до всех моделей.

Моды и карты хранятся как "идентичность" (Mod, Map) + ревизии данных
(ModDetails, MapDetails); каждая ревизия проходит модерацию отдельно.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import declarative_base, declared_attr

# ЕДИНСТВЕННЫЙ Base в проекте
Base = declarative_base()


class BaseModel(Base):
    """id + служебные метки времени"""
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


class RevisionMixin:
    """Номер ревизии и поля модерации: кто и когда отправил / одобрил"""

    revision = Column(Integer, default=0, nullable=False)
    time_submitted = Column(DateTime, nullable=False)
    time_approved = Column(DateTime, nullable=True)

    # колонки с ForeignKey в миксине - только через declared_attr
    @declared_attr
    def submitted_by(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    @declared_attr
    def approved_by(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    @property
    def is_approved(self) -> bool:
        return self.time_approved is not None

    def approve(self, user_id: int, when: datetime) -> None:
        self.time_approved = when
        self.approved_by = user_id
