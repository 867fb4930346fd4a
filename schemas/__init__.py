# schemas/__init__.py
"""Схемы входящих запросов (pydantic)"""

from .map import MapCreate
from .mod import ModCreate, ModUpdate
from .publisher import PublisherUpdate

__all__ = [
    "MapCreate",
    "ModCreate",
    "ModUpdate",
    "PublisherUpdate",
]
