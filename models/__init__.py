# models/__init__.py

# Общий Base для всех моделей
# ВАЖНО: импортируется первым, до любых импортов моделей
from .base import Base, BaseModel

from .user import User, AccountStatus
from .publisher import Publisher
from .difficulty import Difficulty
from .map_length import MapLength
from .tech import Tech, MapToTech
from .mod import Mod, ModDetails, ModType
from .map import Map, MapDetails, MapSide

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "AccountStatus",
    "Publisher",
    "Difficulty",
    "MapLength",
    "Tech",
    "MapToTech",
    "Mod",
    "ModDetails",
    "ModType",
    "Map",
    "MapDetails",
    "MapSide",
]
