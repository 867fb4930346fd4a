# schemas/mod.py

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.mod import ModType
from schemas.map import MapCreate


class _PublisherFields(BaseModel):
    """Способы указать издателя (приоритет: userID > publisherGamebananaID > publisherID > publisherName)"""
    model_config = ConfigDict(populate_by_name=True)

    publisher_name: Optional[str] = Field(default=None, alias="publisherName")
    publisher_id: Optional[int] = Field(default=None, alias="publisherID")
    publisher_gamebanana_id: Optional[int] = Field(default=None, alias="publisherGamebananaID")
    user_id: Optional[int] = Field(default=None, alias="userID")

    @property
    def has_publisher(self) -> bool:
        return any(
            value is not None
            for value in (self.user_id, self.publisher_gamebanana_id, self.publisher_id, self.publisher_name)
        )


class ModCreate(_PublisherFields):
    type: ModType
    name: str = Field(min_length=1, max_length=200)
    content_warning: bool = Field(alias="contentWarning")
    notes: Optional[str] = Field(default=None, max_length=500)
    short_description: str = Field(max_length=150, alias="shortDescription")
    long_description: Optional[str] = Field(default=None, alias="longDescription")
    gamebanana_mod_id: int = Field(alias="gamebananaModID")
    # Не указаны - мод использует сложности по умолчанию
    difficulties: Optional[List[Union[str, List[str]]]] = None
    maps: List[MapCreate] = Field(min_length=1)

    @model_validator(mode="after")
    def _require_publisher(self):
        if not self.has_publisher:
            raise ValueError("one of userID, publisherGamebananaID, publisherID or publisherName is required")
        return self


class ModUpdate(_PublisherFields):
    """PATCH: None значит 'не менять'"""
    type: Optional[ModType] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content_warning: Optional[bool] = Field(default=None, alias="contentWarning")
    notes: Optional[str] = Field(default=None, max_length=500)
    short_description: Optional[str] = Field(default=None, max_length=150, alias="shortDescription")
    long_description: Optional[str] = Field(default=None, alias="longDescription")
    gamebanana_mod_id: Optional[int] = Field(default=None, alias="gamebananaModID")
    difficulties: Optional[List[Union[str, List[str]]]] = None
