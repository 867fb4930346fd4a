# schemas/map.py

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.map import MapSide


class MapCreate(BaseModel):
    """Карта в составе мода (поля как в JSON запроса)"""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1, max_length=200)
    length: str
    description: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=500)
    minimum_mod_version: Optional[str] = Field(default=None, alias="minimumModVersion")
    map_removed_from_mod: bool = Field(default=False, alias="mapRemovedFromModBool")
    tech_any: Optional[List[str]] = Field(default=None, alias="techAny")
    tech_fc: Optional[List[str]] = Field(default=None, alias="techFC")
    canonical_difficulty: Optional[str] = Field(default=None, alias="canonicalDifficulty")
    mapper_user_id: Optional[int] = Field(default=None, alias="mapperUserID")
    mapper_name_string: Optional[str] = Field(default=None, max_length=50, alias="mapperNameString")
    chapter: Optional[int] = Field(default=None, ge=1)
    side: Optional[MapSide] = None
    mod_difficulty: Optional[Union[str, List[str]]] = Field(default=None, alias="modDifficulty")
    overall_rank: Optional[int] = Field(default=None, ge=1, alias="overallRank")

    @model_validator(mode="after")
    def _require_mapper(self):
        if self.mapper_user_id is None and not self.mapper_name_string:
            raise ValueError("either mapperUserID or mapperNameString is required")
        return self
