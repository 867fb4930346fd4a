# schemas/publisher.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PublisherUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    gamebanana_id: Optional[int] = Field(default=None, alias="gamebananaID")
    user_id: Optional[int] = Field(default=None, alias="userID")
