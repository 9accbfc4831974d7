# app/schemas/notifications/notification.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List

class NotificationCreate(BaseModel):
    """Incoming notification payload. Any ``id`` sent by the client is ignored."""
    model_config = ConfigDict(extra="ignore")

    actor: str = ""
    object: str = ""
    target: str = ""
    updated: str = ""

    @field_validator("actor", "object", "target", "updated", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value

class LdpContainer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    context: str = Field(alias="@context")
    id: str = Field(alias="@id")
    contains: List[str]

class AnnounceActivity(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    context: str = Field(alias="@context")
    id: str = Field(alias="@id")
    type: str = Field(alias="@type")
    actor: str
    object: str
    target: str
    updated: str
