"""Notification feed models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Notification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    message: str = ""
    type: str = "general"
    is_read: bool = Field(default=False, alias="isRead")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
