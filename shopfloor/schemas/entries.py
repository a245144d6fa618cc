from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

EntryStatus = Literal["PREPARATION", "IN PRODUCTION", "READY"]
EntryPriority = Literal["high", "normal", "low"]

EntryValueIn = str | int | float | bool | None


class EntryCreate(BaseModel):
    article_id: int
    quantity: int = Field(default=1, ge=1)
    values: dict[str, EntryValueIn] = Field(default_factory=dict)


class EntryUpdate(BaseModel):
    quantity: int | None = Field(default=None, ge=1)
    status: EntryStatus | None = None
    priority: EntryPriority | None = None


class EntryOut(BaseModel):
    id: int
    article_id: int
    article_name: str
    quantity: int
    status: str
    priority: str
    started_at: datetime | None
    completed_at: datetime | None
    values: dict[str, EntryValueIn]
    created_at: datetime
    updated_at: datetime


class EntryStats(BaseModel):
    """Production board summary"""
    active_jobs: int
    completed_jobs: int
    bottleneck_stage: str
    efficiency: int  # percent of entries that are READY
