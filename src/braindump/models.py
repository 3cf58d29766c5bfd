from __future__ import annotations

import os
from datetime import datetime
from typing import Annotated, Any, Awaitable, Callable, List, Literal, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIMEZONE = os.getenv("BRAINDUMP_DEFAULT_TIMEZONE", "Asia/Kolkata").strip() or "Asia/Kolkata"
MAX_ITEMS_LIMIT = 20
TITLE_MAX_LENGTH = 140

# str -> str or str -> Awaitable[str]
Cleaner = Callable[[str], Union[str, Awaitable[str]]]

ItemType = Literal["todo", "event"]
InferredType = Literal["todo", "event", "mixed"]


class ProcessOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    timezone: str = DEFAULT_TIMEZONE
    user_id: str = Field(..., alias="userId", min_length=1)
    project_id: Optional[str] = Field(None, alias="projectId")
    someday_allowed: bool = Field(True, alias="somedayAllowed")
    max_items: int = Field(MAX_ITEMS_LIMIT, alias="maxItems", ge=1, le=MAX_ITEMS_LIMIT)
    now_iso: Optional[str] = Field(None, alias="nowISO")

    # In-process only; never part of the wire format.
    cleaner: Optional[Cleaner] = Field(None, exclude=True)

    @field_validator("timezone")
    @classmethod
    def timezone_is_known(cls, v: str) -> str:
        v2 = v.strip()
        try:
            ZoneInfo(v2)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone: {v!r}")
        return v2

    @field_validator("now_iso")
    @classmethod
    def now_iso_is_parseable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            date_parser.isoparse(v)
        except (ValueError, OverflowError):
            raise ValueError(f"nowISO is not an ISO-8601 timestamp: {v!r}")
        return v

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def reference_now(self) -> datetime:
        """The instant all relative dates are resolved against, in the user's zone."""
        if self.now_iso is None:
            return datetime.now(self.zone)
        now = date_parser.isoparse(self.now_iso)
        if now.tzinfo is None:
            now = now.replace(tzinfo=self.zone)
        return now.astimezone(self.zone)


class _Item(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    when_text: Optional[str] = Field(None, alias="whenText")
    reminder: Optional[datetime] = None
    is_draft: bool = Field(True, alias="isDraft")
    is_private: bool = Field(True, alias="isPrivate")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2


class TodoItem(_Item):
    type: Literal["todo"] = "todo"
    project_id: Optional[str] = Field(None, alias="projectId")
    due: Optional[datetime] = None
    notes: Optional[str] = None
    priority: Optional[Literal["low", "high"]] = None


class EventItem(_Item):
    type: Literal["event"] = "event"
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    all_day: Optional[bool] = Field(None, alias="allDay")
    fuzzy: bool = False
    location: Optional[str] = None


StructuredItem = Annotated[Union[TodoItem, EventItem], Field(discriminator="type")]


class Suggestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inferred_type: InferredType = Field(..., alias="inferredType")
    confidence: float = Field(..., ge=0.0, le=1.0)
    rationale: str


class ProcessResult(BaseModel):
    cleaned_text: str
    items: List[StructuredItem] = Field(default_factory=list)
    suggestion: Suggestion
    followups: List[str] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready payload with camelCase item fields."""
        return self.model_dump(mode="json", by_alias=True)
