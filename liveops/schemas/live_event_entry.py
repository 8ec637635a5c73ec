"""Live event general-info ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import BaseModel, Field, field_validator

from .schema_utils import parse_mongo_datetime, utc_now


class LiveOutputInfo(BaseModel):
    """Live output attached to a live event at the time the entry was written."""

    name: str
    asset_name: str | None = None


class LiveEventEntry(Document):
    """General information about a live event, one document per event and media account."""

    id: str  # type: ignore[assignment]
    live_event_name: Indexed(str)  # type: ignore[valid-type]
    ams_account_name: str

    resource_state: str | None = None
    region: str | None = None
    live_outputs: list[LiveOutputInfo] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    @staticmethod
    def make_id(live_event_name: str, ams_account_name: str) -> str:
        return f"{ams_account_name}:{live_event_name}"

    @classmethod
    def new(cls, live_event_name: str, ams_account_name: str, **fields: Any) -> "LiveEventEntry":
        return cls(
            id=cls.make_id(live_event_name, ams_account_name),
            live_event_name=live_event_name,
            ams_account_name=ams_account_name,
            **fields,
        )

    class Settings:
        name = "live_event_output_info"
        indexes = [
            "ams_account_name",
        ]
