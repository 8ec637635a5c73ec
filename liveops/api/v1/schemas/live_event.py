from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from liveops import __version__
from liveops.domain.live.teardown.teardown_models import DependentOutcome, TeardownOutcome
from liveops.schemas import LiveEventEntry
from liveops.shared.api.utils import ApiResponse

from .serializers import serialize_utc_datetime


class CamelOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DependentOut(CamelOut):
    kind: str
    name: str
    action: str
    deleted: bool
    errcode: str | None = None
    error: str | None = None

    @classmethod
    def from_outcome(cls, outcome: DependentOutcome) -> "DependentOut":
        return cls(
            kind=outcome.kind.value,
            name=outcome.name,
            action=outcome.action.value,
            deleted=outcome.deleted,
            errcode=outcome.errcode,
            error=outcome.error,
        )


class DeleteLiveEventOut(ApiResponse, CamelOut):
    """Successful teardown. `version` is the build, `operationsVersion` the package release."""

    channel_name: str
    success: bool = True
    operations_version: str = Field(default=__version__)
    dependents: list[DependentOut] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: TeardownOutcome) -> "DeleteLiveEventOut":
        return cls(
            channel_name=outcome.channel_name,
            dependents=[DependentOut.from_outcome(d) for d in outcome.dependents],
            warnings=outcome.warnings,
        )


class LiveOutputInfoOut(CamelOut):
    name: str
    asset_name: str | None = None


class LiveEventInfoOut(CamelOut):
    id: str
    live_event_name: str
    ams_account_name: str
    resource_state: str | None = None
    region: str | None = None
    live_outputs: list[LiveOutputInfoOut] = Field(default_factory=list)
    updated_at: datetime

    @field_serializer("updated_at")
    def serialize_datetime(self, v: datetime) -> str:
        return serialize_utc_datetime(v)

    @classmethod
    def from_entry(cls, entry: LiveEventEntry) -> "LiveEventInfoOut":
        return cls(
            id=entry.id,
            live_event_name=entry.live_event_name,
            ams_account_name=entry.ams_account_name,
            resource_state=entry.resource_state,
            region=entry.region,
            live_outputs=[
                LiveOutputInfoOut(name=o.name, asset_name=o.asset_name) for o in entry.live_outputs
            ],
            updated_at=entry.updated_at,
        )
