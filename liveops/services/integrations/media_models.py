"""Media services resource models consumed by the live domain."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ChannelState(str, Enum):
    """Live event resource state as reported by the media service.

    The domain only observes these states; transitions are driven by the service.

    Running --stop--> Stopping --(service)--> Stopped --delete--> (gone)
    """

    STOPPED = "Stopped"
    STARTING = "Starting"
    RUNNING = "Running"
    STOPPING = "Stopping"
    DELETING = "Deleting"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str | None) -> "ChannelState":
        for state in cls:
            if value and state.value.lower() == value.lower():
                return state
        return cls.UNKNOWN


class AccountScope(BaseModel):
    """Subscription, resource group and media account an operation targets."""

    model_config = ConfigDict(frozen=True)

    subscription_id: str
    resource_group: str
    account_name: str


class ChannelIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_scope: AccountScope
    channel_name: str


class LiveOutputRecord(BaseModel):
    name: str
    asset_name: str


class AssetRecord(BaseModel):
    name: str


class StreamingLocatorRecord(BaseModel):
    name: str
    streaming_policy_name: str | None = None
