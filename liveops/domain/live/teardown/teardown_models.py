"""Teardown domain models."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from liveops.services.integrations.media_models import ChannelIdentity, LiveOutputRecord
from liveops.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .teardown_errors import InputValidationError


class TeardownStage(str, Enum):
    """Steps of a teardown run, in execution order."""

    DISCOVERING = "discovering"
    DELETING_DEPENDENTS = "deleting_dependents"
    AWAITING_STOP = "awaiting_stop"
    DELETING_CHANNEL = "deleting_channel"
    RECONCILING_METADATA = "reconciling_metadata"
    DONE = "done"

    def __str__(self) -> str:
        return self.value


class DependentKind(str, Enum):
    LIVE_OUTPUT = "live_output"
    ASSET = "asset"
    STREAMING_LOCATOR = "streaming_locator"
    STREAMING_POLICY = "streaming_policy"

    def __str__(self) -> str:
        return self.value


class DependentAction(str, Enum):
    DISCOVER = "discover"
    DELETE = "delete"
    SKIP = "skip"

    def __str__(self) -> str:
        return self.value


class DependentOutcome(BaseModel):
    """What happened to a single dependent resource during teardown."""

    model_config = ConfigDict(frozen=True)

    kind: DependentKind
    name: str
    action: DependentAction
    deleted: bool = False
    errcode: str | None = None
    error: str | None = None

    @classmethod
    def deleted_ok(cls, kind: DependentKind, name: str) -> "DependentOutcome":
        return cls(kind=kind, name=name, action=DependentAction.DELETE, deleted=True)

    @classmethod
    def cleanup_failed(cls, kind: DependentKind, name: str, error: Exception) -> "DependentOutcome":
        return cls(
            kind=kind,
            name=name,
            action=DependentAction.DELETE,
            errcode=AppErrorCode.E_DEPENDENT_CLEANUP_FAILED.value,
            error=str(error),
        )

    @classmethod
    def skipped(cls, kind: DependentKind, name: str, reason: str) -> "DependentOutcome":
        return cls(kind=kind, name=name, action=DependentAction.SKIP, error=reason)

    @classmethod
    def not_resolved(cls, kind: DependentKind, name: str, reason: str) -> "DependentOutcome":
        return cls(kind=kind, name=name, action=DependentAction.DISCOVER, error=reason)


class DependentPlan(BaseModel):
    """Resources hanging off one live output, resolved before anything is deleted.

    Policy names must be captured here: once the asset and its locators are gone,
    the policy they referenced can no longer be looked up.
    """

    output: LiveOutputRecord
    asset_name: str | None = None
    locator_names: list[str] = Field(default_factory=list)
    custom_policy_names: list[str] = Field(default_factory=list)


class TeardownRequest(BaseModel):
    """Validated teardown input. Accepts both current and legacy field names."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    channel_name: str = Field(
        validation_alias=AliasChoices("channelName", "liveEventName", "channel_name"),
    )
    delete_asset: bool = Field(
        default=True,
        validation_alias=AliasChoices("deleteAsset", "delete_asset"),
    )
    region_selector: str | None = Field(
        default=None,
        validation_alias=AliasChoices("regionSelector", "azureRegion", "region_selector"),
    )

    @field_validator("channel_name")
    @classmethod
    def validate_channel_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("channelName must not be empty")
        return v

    @field_validator("delete_asset", mode="before")
    @classmethod
    def default_delete_asset(cls, v: Any) -> Any:
        return True if v is None else v

    @field_validator("region_selector")
    @classmethod
    def blank_region_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @classmethod
    def parse(cls, payload: Any) -> "TeardownRequest":
        """Parse a raw request payload.

        Raises:
            InputValidationError: If the payload is not an object or the channel name is missing
        """
        if not isinstance(payload, dict):
            raise InputValidationError("Request body must be a JSON object")
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
            )
            raise InputValidationError(
                f"Error - please pass channelName (or liveEventName) in the JSON. {details}"
            ) from e


class TeardownOutcome(BaseModel):
    """Result of one teardown invocation."""

    model_config = ConfigDict(frozen=True)

    channel_identity: ChannelIdentity
    success: bool
    stage: TeardownStage
    status_code: int = HttpStatusCode.OK
    errcode: str | None = None
    error_detail: str | None = None
    erresid: str | None = None
    dependents: list[DependentOutcome] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def channel_name(self) -> str:
        return self.channel_identity.channel_name

    @property
    def failed_dependents(self) -> list[DependentOutcome]:
        return [d for d in self.dependents if d.action != DependentAction.DISCOVER and not d.deleted]

    @classmethod
    def failure(
        cls,
        identity: ChannelIdentity,
        stage: TeardownStage,
        error: AppError,
        dependents: list[DependentOutcome],
        warnings: list[str],
    ) -> "TeardownOutcome":
        return cls(
            channel_identity=identity,
            success=False,
            stage=stage,
            status_code=error.status_code,
            errcode=error.errcode,
            error_detail=error.errmesg,
            erresid=error.erresid,
            dependents=dependents,
            warnings=warnings,
        )
