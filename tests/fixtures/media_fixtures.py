"""In-memory media service and metadata store doubles for teardown tests.

Both doubles append to a shared call log so tests can assert the exact order of
remote side effects across collaborators.
"""

from dataclasses import dataclass, field

import pytest

from liveops.services.integrations.media_models import (
    AccountScope,
    AssetRecord,
    ChannelIdentity,
    ChannelState,
    LiveOutputRecord,
    StreamingLocatorRecord,
)
from liveops.services.integrations.media_services import RemoteOperationError

MUTATIONS = ("delete_output", "delete_asset", "delete_policy", "stop_channel", "delete_channel")


@dataclass
class FakeResourceClient:
    """ResourceClient double.

    `states` are returned by successive get_channel calls; the last one repeats.
    An exception in `states` is raised by the call that reaches it.
    `failures` maps (operation, resource name) to the exception that call raises.
    """

    states: list[ChannelState | Exception | None] = field(default_factory=lambda: [ChannelState.STOPPED])
    outputs: list[LiveOutputRecord] = field(default_factory=list)
    assets: dict[str, AssetRecord] = field(default_factory=dict)
    asset_locators: dict[str, list[str]] = field(default_factory=dict)
    locators: dict[str, StreamingLocatorRecord] = field(default_factory=dict)
    failures: dict[tuple[str, str], Exception] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def add_output(
        self,
        output_name: str,
        asset_name: str,
        policies_by_locator: dict[str, str | None] | None = None,
    ) -> None:
        """Attach an output with its asset and the asset's locators."""
        policies_by_locator = policies_by_locator or {}
        self.outputs.append(LiveOutputRecord(name=output_name, asset_name=asset_name))
        self.assets[asset_name] = AssetRecord(name=asset_name)
        self.asset_locators[asset_name] = list(policies_by_locator)
        for locator_name, policy_name in policies_by_locator.items():
            self.locators[locator_name] = StreamingLocatorRecord(
                name=locator_name, streaming_policy_name=policy_name
            )

    def fail(self, operation: str, name: str, error: Exception | None = None) -> None:
        self.failures[(operation, name)] = error or RemoteOperationError(operation, name, "boom")

    @property
    def mutations(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] in MUTATIONS]

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    def _call(self, operation: str, name: str) -> None:
        self.calls.append((operation, name))
        error = self.failures.get((operation, name))
        if error is not None:
            raise error

    async def get_channel(self, scope: AccountScope, channel_name: str) -> ChannelState | None:
        self._call("get_channel", channel_name)
        state = self.states.pop(0) if len(self.states) > 1 else self.states[0]
        if isinstance(state, Exception):
            raise state
        return state

    async def list_outputs(self, scope: AccountScope, channel_name: str) -> list[LiveOutputRecord]:
        self._call("list_outputs", channel_name)
        return list(self.outputs)

    async def get_asset(self, scope: AccountScope, asset_name: str) -> AssetRecord | None:
        self._call("get_asset", asset_name)
        return self.assets.get(asset_name)

    async def list_locators_for_asset(self, scope: AccountScope, asset_name: str) -> list[str]:
        self._call("list_locators_for_asset", asset_name)
        return list(self.asset_locators.get(asset_name, []))

    async def get_locator(self, scope: AccountScope, locator_name: str) -> StreamingLocatorRecord | None:
        self._call("get_locator", locator_name)
        return self.locators.get(locator_name)

    async def delete_output(self, scope: AccountScope, channel_name: str, output_name: str) -> None:
        self._call("delete_output", output_name)

    async def delete_asset(self, scope: AccountScope, asset_name: str) -> None:
        self._call("delete_asset", asset_name)

    async def delete_policy(self, scope: AccountScope, policy_name: str) -> None:
        self._call("delete_policy", policy_name)

    async def stop_channel(self, scope: AccountScope, channel_name: str) -> None:
        self._call("stop_channel", channel_name)

    async def delete_channel(self, scope: AccountScope, channel_name: str) -> None:
        self._call("delete_channel", channel_name)


@dataclass
class FakeMetadataStore:
    """ChannelMetadataStore double; `result` is returned by delete unless `error` is set."""

    calls: list[tuple[str, str]] = field(default_factory=list)
    result: bool = True
    error: Exception | None = None

    @property
    def enabled(self) -> bool:
        return self.result

    async def delete(self, identity: ChannelIdentity) -> bool:
        self.calls.append(("metadata_delete", identity.channel_name))
        if self.error is not None:
            raise self.error
        return self.result


@dataclass
class FakeSleep:
    """Records requested delays instead of sleeping."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def account_scope() -> AccountScope:
    return AccountScope(subscription_id="sub-1", resource_group="rg-media", account_name="amsaccount")


@pytest.fixture
def identity(account_scope: AccountScope) -> ChannelIdentity:
    return ChannelIdentity(account_scope=account_scope, channel_name="CH1")


@pytest.fixture
def resource_client() -> FakeResourceClient:
    return FakeResourceClient()


@pytest.fixture
def metadata_store(resource_client: FakeResourceClient) -> FakeMetadataStore:
    """Metadata store sharing the resource client's call log."""
    return FakeMetadataStore(calls=resource_client.calls)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()
