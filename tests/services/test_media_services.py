"""Tests for AmsResourceClient against a mocked management client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from liveops.app_config import AppEnvironConfig, ConfigurationError
from liveops.services.integrations.media_models import AssetRecord, ChannelState
from liveops.services.integrations.media_services import AmsResourceClient, RemoteOperationError


class AsyncPager:
    """Stand-in for AsyncItemPaged."""

    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self._gen()

    async def _gen(self):
        for item in self._items:
            yield item


@pytest.fixture
def cfg() -> AppEnvironConfig:
    return AppEnvironConfig(AMS_LRO_POLLING_INTERVAL_SECONDS=0.5)


@pytest.fixture
def ams() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(cfg: AppEnvironConfig, ams: MagicMock) -> AmsResourceClient:
    return AmsResourceClient(cfg, client=ams)


def make_poller() -> MagicMock:
    poller = MagicMock()
    poller.result = AsyncMock(return_value=None)
    return poller


class TestLookups:
    async def test_get_channel_parses_state(self, client, ams, account_scope):
        # Arrange
        ams.live_events.get = AsyncMock(return_value=SimpleNamespace(resource_state="Stopping"))

        # Act
        state = await client.get_channel(account_scope, "CH1")

        # Assert
        assert state == ChannelState.STOPPING
        ams.live_events.get.assert_awaited_once_with("rg-media", "amsaccount", "CH1")

    async def test_get_channel_unknown_state(self, client, ams, account_scope):
        ams.live_events.get = AsyncMock(return_value=SimpleNamespace(resource_state="Allocating"))

        assert await client.get_channel(account_scope, "CH1") == ChannelState.UNKNOWN

    async def test_get_channel_not_found(self, client, ams, account_scope):
        ams.live_events.get = AsyncMock(side_effect=ResourceNotFoundError(message="not found"))

        assert await client.get_channel(account_scope, "CH1") is None

    async def test_get_channel_service_error(self, client, ams, account_scope):
        ams.live_events.get = AsyncMock(side_effect=HttpResponseError(message="throttled"))

        with pytest.raises(RemoteOperationError) as exc_info:
            await client.get_channel(account_scope, "CH1")

        assert exc_info.value.operation == "get live event"
        assert exc_info.value.resource_name == "CH1"
        assert "throttled" in exc_info.value.detail

    async def test_list_outputs(self, client, ams, account_scope):
        # Arrange
        ams.live_outputs.list = MagicMock(
            return_value=AsyncPager(
                [
                    SimpleNamespace(name="out1", asset_name="a1"),
                    SimpleNamespace(name="out2", asset_name="a2"),
                ]
            )
        )

        # Act
        outputs = await client.list_outputs(account_scope, "CH1")

        # Assert
        assert [(o.name, o.asset_name) for o in outputs] == [("out1", "a1"), ("out2", "a2")]

    async def test_get_asset(self, client, ams, account_scope):
        """Assets carry only their name; locators come from list_locators_for_asset."""
        ams.assets.get = AsyncMock(return_value=SimpleNamespace(name="a1", container="asset-a1"))

        asset = await client.get_asset(account_scope, "a1")

        assert asset == AssetRecord(name="a1")
        assert set(AssetRecord.model_fields) == {"name"}

    async def test_get_asset_not_found(self, client, ams, account_scope):
        ams.assets.get = AsyncMock(side_effect=ResourceNotFoundError(message="not found"))

        assert await client.get_asset(account_scope, "a1") is None

    async def test_list_locators_for_asset(self, client, ams, account_scope):
        # Arrange
        ams.assets.list_streaming_locators = AsyncMock(
            return_value=SimpleNamespace(
                streaming_locators=[SimpleNamespace(name="loc1"), SimpleNamespace(name=None)]
            )
        )

        # Act
        names = await client.list_locators_for_asset(account_scope, "a1")

        # Assert
        assert names == ["loc1"]

    async def test_get_locator(self, client, ams, account_scope):
        ams.streaming_locators.get = AsyncMock(
            return_value=SimpleNamespace(name="loc1", streaming_policy_name="CH1-p1")
        )

        locator = await client.get_locator(account_scope, "loc1")

        assert locator.streaming_policy_name == "CH1-p1"


class TestMutations:
    async def test_delete_output_waits_for_poller(self, client, ams, account_scope):
        # Arrange
        poller = make_poller()
        ams.live_outputs.begin_delete = AsyncMock(return_value=poller)

        # Act
        await client.delete_output(account_scope, "CH1", "out1")

        # Assert
        ams.live_outputs.begin_delete.assert_awaited_once_with(
            "rg-media", "amsaccount", "CH1", "out1", polling_interval=0.5
        )
        poller.result.assert_awaited_once()

    async def test_stop_channel_keeps_outputs(self, client, ams, account_scope):
        # Arrange
        ams.live_events.begin_stop = AsyncMock(return_value=make_poller())

        # Act
        await client.stop_channel(account_scope, "CH1")

        # Assert
        args = ams.live_events.begin_stop.await_args
        assert args.args[:3] == ("rg-media", "amsaccount", "CH1")
        assert args.args[3].remove_outputs_on_stop is False

    async def test_delete_channel_poller_failure(self, client, ams, account_scope):
        # Arrange
        poller = MagicMock()
        poller.result = AsyncMock(side_effect=HttpResponseError(message="conflict"))
        ams.live_events.begin_delete = AsyncMock(return_value=poller)

        # Act & Assert
        with pytest.raises(RemoteOperationError) as exc_info:
            await client.delete_channel(account_scope, "CH1")

        assert exc_info.value.operation == "delete live event"

    async def test_delete_policy_not_found_is_an_error(self, client, ams, account_scope):
        ams.streaming_policies.delete = AsyncMock(side_effect=ResourceNotFoundError(message="gone"))

        with pytest.raises(RemoteOperationError):
            await client.delete_policy(account_scope, "CH1-p1")

    async def test_delete_asset(self, client, ams, account_scope):
        ams.assets.delete = AsyncMock(return_value=None)

        await client.delete_asset(account_scope, "a1")

        ams.assets.delete.assert_awaited_once_with("rg-media", "amsaccount", "a1")


class TestClientLifecycle:
    def test_missing_credentials(self):
        cfg = AppEnvironConfig(
            AZURE_TENANT_ID=None,
            AZURE_CLIENT_ID=None,
            AZURE_CLIENT_SECRET=None,
            AZURE_SUBSCRIPTION_ID=None,
        )

        with pytest.raises(ConfigurationError):
            AmsResourceClient(cfg)._get_client()

    async def test_close(self, client, ams):
        ams.close = AsyncMock()

        await client.close()

        ams.close.assert_awaited_once()
