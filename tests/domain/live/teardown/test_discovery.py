"""Tests for dependency discovery."""

import pytest

from liveops.domain.live.teardown._discovery import DependencyDiscoverer, is_custom_policy
from liveops.domain.live.teardown.teardown_errors import ChannelDiscoveryError
from liveops.domain.live.teardown.teardown_models import DependentAction, DependentKind
from liveops.services.integrations.media_models import LiveOutputRecord
from tests.fixtures.media_fixtures import MUTATIONS


class TestIsCustomPolicy:
    @pytest.mark.parametrize(
        ("policy_name", "expected"),
        [
            ("CH1-custom-policy", True),
            ("CH1", True),
            ("shared-default-policy", False),
            ("ch1-lowercase", False),
            ("Predefined_ClearStreamingOnly", False),
            ("", False),
            (None, False),
        ],
    )
    def test_prefix_match(self, policy_name, expected):
        assert is_custom_policy(policy_name, "CH1") is expected


class TestDependencyDiscoverer:
    """Tests for DependencyDiscoverer.discover."""

    async def test_no_outputs(self, resource_client, identity):
        # Act
        plans, misses = await DependencyDiscoverer(resource_client).discover(identity)

        # Assert
        assert plans == []
        assert misses == []

    async def test_resolves_outputs_assets_and_custom_policies(self, resource_client, identity):
        # Arrange
        resource_client.add_output("out1", "a1", {"loc1": "CH1-p1", "loc2": "shared-policy"})
        resource_client.add_output("out2", "a2")

        # Act
        plans, misses = await DependencyDiscoverer(resource_client).discover(identity)

        # Assert
        assert misses == []
        assert [p.output.name for p in plans] == ["out1", "out2"]
        assert plans[0].asset_name == "a1"
        assert plans[0].locator_names == ["loc1", "loc2"]
        assert plans[0].custom_policy_names == ["CH1-p1"]
        assert plans[1].asset_name == "a2"
        assert plans[1].custom_policy_names == []

    async def test_is_read_only(self, resource_client, identity):
        # Arrange
        resource_client.add_output("out1", "a1", {"loc1": "CH1-p1"})

        # Act
        await DependencyDiscoverer(resource_client).discover(identity)

        # Assert
        assert [c for c in resource_client.calls if c[0] in MUTATIONS] == []

    async def test_duplicate_locator_names_resolved_once(self, resource_client, identity):
        # Arrange
        resource_client.add_output("out1", "a1", {"loc1": "CH1-p1"})
        resource_client.asset_locators["a1"] = ["loc1", "loc1", ""]

        # Act
        plans, _ = await DependencyDiscoverer(resource_client).discover(identity)

        # Assert
        assert plans[0].locator_names == ["loc1"]
        assert resource_client.count("get_locator") == 1

    async def test_listing_failure_raises(self, resource_client, identity):
        # Arrange
        resource_client.fail("list_outputs", "CH1")

        # Act & Assert
        with pytest.raises(ChannelDiscoveryError):
            await DependencyDiscoverer(resource_client).discover(identity)

    async def test_asset_lookup_failure_continues(self, resource_client, identity):
        """A failing asset lookup leaves that output without an asset; the walk continues."""
        # Arrange
        resource_client.add_output("out1", "a1", {"loc1": "CH1-p1"})
        resource_client.add_output("out2", "a2", {"loc2": "CH1-p2"})
        resource_client.fail("get_asset", "a1")

        # Act
        plans, misses = await DependencyDiscoverer(resource_client).discover(identity)

        # Assert
        assert plans[0].asset_name is None
        assert plans[0].custom_policy_names == []
        assert plans[1].custom_policy_names == ["CH1-p2"]
        assert [(m.kind, m.name, m.action) for m in misses] == [
            (DependentKind.ASSET, "a1", DependentAction.DISCOVER)
        ]

    async def test_missing_asset_recorded(self, resource_client, identity):
        # Arrange
        resource_client.outputs.append(LiveOutputRecord(name="out1", asset_name="gone"))

        # Act
        plans, misses = await DependencyDiscoverer(resource_client).discover(identity)

        # Assert
        assert plans[0].asset_name is None
        assert misses[0].name == "gone"
        assert misses[0].error == "not found"

    async def test_locator_listing_failure_keeps_asset(self, resource_client, identity):
        # Arrange
        resource_client.add_output("out1", "a1", {"loc1": "CH1-p1"})
        resource_client.fail("list_locators_for_asset", "a1")

        # Act
        plans, misses = await DependencyDiscoverer(resource_client).discover(identity)

        # Assert
        assert plans[0].asset_name == "a1"
        assert plans[0].custom_policy_names == []
        assert len(misses) == 1

    async def test_locator_failures_skip_only_that_locator(self, resource_client, identity):
        # Arrange
        resource_client.add_output("out1", "a1", {"loc1": "CH1-p1", "loc2": "CH1-p2"})
        resource_client.fail("get_locator", "loc1")
        resource_client.asset_locators["a1"].append("loc-gone")

        # Act
        plans, misses = await DependencyDiscoverer(resource_client).discover(identity)

        # Assert
        assert plans[0].custom_policy_names == ["CH1-p2"]
        assert [(m.kind, m.name) for m in misses] == [
            (DependentKind.STREAMING_LOCATOR, "loc1"),
            (DependentKind.STREAMING_LOCATOR, "loc-gone"),
        ]
