"""Dependency discovery for live event teardown.

Walks live event -> live outputs -> assets -> streaming locators -> streaming
policies. Read-only: nothing is deleted here.
"""

from loguru import logger

from liveops.services.integrations.media_models import ChannelIdentity, LiveOutputRecord
from liveops.services.integrations.media_services import ResourceClient

from .teardown_errors import ChannelDiscoveryError
from .teardown_models import DependentKind, DependentOutcome, DependentPlan


def is_custom_policy(policy_name: str | None, channel_name: str) -> bool:
    """Custom streaming policies are named after the live event that created them.

    Anything else is a shared or predefined policy and must be preserved.
    """
    return bool(policy_name) and policy_name.startswith(channel_name)  # type: ignore[union-attr]


class DependencyDiscoverer:
    """Resolves the dependents of a live event needed for ordered deletion."""

    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def discover(
        self,
        identity: ChannelIdentity,
    ) -> tuple[list[DependentPlan], list[DependentOutcome]]:
        """Return one plan per live output, in listing order, plus discovery misses.

        A channel with no outputs yields an empty plan list. Failures resolving a
        single asset or locator are recorded and the walk continues.

        Raises:
            ChannelDiscoveryError: If the live outputs cannot be listed
        """
        try:
            outputs = await self._client.list_outputs(identity.account_scope, identity.channel_name)
        except Exception as e:
            raise ChannelDiscoveryError(
                f"Failed to list live outputs of {identity.channel_name}: {e}"
            ) from e

        logger.info(f"Live event {identity.channel_name} has {len(outputs)} live output(s)")

        plans: list[DependentPlan] = []
        misses: list[DependentOutcome] = []
        for output in outputs:
            plans.append(await self._resolve_output(identity, output, misses))
        return plans, misses

    async def _resolve_output(
        self,
        identity: ChannelIdentity,
        output: LiveOutputRecord,
        misses: list[DependentOutcome],
    ) -> DependentPlan:
        scope = identity.account_scope
        plan = DependentPlan(output=output)

        try:
            asset = await self._client.get_asset(scope, output.asset_name)
        except Exception as e:
            logger.warning(f"Failed to get asset {output.asset_name} of output {output.name}: {e}")
            misses.append(DependentOutcome.not_resolved(DependentKind.ASSET, output.asset_name, str(e)))
            return plan

        if asset is None:
            logger.info(f"Asset {output.asset_name} of output {output.name} no longer exists")
            misses.append(DependentOutcome.not_resolved(DependentKind.ASSET, output.asset_name, "not found"))
            return plan

        plan.asset_name = asset.name

        try:
            locator_names = await self._client.list_locators_for_asset(scope, asset.name)
        except Exception as e:
            logger.warning(f"Failed to list streaming locators of asset {asset.name}: {e}")
            misses.append(DependentOutcome.not_resolved(DependentKind.ASSET, asset.name, str(e)))
            return plan

        # distinct, keeping listing order
        plan.locator_names = list(dict.fromkeys(n for n in locator_names if n))

        for locator_name in plan.locator_names:
            try:
                locator = await self._client.get_locator(scope, locator_name)
            except Exception as e:
                logger.warning(f"Failed to get streaming locator {locator_name}: {e}")
                misses.append(
                    DependentOutcome.not_resolved(DependentKind.STREAMING_LOCATOR, locator_name, str(e))
                )
                continue

            if locator is None:
                misses.append(
                    DependentOutcome.not_resolved(DependentKind.STREAMING_LOCATOR, locator_name, "not found")
                )
                continue

            policy_name = locator.streaming_policy_name
            if not is_custom_policy(policy_name, identity.channel_name):
                logger.debug(f"Keeping shared streaming policy {policy_name} of locator {locator_name}")
                continue
            if policy_name not in plan.custom_policy_names:
                plan.custom_policy_names.append(policy_name)  # type: ignore[arg-type]

        return plan
