"""Live event teardown orchestration.

Order of operations for one live event:

1. Discover the live event and its dependents (outputs, assets, locators, policies).
2. For each output: delete the output, then (if requested) its asset, then any
   custom streaming policy once no remaining asset references it.
3. Re-read the live event state: stop it if Running, wait while Stopping.
4. Delete the live event.
5. Drop the metadata record.

Failures in steps 1, 3 and 4 are fatal, as is a failed output delete in step 2.
Asset and policy failures in step 2 are recorded and the loop continues.
Metadata failures are warnings.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Awaitable, Callable

from loguru import logger

from liveops.services.integrations.media_models import ChannelIdentity, ChannelState
from liveops.services.integrations.media_services import ResourceClient
from liveops.services.metadata_store import ChannelMetadataStore
from liveops.utils.app_errors import AppError

from ._discovery import DependencyDiscoverer
from .teardown_errors import (
    ChannelDeletionError,
    ChannelDiscoveryError,
    ChannelNotFoundError,
    ChannelStopTimeoutError,
    OutputDeletionError,
    StateTransitionError,
)
from .teardown_models import (
    DependentKind,
    DependentOutcome,
    DependentPlan,
    TeardownOutcome,
    TeardownStage,
)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_MAX_STOP_WAIT_SECONDS = 600.0


class _TeardownLedger:
    """Mutable bookkeeping for a single run; frozen into a TeardownOutcome at the end."""

    def __init__(self, identity: ChannelIdentity) -> None:
        self.identity = identity
        self.stage = TeardownStage.DISCOVERING
        self.dependents: list[DependentOutcome] = []
        self.warnings: list[str] = []

    def enter(self, stage: TeardownStage) -> None:
        logger.debug(f"Teardown of {self.identity.channel_name}: {self.stage} -> {stage}")
        self.stage = stage

    def record(self, outcome: DependentOutcome) -> None:
        self.dependents.append(outcome)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def succeeded(self) -> TeardownOutcome:
        return TeardownOutcome(
            channel_identity=self.identity,
            success=True,
            stage=TeardownStage.DONE,
            dependents=list(self.dependents),
            warnings=list(self.warnings),
        )

    def failed(self, error: AppError) -> TeardownOutcome:
        return TeardownOutcome.failure(
            self.identity,
            self.stage,
            error,
            dependents=list(self.dependents),
            warnings=list(self.warnings),
        )


class TeardownOrchestrator:
    """Decommissions one live event and everything that depends on it."""

    def __init__(
        self,
        client: ResourceClient,
        metadata_store: ChannelMetadataStore,
        *,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_stop_wait_seconds: float = DEFAULT_MAX_STOP_WAIT_SECONDS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be positive")

        self._client = client
        self._metadata_store = metadata_store
        self._discoverer = DependencyDiscoverer(client)
        self._poll_interval = poll_interval_seconds
        # None means wait for as long as the service keeps the event Stopping
        self._max_polls = (
            math.ceil(max_stop_wait_seconds / poll_interval_seconds) if max_stop_wait_seconds > 0 else None
        )
        self._sleep = sleep

    async def run(self, identity: ChannelIdentity, delete_asset: bool = True) -> TeardownOutcome:
        """Tear down the live event. Never raises for teardown failures; see the outcome."""
        ledger = _TeardownLedger(identity)
        channel_name = identity.channel_name
        logger.info(f"Tearing down live event {channel_name} (delete_asset={delete_asset})")

        try:
            await self._require_channel(identity)
            plans, misses = await self._discoverer.discover(identity)
            for miss in misses:
                ledger.record(miss)

            ledger.enter(TeardownStage.DELETING_DEPENDENTS)
            await self._delete_dependents(identity, plans, delete_asset, ledger)

            ledger.enter(TeardownStage.AWAITING_STOP)
            still_exists = await self._await_stopped(identity, ledger)

            ledger.enter(TeardownStage.DELETING_CHANNEL)
            if still_exists:
                await self._delete_channel(identity)
        except AppError as e:
            logger.error(
                f"Teardown of live event {channel_name} failed at {ledger.stage}: "
                f"{e.errcode} {e.errmesg} (erresid={e.erresid})"
            )
            return ledger.failed(e)

        ledger.enter(TeardownStage.RECONCILING_METADATA)
        await self._reconcile_metadata(identity, ledger)

        ledger.enter(TeardownStage.DONE)
        outcome = ledger.succeeded()
        logger.info(
            f"Live event {channel_name} torn down: {len(outcome.dependents)} dependent action(s), "
            f"{len(outcome.failed_dependents)} left behind, {len(outcome.warnings)} warning(s)"
        )
        return outcome

    # ==================== DISCOVERING ====================

    async def _require_channel(self, identity: ChannelIdentity) -> ChannelState:
        try:
            state = await self._client.get_channel(identity.account_scope, identity.channel_name)
        except AppError:
            raise
        except Exception as e:
            raise ChannelDiscoveryError(f"Failed to get live event {identity.channel_name}: {e}") from e

        if state is None:
            raise ChannelNotFoundError(identity.channel_name)

        logger.info(f"Live event {identity.channel_name} is {state}")
        return state

    # ==================== DELETING DEPENDENTS ====================

    async def _delete_dependents(
        self,
        identity: ChannelIdentity,
        plans: list[DependentPlan],
        delete_asset: bool,
        ledger: _TeardownLedger,
    ) -> None:
        if not plans:
            return

        scope = identity.account_scope

        # policy name -> assets still referencing it
        policy_refs: dict[str, set[str]] = {}
        if delete_asset:
            for plan in plans:
                for policy_name in plan.custom_policy_names:
                    policy_refs.setdefault(policy_name, set()).add(plan.asset_name)  # type: ignore[arg-type]

        for plan in plans:
            output_name = plan.output.name
            try:
                logger.info(f"deleting live output : {output_name}")
                await self._client.delete_output(scope, identity.channel_name, output_name)
                ledger.record(DependentOutcome.deleted_ok(DependentKind.LIVE_OUTPUT, output_name))
            except Exception as e:
                ledger.record(DependentOutcome.cleanup_failed(DependentKind.LIVE_OUTPUT, output_name, e))
                raise OutputDeletionError(f"Failed to delete live output {output_name}: {e}") from e

            if not delete_asset or not plan.asset_name:
                continue

            try:
                logger.info(f"deleting asset : {plan.asset_name}")
                await self._client.delete_asset(scope, plan.asset_name)
                ledger.record(DependentOutcome.deleted_ok(DependentKind.ASSET, plan.asset_name))
            except Exception as e:
                ledger.record(DependentOutcome.cleanup_failed(DependentKind.ASSET, plan.asset_name, e))
                logger.warning(f"Failed to delete asset {plan.asset_name}: {e}")
                continue

            for policy_name in plan.custom_policy_names:
                refs = policy_refs[policy_name]
                refs.discard(plan.asset_name)
                if refs:
                    continue
                del policy_refs[policy_name]
                await self._delete_policy(identity, policy_name, ledger)

        for policy_name, refs in policy_refs.items():
            ledger.record(
                DependentOutcome.skipped(
                    DependentKind.STREAMING_POLICY,
                    policy_name,
                    f"still referenced by asset(s) {', '.join(sorted(refs))}",
                )
            )

    async def _delete_policy(self, identity: ChannelIdentity, policy_name: str, ledger: _TeardownLedger) -> None:
        try:
            logger.info(f"deleting streaming policy : {policy_name}")
            await self._client.delete_policy(identity.account_scope, policy_name)
            ledger.record(DependentOutcome.deleted_ok(DependentKind.STREAMING_POLICY, policy_name))
        except Exception as e:
            ledger.record(DependentOutcome.cleanup_failed(DependentKind.STREAMING_POLICY, policy_name, e))
            logger.warning(f"Failed to delete streaming policy {policy_name}: {e}")

    # ==================== AWAITING STOP ====================

    async def _fetch_state(self, identity: ChannelIdentity) -> ChannelState | None:
        try:
            return await self._client.get_channel(identity.account_scope, identity.channel_name)
        except Exception as e:
            raise StateTransitionError(
                f"Failed to get state of live event {identity.channel_name}: {e}"
            ) from e

    async def _await_stopped(self, identity: ChannelIdentity, ledger: _TeardownLedger) -> bool:
        """Bring the live event to a deletable state.

        Returns False if the live event disappeared in the meantime.
        """
        channel_name = identity.channel_name
        state = await self._fetch_state(identity)

        if state == ChannelState.RUNNING:
            logger.info(f"stopping live event : {channel_name}")
            try:
                await self._client.stop_channel(identity.account_scope, channel_name)
            except Exception as e:
                raise StateTransitionError(f"Failed to stop live event {channel_name}: {e}") from e
            return True

        polls = 0
        while state == ChannelState.STOPPING:
            if self._max_polls is not None and polls >= self._max_polls:
                raise ChannelStopTimeoutError(channel_name, polls * self._poll_interval)
            logger.info(f"Live event {channel_name} is stopping, checking again in {self._poll_interval:g}s")
            await self._sleep(self._poll_interval)
            polls += 1
            state = await self._fetch_state(identity)

        if state is None:
            ledger.warn(f"Live event {channel_name} disappeared before it could be deleted")
            return False

        return True

    # ==================== DELETING CHANNEL ====================

    async def _delete_channel(self, identity: ChannelIdentity) -> None:
        logger.info(f"deleting live event : {identity.channel_name}")
        try:
            await self._client.delete_channel(identity.account_scope, identity.channel_name)
        except Exception as e:
            raise ChannelDeletionError(f"Failed to delete live event {identity.channel_name}: {e}") from e

    # ==================== RECONCILING METADATA ====================

    async def _reconcile_metadata(self, identity: ChannelIdentity, ledger: _TeardownLedger) -> None:
        try:
            removed = await self._metadata_store.delete(identity)
        except Exception as e:
            ledger.warn(f"Metadata store unreachable, record for {identity.channel_name} not removed: {e}")
            return

        if not removed:
            ledger.warn("Metadata store access not configured.")
