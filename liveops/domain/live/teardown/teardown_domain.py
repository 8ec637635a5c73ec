"""Teardown domain service - live event decommissioning on Azure Media Services."""

import asyncio
from typing import Any

from loguru import logger

from liveops.app_config import AppEnvironConfig
from liveops.services.integrations.media_models import ChannelIdentity
from liveops.services.integrations.media_services import ResourceClient
from liveops.services.metadata_store import ChannelMetadataStore

from ._orchestrator import Sleep, TeardownOrchestrator
from .teardown_models import TeardownOutcome, TeardownRequest


class TeardownService:
    """Entry point for live event teardown."""

    def __init__(
        self,
        resource_client: ResourceClient,
        metadata_store: ChannelMetadataStore,
        cfg: AppEnvironConfig,
        sleep: Sleep = asyncio.sleep,
    ):
        self._cfg = cfg
        self._orchestrator = TeardownOrchestrator(
            resource_client,
            metadata_store,
            poll_interval_seconds=cfg.TEARDOWN_POLL_INTERVAL_SECONDS,
            max_stop_wait_seconds=cfg.TEARDOWN_MAX_STOP_WAIT_SECONDS,
            sleep=sleep,
        )

    # ==================== LIVE EVENTS ====================

    async def delete_live_event(self, payload: Any) -> TeardownOutcome:
        """Delete a live event with its outputs, assets and custom streaming policies.

        Raises InputValidationError if the payload has no channel name and
        ConfigurationError if the media account is not configured. Both are raised
        before any remote call. Every other failure is reported on the outcome.
        """
        request = TeardownRequest.parse(payload)
        scope = self._cfg.resolve_account_scope(request.region_selector)
        identity = ChannelIdentity(account_scope=scope, channel_name=request.channel_name)

        logger.info(
            f"Delete live event {request.channel_name} requested on account "
            f"{scope.account_name} (resource group {scope.resource_group})"
        )
        return await self._orchestrator.run(identity, delete_asset=request.delete_asset)
