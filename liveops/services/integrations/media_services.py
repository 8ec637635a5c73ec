"""Azure Media Services helper service.

This module provides a thin async wrapper around the `azure-mgmt-media` package,
exposing only the live event teardown capabilities the domain needs.

Usage:
    client = AmsResourceClient(get_app_environ_config())
    state = await client.get_channel(scope, "CH1")
    await client.delete_channel(scope, "CH1")
    await client.close()

Lookups return None when the resource does not exist. Mutations raise
RemoteOperationError on any failure, including not found.
"""

from __future__ import annotations

from typing import Any, Protocol

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.identity.aio import ClientSecretCredential
from azure.mgmt.media.aio import AzureMediaServices
from azure.mgmt.media.models import LiveEventActionInput
from loguru import logger

from liveops.app_config import AppEnvironConfig, ConfigurationError

from .media_models import (
    AccountScope,
    AssetRecord,
    ChannelState,
    LiveOutputRecord,
    StreamingLocatorRecord,
)


class RemoteOperationError(Exception):
    """A media service call failed (transport, service or not-found error)."""

    def __init__(self, operation: str, resource_name: str, detail: str):
        self.operation = operation
        self.resource_name = resource_name
        self.detail = detail
        super().__init__(f"{operation} {resource_name} failed: {detail}")


class ResourceClient(Protocol):
    """Media service capabilities used by live event teardown."""

    async def get_channel(self, scope: AccountScope, channel_name: str) -> ChannelState | None: ...

    async def list_outputs(self, scope: AccountScope, channel_name: str) -> list[LiveOutputRecord]: ...

    async def get_asset(self, scope: AccountScope, asset_name: str) -> AssetRecord | None: ...

    async def list_locators_for_asset(self, scope: AccountScope, asset_name: str) -> list[str]: ...

    async def get_locator(self, scope: AccountScope, locator_name: str) -> StreamingLocatorRecord | None: ...

    async def delete_output(self, scope: AccountScope, channel_name: str, output_name: str) -> None: ...

    async def delete_asset(self, scope: AccountScope, asset_name: str) -> None: ...

    async def delete_policy(self, scope: AccountScope, policy_name: str) -> None: ...

    async def stop_channel(self, scope: AccountScope, channel_name: str) -> None: ...

    async def delete_channel(self, scope: AccountScope, channel_name: str) -> None: ...


class AmsResourceClient:
    """ResourceClient backed by the Azure Media Services management API."""

    def __init__(self, cfg: AppEnvironConfig, client: AzureMediaServices | None = None) -> None:
        self._cfg = cfg
        self._client = client
        self._credential: ClientSecretCredential | None = None
        self._polling_interval = cfg.AMS_LRO_POLLING_INTERVAL_SECONDS
        logger.info("AmsResourceClient initialized")

    def _get_client(self) -> AzureMediaServices:
        """Get or create the management client.

        Raises:
            ConfigurationError: If the service principal is not configured
        """
        if self._client is None:
            cfg = self._cfg
            if not (
                cfg.AZURE_TENANT_ID
                and cfg.AZURE_CLIENT_ID
                and cfg.AZURE_CLIENT_SECRET
                and cfg.AZURE_SUBSCRIPTION_ID
            ):
                logger.error("Azure service principal settings are not configured")
                raise ConfigurationError(
                    "AZURE_TENANT_ID, AZURE_CLIENT_ID, AZURE_CLIENT_SECRET and "
                    "AZURE_SUBSCRIPTION_ID must be configured"
                )

            self._credential = ClientSecretCredential(
                tenant_id=cfg.AZURE_TENANT_ID,
                client_id=cfg.AZURE_CLIENT_ID,
                client_secret=cfg.AZURE_CLIENT_SECRET,
            )
            self._client = AzureMediaServices(
                credential=self._credential,
                subscription_id=cfg.AZURE_SUBSCRIPTION_ID,
                base_url=cfg.AZURE_ARM_ENDPOINT,
            )
            logger.info(f"AzureMediaServices client created for {cfg.AZURE_ARM_ENDPOINT}")
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
        if self._credential is not None:
            await self._credential.close()
            self._credential = None

    # ==================== LOOKUPS ====================

    async def get_channel(self, scope: AccountScope, channel_name: str) -> ChannelState | None:
        try:
            live_event = await self._get_client().live_events.get(
                scope.resource_group, scope.account_name, channel_name
            )
        except ResourceNotFoundError:
            return None
        except AzureError as e:
            raise RemoteOperationError("get live event", channel_name, str(e)) from e
        return ChannelState.parse(live_event.resource_state)

    async def list_outputs(self, scope: AccountScope, channel_name: str) -> list[LiveOutputRecord]:
        try:
            pager = self._get_client().live_outputs.list(
                scope.resource_group, scope.account_name, channel_name
            )
            return [
                LiveOutputRecord(name=output.name, asset_name=output.asset_name)
                async for output in pager
            ]
        except AzureError as e:
            raise RemoteOperationError("list live outputs", channel_name, str(e)) from e

    async def get_asset(self, scope: AccountScope, asset_name: str) -> AssetRecord | None:
        try:
            asset = await self._get_client().assets.get(
                scope.resource_group, scope.account_name, asset_name
            )
        except ResourceNotFoundError:
            return None
        except AzureError as e:
            raise RemoteOperationError("get asset", asset_name, str(e)) from e
        return AssetRecord(name=asset.name)

    async def list_locators_for_asset(self, scope: AccountScope, asset_name: str) -> list[str]:
        try:
            response = await self._get_client().assets.list_streaming_locators(
                scope.resource_group, scope.account_name, asset_name
            )
        except AzureError as e:
            raise RemoteOperationError("list streaming locators", asset_name, str(e)) from e
        return [loc.name for loc in (response.streaming_locators or []) if loc.name]

    async def get_locator(self, scope: AccountScope, locator_name: str) -> StreamingLocatorRecord | None:
        try:
            locator = await self._get_client().streaming_locators.get(
                scope.resource_group, scope.account_name, locator_name
            )
        except ResourceNotFoundError:
            return None
        except AzureError as e:
            raise RemoteOperationError("get streaming locator", locator_name, str(e)) from e
        return StreamingLocatorRecord(
            name=locator.name,
            streaming_policy_name=locator.streaming_policy_name,
        )

    # ==================== MUTATIONS ====================

    async def _wait(self, operation: str, resource_name: str, begin: Any) -> None:
        """Start a long-running operation and wait for the service to complete it."""
        try:
            poller = await begin
            await poller.result()
        except AzureError as e:
            raise RemoteOperationError(operation, resource_name, str(e)) from e

    async def delete_output(self, scope: AccountScope, channel_name: str, output_name: str) -> None:
        logger.info(f"Deleting live output {output_name} of live event {channel_name}")
        await self._wait(
            "delete live output",
            output_name,
            self._get_client().live_outputs.begin_delete(
                scope.resource_group,
                scope.account_name,
                channel_name,
                output_name,
                polling_interval=self._polling_interval,
            ),
        )

    async def delete_asset(self, scope: AccountScope, asset_name: str) -> None:
        logger.info(f"Deleting asset {asset_name}")
        try:
            await self._get_client().assets.delete(scope.resource_group, scope.account_name, asset_name)
        except AzureError as e:
            raise RemoteOperationError("delete asset", asset_name, str(e)) from e

    async def delete_policy(self, scope: AccountScope, policy_name: str) -> None:
        logger.info(f"Deleting streaming policy {policy_name}")
        try:
            await self._get_client().streaming_policies.delete(
                scope.resource_group, scope.account_name, policy_name
            )
        except AzureError as e:
            raise RemoteOperationError("delete streaming policy", policy_name, str(e)) from e

    async def stop_channel(self, scope: AccountScope, channel_name: str) -> None:
        logger.info(f"Stopping live event {channel_name}")
        await self._wait(
            "stop live event",
            channel_name,
            self._get_client().live_events.begin_stop(
                scope.resource_group,
                scope.account_name,
                channel_name,
                LiveEventActionInput(remove_outputs_on_stop=False),
                polling_interval=self._polling_interval,
            ),
        )

    async def delete_channel(self, scope: AccountScope, channel_name: str) -> None:
        logger.info(f"Deleting live event {channel_name}")
        await self._wait(
            "delete live event",
            channel_name,
            self._get_client().live_events.begin_delete(
                scope.resource_group,
                scope.account_name,
                channel_name,
                polling_interval=self._polling_interval,
            ),
        )
