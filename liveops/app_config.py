from pydantic import BaseModel

from liveops.services.integrations.media_models import AccountScope
from liveops.shared.config import config
from liveops.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


def _opt(key: str) -> str | None:
    return (config.get(key) or "").strip() or None


class ConfigurationError(AppError):
    def __init__(self, errmesg: str):
        super().__init__(
            errcode=AppErrorCode.E_CONFIGURATION,
            errmesg=errmesg,
            status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
        )


class AppEnvironConfig(BaseModel):
    DEBUG: bool = (config.get("DEBUG") or "false").strip().lower() == "true"

    API_HOST: str = (config.get("API_HOST") or "0.0.0.0").strip()
    API_PORT: int = int((config.get("API_PORT") or "").strip() or 8000)
    API_WORKERS: int = int((config.get("API_WORKERS") or "").strip() or 1)
    API_CORS_ORIGINS: list[str] = [
        x.strip() for x in (config.get("API_CORS_ORIGINS") or "").split(",") if x.strip()
    ]

    LOGFIRE_ENABLE: bool = (config.get("LOGFIRE_ENABLE") or "false").strip().lower() == "true"
    LOGFIRE_TOKEN: str | None = _opt("LOGFIRE_TOKEN")

    # Azure service principal
    AZURE_TENANT_ID: str | None = _opt("AZURE_TENANT_ID")
    AZURE_CLIENT_ID: str | None = _opt("AZURE_CLIENT_ID")
    AZURE_CLIENT_SECRET: str | None = _opt("AZURE_CLIENT_SECRET")
    AZURE_SUBSCRIPTION_ID: str | None = _opt("AZURE_SUBSCRIPTION_ID")
    AZURE_ARM_ENDPOINT: str = (config.get("AZURE_ARM_ENDPOINT") or "https://management.azure.com").strip()

    # Media services account. With a region selector, the region is appended to the
    # account name and to the resource group unless AMS_RESOURCE_GROUP_FINAL_NAME is set.
    AMS_ACCOUNT_NAME: str | None = _opt("AMS_ACCOUNT_NAME")
    AMS_RESOURCE_GROUP: str | None = _opt("AMS_RESOURCE_GROUP")
    AMS_RESOURCE_GROUP_FINAL_NAME: str | None = _opt("AMS_RESOURCE_GROUP_FINAL_NAME")
    AMS_LRO_POLLING_INTERVAL_SECONDS: float = float(
        (config.get("AMS_LRO_POLLING_INTERVAL_SECONDS") or "").strip() or 2
    )

    # Teardown tuning
    TEARDOWN_POLL_INTERVAL_SECONDS: float = float(
        (config.get("TEARDOWN_POLL_INTERVAL_SECONDS") or "").strip() or 2
    )
    # <= 0 waits for a stopping channel without a bound
    TEARDOWN_MAX_STOP_WAIT_SECONDS: float = float(
        (config.get("TEARDOWN_MAX_STOP_WAIT_SECONDS") or "").strip() or 600
    )

    # Mongo label for the live event metadata store (MONGO_URL_<LABEL>)
    METADATA_MONGO_LABEL: str = (config.get("METADATA_MONGO_LABEL") or "live_metadata").strip().lower()

    def resolve_account_scope(self, region: str | None = None) -> AccountScope:
        """Resolve the media account scope, optionally suffixed by a region selector."""
        if not self.AMS_ACCOUNT_NAME or not self.AMS_RESOURCE_GROUP:
            raise ConfigurationError("AMS_ACCOUNT_NAME and AMS_RESOURCE_GROUP must be configured")
        if not self.AZURE_SUBSCRIPTION_ID:
            raise ConfigurationError("AZURE_SUBSCRIPTION_ID must be configured")

        account_name = self.AMS_ACCOUNT_NAME
        resource_group = self.AMS_RESOURCE_GROUP
        region = (region or "").strip()
        if region:
            account_name = f"{account_name}{region}"
            if self.AMS_RESOURCE_GROUP_FINAL_NAME:
                resource_group = self.AMS_RESOURCE_GROUP_FINAL_NAME
            else:
                resource_group = f"{resource_group}{region}"

        return AccountScope(
            subscription_id=self.AZURE_SUBSCRIPTION_ID,
            resource_group=resource_group,
            account_name=account_name,
        )


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
