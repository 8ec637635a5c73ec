"""Live event metadata store backed by MongoDB/Beanie.

The store is optional: when no connection string is configured for the metadata
label, every operation reports False (or an empty result) instead of raising, and
callers decide whether that deserves a warning.
"""

from loguru import logger
from pymongo.errors import PyMongoError

from liveops.schemas import LiveEventEntry, init_beanie_odm
from liveops.schemas.schema_utils import utc_now
from liveops.services.integrations.media_models import ChannelIdentity
from liveops.shared.storage.mongo import get_mongo_manager


class ChannelMetadataStore:
    """Upsert/delete/read of live event general-info documents."""

    def __init__(self, enabled: bool) -> None:
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    @classmethod
    async def connect(cls, label: str) -> "ChannelMetadataStore":
        """Initialize Beanie against the labelled Mongo database, if configured."""
        manager = get_mongo_manager()
        if not manager.has_label(label):
            logger.warning(f"No MongoDB connection configured for label '{label}', metadata store disabled")
            return cls(enabled=False)

        try:
            db = manager.get_client(label).get_database()
            await init_beanie_odm(db)
        except PyMongoError as e:
            logger.warning(f"MongoDB for label '{label}' is unreachable, metadata store disabled: {e}")
            manager.close_client(label)
            return cls(enabled=False)

        logger.info(f"Metadata store initialized on database '{db.name}'")
        return cls(enabled=True)

    async def upsert(self, entry: LiveEventEntry) -> bool:
        """Create or replace the entry. Returns False if the store is not configured."""
        if not self._enabled:
            return False

        entry.updated_at = utc_now()
        await entry.save()
        logger.debug(f"Upserted live event entry {entry.id}")
        return True

    async def delete(self, identity: ChannelIdentity) -> bool:
        """Delete the entry for the channel. Returns False if the store is not configured.

        Deleting an entry that does not exist is not an error.
        """
        if not self._enabled:
            return False

        entry_id = LiveEventEntry.make_id(identity.channel_name, identity.account_scope.account_name)
        entry = await LiveEventEntry.get(entry_id)
        if entry is None:
            logger.debug(f"No live event entry {entry_id} to delete")
            return True

        await entry.delete()
        logger.info(f"Deleted live event entry {entry_id}")
        return True

    async def find_by_channel_name(self, channel_name: str) -> list[LiveEventEntry]:
        """All entries for a live event name, across media accounts."""
        if not self._enabled:
            return []
        return await LiveEventEntry.find(LiveEventEntry.live_event_name == channel_name).to_list()
