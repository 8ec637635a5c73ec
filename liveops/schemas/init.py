"""Beanie initialization for ODM."""

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorDatabase

from liveops.schemas.live_event_entry import LiveEventEntry

DOCUMENT_MODELS = [
    LiveEventEntry,
]


async def init_beanie_odm(database: AsyncIOMotorDatabase) -> None:
    """Initialize Beanie ODM with all document models."""
    await init_beanie(
        database=database,  # type: ignore[arg-type]
        document_models=DOCUMENT_MODELS,
    )


__all__ = ["DOCUMENT_MODELS", "init_beanie_odm"]
