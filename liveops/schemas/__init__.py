"""Beanie ODM schemas for MongoDB collections."""

from .init import DOCUMENT_MODELS, init_beanie_odm
from .live_event_entry import LiveEventEntry, LiveOutputInfo

__all__ = [
    "DOCUMENT_MODELS",
    "LiveEventEntry",
    "LiveOutputInfo",
    "init_beanie_odm",
]
