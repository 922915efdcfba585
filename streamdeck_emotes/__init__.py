"""Stream Deck emote profile generator package."""

from .errors import (
    EmptyEmoteList,
    ExistingManifestCorrupt,
    ExtractionFailed,
    FilesystemFailure,
    ImageFetchFailed,
    InvalidDeviceModel,
    ProfileGenerationError,
)
from .models import DeviceModel, Emote, Page, PageManifest, ProfileManifest

__all__ = [
    "DeviceModel",
    "Emote",
    "Page",
    "PageManifest",
    "ProfileManifest",
    "ProfileGenerationError",
    "InvalidDeviceModel",
    "EmptyEmoteList",
    "ExtractionFailed",
    "ExistingManifestCorrupt",
    "FilesystemFailure",
    "ImageFetchFailed",
]
