"""Exceptions raised while generating Stream Deck emote profiles."""

from __future__ import annotations


class ProfileGenerationError(RuntimeError):
    """Base class for every failure that aborts a generation run."""


class InvalidDeviceModel(ProfileGenerationError):
    """Raised for an unknown device model name or an unusable grid."""


class EmptyEmoteList(ProfileGenerationError):
    """Raised when there is nothing to lay out."""


class ExtractionFailed(ProfileGenerationError):
    """Raised when the input source does not have the expected shape."""


class ExistingManifestCorrupt(ProfileGenerationError):
    """Raised when an on-disk manifest tree exists but cannot be parsed."""


class FilesystemFailure(ProfileGenerationError):
    """Raised when reading or writing the output tree fails."""


class ImageFetchFailed(ProfileGenerationError):
    """Raised when an emote image cannot be downloaded."""


__all__ = [
    "ProfileGenerationError",
    "InvalidDeviceModel",
    "EmptyEmoteList",
    "ExtractionFailed",
    "ExistingManifestCorrupt",
    "FilesystemFailure",
    "ImageFetchFailed",
]
