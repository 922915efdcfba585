"""Deterministic identifiers for profiles and pages.

Stream Deck keys profile folders by UUID. Deriving those UUIDs from stable
inputs (UUIDv5 over a fixed namespace URL) means regenerating a profile with
the same name lands on the same folders, which is what makes merging possible.
"""

from __future__ import annotations

import uuid

NAMESPACE_URL = "https://github.com/walfie/streamdeck-youtube-emotes"


def derive(seed: str) -> str:
    """Return the upper-case UUIDv5 identifier for *seed*."""

    url = f"{NAMESPACE_URL}#{seed}"
    return str(uuid.uuid5(uuid.NAMESPACE_URL, url)).upper()


def profile_id(name: str, override: str | None = None) -> str:
    if override:
        return override.strip().upper()
    return derive(name)


def page_id(profile: str, index: int) -> str:
    return derive(f"{profile}_page{index}")


__all__ = ["NAMESPACE_URL", "derive", "profile_id", "page_id"]
