"""Emote extraction from a channel membership page.

The membership page embeds its state as ``ytInitialData = {...};``. The emote
names live deep inside that blob as accessibility labels of the perk images.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Optional, Sequence, Union

from .errors import ExtractionFailed
from .models import Emote

LOG = logging.getLogger("streamdeck_emotes.extract")

START_MARKER = "ytInitialData = "

_TABS_PATH = ("contents", "twoColumnBrowseResultsRenderer", "tabs")
_CONTENT_PATH = (
    "tabRenderer", "content", "sectionListRenderer", "contents", 0,
    "sponsorshipsManagementRenderer", "content",
)
_IMAGES_PATH = (
    "sponsorshipsExpandableMessageRenderer", "expandableItems", 0,
    "sponsorshipsPerksRenderer", "perks", 0, "sponsorshipsPerkRenderer", "images",
)
_LABEL_PATH = ("accessibility", "accessibilityData", "label")
_URL_PATH = ("thumbnails", 0, "url")


def _pointer(value: Any, path: Sequence[Union[str, int]]) -> Optional[Any]:
    """Follow *path* through nested dicts/lists, returning None on a miss."""

    for part in path:
        if isinstance(part, int):
            if not isinstance(value, list) or part >= len(value):
                return None
        elif not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def _as_list(value: Any, what: str) -> list:
    if not isinstance(value, list):
        raise ExtractionFailed(f"failed to parse {what} as array")
    return value


def _decode(data: Union[bytes, str]) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def load_initial_data(data: Union[bytes, str]) -> Any:
    """Cut the ``ytInitialData`` JSON object out of the page source."""

    html = _decode(data)
    start = html.find(START_MARKER)
    if start < 0:
        raise ExtractionFailed("failed to find ytInitialData")
    try:
        payload, _ = json.JSONDecoder().raw_decode(html, start + len(START_MARKER))
    except json.JSONDecodeError as exc:
        raise ExtractionFailed(f"failed to parse ytInitialData: {exc}") from exc
    return payload


def _membership_images(data: Union[bytes, str]) -> list:
    root = load_initial_data(data)
    tabs = _as_list(_pointer(root, _TABS_PATH), "tabs")

    content = None
    for tab in tabs:
        if _pointer(tab, ("tabRenderer", "title")) == "Membership":
            content = _pointer(tab, _CONTENT_PATH)
            if content is not None:
                break
    if content is None:
        raise ExtractionFailed("failed to find membership content")

    images = None
    for item in _as_list(content, "content"):
        images = _pointer(item, _IMAGES_PATH)
        if images is not None:
            break
    if images is None:
        raise ExtractionFailed("failed to find emote images")
    return _as_list(images, "images")


def image_url(raw: str) -> str:
    """Drop the ``=w48-h48-...`` sizing suffix so the full-size image is fetched."""

    url = raw.split("=", 1)[0]
    if url.startswith("//"):
        url = "https:" + url
    return url


def extract_emotes(data: Union[bytes, str]) -> List[Emote]:
    """Return emotes, with their image URLs, in page order."""

    emotes: List[Emote] = []
    for index, image in enumerate(_membership_images(data)):
        label = _pointer(image, _LABEL_PATH)
        if not isinstance(label, str) or not label.strip():
            raise ExtractionFailed(f"failed to find label for image {index}")
        url = _pointer(image, _URL_PATH)
        if not isinstance(url, str) or not url:
            raise ExtractionFailed(f"failed to find url for image {index}")
        emotes.append(Emote(label.strip(), image_url(url)))

    LOG.info("extracted %d emote(s)", len(emotes))
    return emotes


def extract_emote_names(data: Union[bytes, str]) -> List[str]:
    """Return emote names in page order."""
    return [emote.name for emote in extract_emotes(data)]


def parse_plain(data: Union[bytes, str]) -> List[str]:
    """One name per line; blank lines and ``#`` comments are skipped."""

    names = []
    for line in _decode(data).splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            names.append(line)
    return names


def to_emotes(names: Iterable[Any]) -> List[Emote]:
    """Convert loosely typed names into :class:`Emote` values."""

    emotes = []
    for index, name in enumerate(names):
        if not isinstance(name, str) or not name.strip():
            raise ExtractionFailed(f"emote {index} has no usable name: {name!r}")
        emotes.append(Emote(name.strip()))
    return emotes


def parse_emotes(data: Union[bytes, str], plain: bool = False) -> List[Emote]:
    if plain:
        return to_emotes(parse_plain(data))
    return extract_emotes(data)


__all__ = [
    "START_MARKER",
    "load_initial_data",
    "image_url",
    "extract_emotes",
    "extract_emote_names",
    "parse_plain",
    "to_emotes",
    "parse_emotes",
]
