"""Downloading emote images for generated buttons."""

from __future__ import annotations

import logging
import urllib.request
from typing import Dict, Iterable

from .errors import ImageFetchFailed
from .models import KIND_TEXT, ProfileManifest

LOG = logging.getLogger("streamdeck_emotes.images")

USER_AGENT = "streamdeck-emotes/0.1 (+https://localhost) Python-urllib"


def fetch_image(url: str, timeout: float = 30.0) -> bytes:
    LOG.info("downloading image %s", url)
    try:
        req = urllib.request.Request(
            url,
            headers={"User-Agent": USER_AGENT, "Accept": "image/*"},
            method="GET",
        )
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            data = resp.read()
    except (OSError, ValueError) as exc:
        raise ImageFetchFailed(f"failed to download {url}: {exc}") from exc
    if not data:
        raise ImageFetchFailed(f"empty response from {url}")
    return data


def image_urls(profile: ProfileManifest) -> Iterable[str]:
    """Distinct image URLs of the text buttons in *profile*, in page order."""

    seen = set()
    for page in profile.pages:
        for action in page.actions.values():
            if action.kind == KIND_TEXT and action.image and action.image not in seen:
                seen.add(action.image)
                yield action.image


def fetch_images(profile: ProfileManifest, timeout: float = 30.0) -> Dict[str, bytes]:
    """Download every emote image up front, before anything is written."""

    images = {url: fetch_image(url, timeout) for url in image_urls(profile)}
    LOG.info("downloaded %d image(s)", len(images))
    return images


__all__ = ["fetch_image", "image_urls", "fetch_images"]
