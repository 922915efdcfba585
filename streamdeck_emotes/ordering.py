"""Prioritize / deprioritize reordering of the emote list."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from .models import Emote

LOG = logging.getLogger("streamdeck_emotes.ordering")


def _group_by_key(emotes: Sequence[Emote]) -> Dict[str, List[Emote]]:
    groups: Dict[str, List[Emote]] = {}
    for emote in emotes:
        groups.setdefault(emote.key, []).append(emote)
    return groups


def _rule_keys(names: Iterable[str]) -> List[str]:
    keys: List[str] = []
    for name in names:
        key = str(name).strip().casefold()
        if key and key not in keys:
            keys.append(key)
    return keys


def reorder(
    emotes: Sequence[Emote],
    prioritize: Iterable[str] = (),
    deprioritize: Iterable[str] = (),
) -> List[Emote]:
    """Move prioritized emotes to the front and deprioritized ones to the back.

    Matching is case-insensitive. Pinned emotes follow the order of their rule
    list; everything else keeps its original relative order. A name listed in
    both rules counts as prioritized, and rule names without a matching emote
    are ignored.
    """

    groups = _group_by_key(emotes)
    front_keys = [key for key in _rule_keys(prioritize) if key in groups]
    back_keys = [
        key for key in _rule_keys(deprioritize) if key in groups and key not in front_keys
    ]
    pinned = set(front_keys) | set(back_keys)

    front = [emote for key in front_keys for emote in groups[key]]
    middle = [emote for emote in emotes if emote.key not in pinned]
    back = [emote for key in back_keys for emote in groups[key]]

    LOG.debug(
        "reorder: %d prioritized, %d deprioritized, %d untouched",
        len(front),
        len(back),
        len(middle),
    )
    return front + middle + back


__all__ = ["reorder"]
