"""Page layout planning for Stream Deck emote profiles.

Every page keeps column 0 for navigation: a Back button in the top row when a
previous page exists and a Next button in the bottom row when a following page
exists. The column stays reserved even for single-page profiles so the grid
does not shift when a channel gains emotes and a second page appears. The
remaining slots are filled row-major, page after page, in list order.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Sequence

from .errors import EmptyEmoteList, InvalidDeviceModel
from .models import (
    EMPTY,
    DeviceModel,
    Direction,
    Emote,
    EmoteButton,
    NavButton,
    Page,
    Position,
    SlotAction,
)

LOG = logging.getLogger("streamdeck_emotes.layout")


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def page_capacity(model: DeviceModel) -> int:
    """Number of emote slots on one page of *model*."""

    if model.rows < 1 or model.columns < 2:
        raise InvalidDeviceModel(
            f"device model {model.name!r} ({model.columns}x{model.rows}) has no room for emotes"
        )
    return model.capacity


def page_count(emote_count: int, model: DeviceModel) -> int:
    if emote_count <= 0:
        raise EmptyEmoteList("no emotes to lay out")
    return math.ceil(emote_count / page_capacity(model))


def nav_positions(model: DeviceModel, has_prev: bool, has_next: bool) -> Dict[Direction, Position]:
    """Reserved-column positions for the navigation buttons a page needs."""

    bottom = Position(0, model.rows - 1)
    top = Position(0, 0)
    out: Dict[Direction, Position] = {}
    if model.rows == 1:
        # Single slot: forward navigation wins.
        if has_next:
            out[Direction.NEXT] = bottom
        elif has_prev:
            out[Direction.PREV] = top
        return out
    if has_prev:
        out[Direction.PREV] = top
    if has_next:
        out[Direction.NEXT] = bottom
    return out


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def _build_page(
    index: int,
    total: int,
    chunk: Sequence[Emote],
    model: DeviceModel,
    prefix: str,
    include_labels: bool,
) -> Page:
    slots: Dict[Position, SlotAction] = {pos: EMPTY for pos in model.positions()}

    for position, emote in zip(model.emote_positions(), chunk):
        slots[position] = EmoteButton(emote.name, prefix, include_labels, emote.url)

    navs = nav_positions(model, has_prev=index > 0, has_next=index < total - 1)
    for direction, position in navs.items():
        target = index - 1 if direction is Direction.PREV else index + 1
        slots[position] = NavButton(direction, target)

    return Page(index, slots)


def plan(
    emotes: Sequence[Emote],
    model: DeviceModel,
    prefix: str = "",
    include_labels: bool = True,
) -> List[Page]:
    """Partition *emotes* into pages sized to *model*'s grid."""

    capacity = page_capacity(model)
    total = page_count(len(emotes), model)

    pages = [
        _build_page(
            index,
            total,
            emotes[index * capacity : (index + 1) * capacity],
            model,
            prefix,
            include_labels,
        )
        for index in range(total)
    ]
    LOG.info(
        "planned %d emote(s) across %d page(s) on %s (%d per page)",
        len(emotes),
        total,
        model.name,
        capacity,
    )
    return pages


__all__ = ["page_capacity", "page_count", "nav_positions", "plan"]
