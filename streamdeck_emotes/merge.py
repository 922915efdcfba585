"""Merge a freshly generated profile into the one already on disk."""

from __future__ import annotations

import logging
from typing import Collection, Dict, Optional

from .models import KIND_NAVIGATE, ButtonAction, PageManifest, Position, ProfileManifest

LOG = logging.getLogger("streamdeck_emotes.merge")


def _stale_link(action: ButtonAction, page_ids: Optional[Collection[str]]) -> bool:
    return page_ids is not None and action.kind == KIND_NAVIGATE and action.target not in page_ids


def merge_page(
    generated: PageManifest,
    existing: Optional[PageManifest],
    page_ids: Optional[Collection[str]] = None,
) -> PageManifest:
    """Overlay *generated* on *existing*; slots the generator left empty keep
    whatever the existing page had there.

    When *page_ids* is given, existing navigation buttons pointing at a page
    outside it are not kept.
    """

    if existing is None:
        return generated

    positions = sorted(set(generated.actions) | set(existing.actions), key=lambda p: (p.row, p.column))
    actions: Dict[Position, ButtonAction] = {}
    kept = 0
    for position in positions:
        ours = generated.action_at(position)
        theirs = existing.action_at(position)
        if ours.is_empty and not theirs.is_empty and not _stale_link(theirs, page_ids):
            actions[position] = theirs
            kept += 1
        else:
            actions[position] = ours

    if kept:
        LOG.info("page %s: kept %d existing slot(s)", generated.id, kept)
    return PageManifest(
        id=generated.id,
        parent_id=generated.parent_id,
        actions=actions,
        child_profile_id=generated.child_profile_id,
    )


def merge(generated: ProfileManifest, existing: Optional[ProfileManifest]) -> ProfileManifest:
    """Combine two profile trees without mutating either.

    Pages pair up by index. The generator owns the page count, so existing
    pages past the end of the generated list are dropped, along with any
    existing navigation button that would still lead to one of them.
    """

    if existing is None:
        return generated

    if len(existing.pages) > len(generated.pages):
        dropped = [page.id for page in existing.pages[len(generated.pages) :]]
        LOG.warning(
            "dropping %d existing page(s) beyond the generated page count: %s",
            len(dropped),
            ", ".join(dropped),
        )

    page_ids = frozenset(generated.page_ids)
    pages = []
    for index, page in enumerate(generated.pages):
        theirs = existing.pages[index] if index < len(existing.pages) else None
        pages.append(merge_page(page, theirs, page_ids))

    return ProfileManifest(
        id=generated.id,
        name=generated.name,
        pages=tuple(pages),
        device_model=generated.device_model,
        version=generated.version,
    )


__all__ = ["merge", "merge_page"]
