"""Manifest construction and the JSON codec for the on-disk tree."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from .errors import ExistingManifestCorrupt
from .identifiers import page_id
from .models import (
    EMPTY_ACTION,
    KIND_EMPTY,
    KIND_NAVIGATE,
    KIND_TEXT,
    ButtonAction,
    DeviceModel,
    Direction,
    EmoteButton,
    NavButton,
    Page,
    PageManifest,
    Position,
    ProfileManifest,
    SlotAction,
)

LOG = logging.getLogger("streamdeck_emotes.manifest")

MANIFEST_VERSION = "1.0"
NAV_LABELS = {Direction.PREV: "Back", Direction.NEXT: "Next"}


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


def emote_text(name: str, prefix: str = "") -> str:
    """Text typed by an emote button, e.g. ``:_pomuSmall9cm:``.

    With a prefix the first letter of the name is upper-cased so the result
    reads as one camel-cased shortcode; without one the name is used as-is.
    """

    if prefix and name:
        name = name[0].upper() + name[1:]
    return f":_{prefix}{name}:"


def _slot_to_action(
    slot: SlotAction,
    page_ids: Sequence[str],
    prefix: Optional[str],
    include_labels: Optional[bool],
) -> ButtonAction:
    if isinstance(slot, EmoteButton):
        slot_prefix = slot.prefix if prefix is None else prefix
        with_label = slot.include_label if include_labels is None else include_labels
        return ButtonAction(
            KIND_TEXT,
            text=emote_text(slot.emote_name, slot_prefix),
            label=slot.emote_name if with_label else None,
            image=slot.image_url,
        )
    if isinstance(slot, NavButton):
        return ButtonAction(
            KIND_NAVIGATE,
            target=page_ids[slot.target_page],
            label=NAV_LABELS[slot.direction],
        )
    return EMPTY_ACTION


def build(
    pages: Sequence[Page],
    profile_id: str,
    name: str,
    prefix: Optional[str] = None,
    include_labels: Optional[bool] = None,
    model: Optional[DeviceModel] = None,
) -> ProfileManifest:
    """Convert a page plan into a profile manifest.

    ``prefix`` and ``include_labels`` override the values carried by each
    emote slot when given.
    """

    ids = [page_id(profile_id, page.index) for page in pages]
    manifests = []
    for page, pid in zip(pages, ids):
        actions = {
            position: _slot_to_action(slot, ids, prefix, include_labels)
            for position, slot in page.slots.items()
        }
        manifests.append(PageManifest(id=pid, parent_id=profile_id, actions=actions))

    LOG.debug("built manifest %s with %d page(s)", profile_id, len(manifests))
    return ProfileManifest(
        id=profile_id,
        name=name,
        pages=tuple(manifests),
        device_model=model.model_id if model else "",
        version=MANIFEST_VERSION,
    )


# ---------------------------------------------------------------------------
# Serialising
# ---------------------------------------------------------------------------


def action_to_dict(action: ButtonAction) -> Dict[str, Any]:
    if action.kind not in (KIND_TEXT, KIND_NAVIGATE, KIND_EMPTY):
        payload = dict(action.extra)
        payload["kind"] = action.kind
        return payload

    payload: Dict[str, Any] = {"kind": action.kind}
    if action.kind == KIND_TEXT:
        payload["text"] = action.text or ""
        if action.image:
            payload["image"] = action.image
    elif action.kind == KIND_NAVIGATE:
        payload["target"] = action.target or ""
    if action.label is not None:
        payload["label"] = action.label
    return payload


def page_to_dict(page: PageManifest) -> Dict[str, Any]:
    """Serialise a page; empty slots are left out."""

    ordered = sorted(page.actions.items(), key=lambda item: (item[0].row, item[0].column))
    payload: Dict[str, Any] = {
        "id": page.id,
        "parent": page.parent_id,
        "actions": {str(pos): action_to_dict(action) for pos, action in ordered if not action.is_empty},
    }
    if page.child_profile_id:
        payload["child"] = page.child_profile_id
    return payload


def profile_to_dict(profile: ProfileManifest) -> Dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "device_model": profile.device_model,
        "version": profile.version,
        "pages": profile.page_ids,
    }


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _require_str(data: Mapping[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ExistingManifestCorrupt(f"{where}: missing or invalid {key!r}")
    return value


def action_from_dict(data: Any, where: str = "action") -> ButtonAction:
    if not isinstance(data, Mapping):
        raise ExistingManifestCorrupt(f"{where}: expected an object, got {type(data).__name__}")
    kind = data.get("kind")
    if not isinstance(kind, str) or not kind:
        raise ExistingManifestCorrupt(f"{where}: missing action kind")

    label = data.get("label")
    if label is not None and not isinstance(label, str):
        raise ExistingManifestCorrupt(f"{where}: label must be a string")

    if kind == KIND_EMPTY:
        return EMPTY_ACTION
    if kind == KIND_TEXT:
        image = data.get("image")
        if image is not None and not isinstance(image, str):
            raise ExistingManifestCorrupt(f"{where}: image must be a string")
        return ButtonAction(KIND_TEXT, text=_require_str(data, "text", where), label=label, image=image or None)
    if kind == KIND_NAVIGATE:
        return ButtonAction(KIND_NAVIGATE, target=_require_str(data, "target", where), label=label)
    extra = {key: value for key, value in data.items() if key != "kind"}
    return ButtonAction(kind, label=label, extra=extra)


def page_from_dict(data: Any, where: str = "page") -> PageManifest:
    if not isinstance(data, Mapping):
        raise ExistingManifestCorrupt(f"{where}: expected an object")
    pid = _require_str(data, "id", where)
    raw_actions = data.get("actions", {})
    if not isinstance(raw_actions, Mapping):
        raise ExistingManifestCorrupt(f"{where}: 'actions' must be an object")

    actions: Dict[Position, ButtonAction] = {}
    for key, raw in raw_actions.items():
        try:
            position = Position.parse(str(key))
        except ValueError as exc:
            raise ExistingManifestCorrupt(f"{where}: invalid position {key!r}") from exc
        action = action_from_dict(raw, f"{where}[{key}]")
        if not action.is_empty:
            actions[position] = action

    child = data.get("child")
    return PageManifest(
        id=pid,
        parent_id=str(data.get("parent") or ""),
        actions=actions,
        child_profile_id=child if isinstance(child, str) and child else None,
    )


def profile_from_dict(data: Any, pages: Sequence[PageManifest], where: str = "profile") -> ProfileManifest:
    """Rebuild a profile from its manifest payload and already parsed pages."""

    if not isinstance(data, Mapping):
        raise ExistingManifestCorrupt(f"{where}: expected an object")
    return ProfileManifest(
        id=_require_str(data, "id", where),
        name=str(data.get("name") or ""),
        pages=tuple(pages),
        device_model=str(data.get("device_model") or ""),
        version=str(data.get("version") or MANIFEST_VERSION),
    )


def page_ids_from_dict(data: Any, where: str = "profile") -> list[str]:
    if not isinstance(data, Mapping):
        raise ExistingManifestCorrupt(f"{where}: expected an object")
    ids = data.get("pages", [])
    if not isinstance(ids, list) or not all(isinstance(item, str) and item for item in ids):
        raise ExistingManifestCorrupt(f"{where}: 'pages' must be a list of page ids")
    return list(ids)


__all__ = [
    "MANIFEST_VERSION",
    "emote_text",
    "build",
    "action_to_dict",
    "page_to_dict",
    "profile_to_dict",
    "action_from_dict",
    "page_from_dict",
    "profile_from_dict",
    "page_ids_from_dict",
]
