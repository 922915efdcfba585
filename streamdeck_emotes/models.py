"""Domain models for Stream Deck emote profile generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple, Union

from .errors import InvalidDeviceModel

# ---------------------------------------------------------------------------
# Emotes and devices
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Emote:
    """A single named emote as extracted from the source page."""

    name: str
    url: Optional[str] = None

    @property
    def key(self) -> str:
        """Case-folded name used when matching ordering rules."""
        return self.name.casefold()


class Position(NamedTuple):
    """A grid slot addressed as (column, row); serialised as ``"col,row"``."""

    column: int
    row: int

    def __str__(self) -> str:
        return f"{self.column},{self.row}"

    @classmethod
    def parse(cls, text: str) -> "Position":
        col, row = text.split(",")
        return cls(int(col.strip()), int(row.strip()))


@dataclass(frozen=True)
class DeviceModel:
    """Grid geometry of a supported Stream Deck model."""

    name: str
    rows: int
    columns: int
    model_id: str = ""

    @property
    def reserved_height(self) -> int:
        # Column 0 is reserved top to bottom for navigation.
        return self.rows

    @property
    def capacity(self) -> int:
        return self.rows * self.columns - self.reserved_height

    def positions(self) -> Iterator[Position]:
        """Yield every grid position row-major."""
        for row in range(self.rows):
            for col in range(self.columns):
                yield Position(col, row)

    def emote_positions(self) -> List[Position]:
        """Non-reserved positions in fill order."""
        return [pos for pos in self.positions() if pos.column != 0]


DEVICE_MODELS: Dict[str, DeviceModel] = {
    "standard": DeviceModel("standard", rows=3, columns=5, model_id="20GBA9901"),
    "xl": DeviceModel("xl", rows=4, columns=8, model_id="20GAT9901"),
    "mini": DeviceModel("mini", rows=2, columns=3, model_id="20GAI9901"),
}


def lookup_device_model(name: str) -> DeviceModel:
    """Return the device model registered under *name* (case-insensitive)."""

    model = DEVICE_MODELS.get(str(name).strip().lower())
    if model is None:
        known = ", ".join(sorted(DEVICE_MODELS))
        raise InvalidDeviceModel(f"Unknown device model {name!r} (expected one of: {known})")
    return model


# ---------------------------------------------------------------------------
# Page plan
# ---------------------------------------------------------------------------


class Direction(str, Enum):
    PREV = "prev"
    NEXT = "next"


@dataclass(frozen=True)
class EmoteButton:
    emote_name: str
    prefix: str = ""
    include_label: bool = True
    image_url: Optional[str] = None


@dataclass(frozen=True)
class NavButton:
    direction: Direction
    target_page: int


@dataclass(frozen=True)
class EmptySlot:
    pass


EMPTY = EmptySlot()

SlotAction = Union[EmoteButton, NavButton, EmptySlot]


@dataclass(frozen=True)
class Page:
    """One grid-sized screen of the plan; every grid position has a slot."""

    index: int
    slots: Mapping[Position, SlotAction]

    def __post_init__(self) -> None:
        object.__setattr__(self, "slots", MappingProxyType(dict(self.slots)))

    def emote_names(self) -> List[str]:
        return [
            slot.emote_name
            for _, slot in sorted(self.slots.items(), key=lambda item: (item[0].row, item[0].column))
            if isinstance(slot, EmoteButton)
        ]

    def nav(self, direction: Direction) -> Optional[NavButton]:
        for slot in self.slots.values():
            if isinstance(slot, NavButton) and slot.direction is direction:
                return slot
        return None


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

KIND_TEXT = "text"
KIND_NAVIGATE = "navigate"
KIND_EMPTY = "empty"


@dataclass(frozen=True)
class ButtonAction:
    """A persisted button. Kinds other than text/navigate/empty are kept as-is."""

    kind: str
    text: Optional[str] = None
    label: Optional[str] = None
    target: Optional[str] = None
    image: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def is_empty(self) -> bool:
        return self.kind == KIND_EMPTY


EMPTY_ACTION = ButtonAction(KIND_EMPTY)


@dataclass(frozen=True)
class PageManifest:
    id: str
    parent_id: str
    actions: Mapping[Position, ButtonAction]
    child_profile_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", MappingProxyType(dict(self.actions)))

    def action_at(self, position: Position) -> ButtonAction:
        return self.actions.get(position, EMPTY_ACTION)


@dataclass(frozen=True)
class ProfileManifest:
    """Top-level profile: metadata plus its ordered pages."""

    id: str
    name: str
    pages: Tuple[PageManifest, ...]
    device_model: str = ""
    version: str = "1.0"

    def __post_init__(self) -> None:
        object.__setattr__(self, "pages", tuple(self.pages))

    @property
    def page_ids(self) -> List[str]:
        return [page.id for page in self.pages]


__all__ = [
    "Emote",
    "Position",
    "DeviceModel",
    "DEVICE_MODELS",
    "lookup_device_model",
    "Direction",
    "EmoteButton",
    "NavButton",
    "EmptySlot",
    "EMPTY",
    "SlotAction",
    "Page",
    "KIND_TEXT",
    "KIND_NAVIGATE",
    "KIND_EMPTY",
    "ButtonAction",
    "EMPTY_ACTION",
    "PageManifest",
    "ProfileManifest",
]
