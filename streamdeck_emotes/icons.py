"""Icon rendering helpers for generated buttons."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional

from PIL import Image, ImageDraw, ImageFont

from .errors import FilesystemFailure
from .models import KIND_NAVIGATE, KIND_TEXT, ButtonAction, ProfileManifest
from .store import page_dir

LOG = logging.getLogger("streamdeck_emotes.icons")

BACKGROUND = (24, 24, 28)
FOREGROUND = (235, 235, 245)
OUTLINE = (80, 80, 90)


def _load_font(size: int):
    for name in ("arial.ttf", "DejaVuSans.ttf"):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default()


def _wrap(draw: "ImageDraw.ImageDraw", text: str, font, max_width: int, max_lines: int = 3) -> List[str]:
    wrapped: List[str] = []
    for piece in text.replace("\n", " ").split():
        if wrapped and draw.textlength(f"{wrapped[-1]} {piece}", font=font) <= max_width:
            wrapped[-1] = f"{wrapped[-1]} {piece}"
        else:
            wrapped.append(piece)
        if len(wrapped) == max_lines:
            break
    return wrapped


def render_icon(text: str, size: int = 144) -> "Image.Image":
    """Render a rounded text tile for a single button."""

    font = _load_font(max(8, size // 5))
    image = Image.new("RGB", (size, size), BACKGROUND)
    draw = ImageDraw.Draw(image)
    draw.rounded_rectangle([(2, 2), (size - 3, size - 3)], radius=size // 8, outline=OUTLINE, width=3)

    lines = _wrap(draw, text, font, size - 24)
    line_height = int(getattr(font, "size", 10) * 1.1)
    y_pos = (size - len(lines) * line_height) // 2
    for line in lines:
        x_pos = (size - draw.textlength(line, font=font)) // 2
        draw.text((x_pos, y_pos), line, fill=FOREGROUND, font=font)
        y_pos += line_height
    return image


def _icon_text(action: ButtonAction) -> str:
    if action.label:
        return action.label
    text = action.text or ""
    if text.startswith(":_") and text.endswith(":") and len(text) >= 3:
        return text[2:-1]
    return text


def render_icons(
    root: Path,
    profile: ProfileManifest,
    size: int = 144,
    images: Optional[Mapping[str, bytes]] = None,
) -> int:
    """Write ``state0.png`` icons for every text/navigate button of *profile*.

    Buttons whose image was downloaded get those bytes as-is; the rest get a
    rendered text tile. Only pass the freshly generated profile here: slots
    carried over from an existing tree keep whatever images they already had.
    """

    images = images or {}
    written = 0
    for page in profile.pages:
        base = page_dir(root, profile.id, page.id)
        for position, action in page.actions.items():
            if action.kind not in (KIND_TEXT, KIND_NAVIGATE):
                continue
            target = base / str(position) / "CustomImages" / "state0.png"
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                if action.image and action.image in images:
                    target.write_bytes(images[action.image])
                else:
                    render_icon(_icon_text(action), size).save(target, "PNG")
            except OSError as exc:
                raise FilesystemFailure(f"failed to write icon {target}: {exc}") from exc
            written += 1
    LOG.info("wrote %d icon(s) for profile %s", written, profile.id)
    return written


__all__ = ["render_icon", "render_icons"]
