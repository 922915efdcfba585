"""End-to-end generation pipeline.

Stages
------
1. **Order** – apply the prioritize/deprioritize rules.
2. **Plan** – split the ordered emotes into device-sized pages.
3. **Build** – turn the plan into a profile manifest with stable ids.
4. **Merge** – overlay the result on the existing tree (unless disabled).
   Emote images are downloaded here when icons are enabled.
5. **Write** – persist the merged tree in a single pass, plus optional icons.

Everything up to the write stage runs in memory, so a failure before stage 5
leaves the output folder exactly as it was.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

from . import identifiers
from .icons import render_icons
from .images import fetch_images
from .layout import plan
from .manifest import build
from .merge import merge
from .models import Emote, ProfileManifest, lookup_device_model
from .ordering import reorder
from .store import read_tree, write_tree

LOG = logging.getLogger("streamdeck_emotes.pipeline")


def generate_profile(emotes: Sequence[Emote], cfg: Mapping[str, Any]) -> ProfileManifest:
    """Order, plan and build a profile from *emotes*; touches no files."""

    model = lookup_device_model(cfg["device"]["model"])
    emote_cfg = cfg["emotes"]
    name = cfg["profile"]["name"]

    ordered = reorder(emotes, emote_cfg["prioritize"], emote_cfg["deprioritize"])
    pages = plan(ordered, model, emote_cfg["prefix"], emote_cfg["include_labels"])
    pid = identifiers.profile_id(name, cfg["profile"].get("id"))
    return build(pages, pid, name, emote_cfg["prefix"], emote_cfg["include_labels"], model)


def run_pipeline(emotes: Sequence[Emote], cfg: Mapping[str, Any]) -> Dict[str, Any]:
    """Generate, merge and write a profile. Returns a summary of the run."""

    root = Path(cfg["output"]["folder"])
    generated = generate_profile(emotes, cfg)

    existing = None
    if cfg["output"]["merge"]:
        existing = read_tree(root, generated.id)
    else:
        LOG.info("merge disabled; existing content for %s will be replaced", generated.id)
    result = merge(generated, existing)

    images: Dict[str, bytes] = {}
    icon_cfg = cfg["icons"]
    if icon_cfg["enabled"] and icon_cfg["download"]:
        images = fetch_images(generated, icon_cfg["timeout"])

    profile_path = write_tree(root, result)
    icons = 0
    if icon_cfg["enabled"]:
        icons = render_icons(root, generated, icon_cfg["size"], images)

    return {
        "profile_dir": str(profile_path),
        "profile_id": result.id,
        "pages": result.page_ids,
        "emotes": len(emotes),
        "merged": existing is not None,
        "icons": icons,
        "images": len(images),
    }


__all__ = ["generate_profile", "run_pipeline"]
