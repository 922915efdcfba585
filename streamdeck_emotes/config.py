"""Configuration loading for the emote profile generator.

Defaults are merged with an optional YAML file, then with dotted CLI overrides,
and finally normalised by :func:`prepare_config`.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .host import default_output_dir
from .models import lookup_device_model

LOG = logging.getLogger("streamdeck_emotes.config")

DEFAULT_CONFIG_PATH = Path("streamdeck_emotes.yaml")

_DEFAULT_CONFIG: Dict[str, Any] = {
    "profile": {"name": "Emotes", "id": None},
    "device": {"model": "standard"},
    "emotes": {"prefix": "", "include_labels": True, "prioritize": [], "deprioritize": []},
    "output": {"folder": None, "merge": True},
    "icons": {"enabled": False, "size": 144, "download": True, "timeout": 30.0},
    "restart": {"enabled": False},
}


def default_config() -> Dict[str, Any]:
    return copy.deepcopy(_DEFAULT_CONFIG)


def merge_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of *base* with *override* laid over it, section by section."""

    out = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(out.get(key), Mapping):
            out[key] = merge_dicts(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def load_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load a YAML configuration file if it exists, otherwise return defaults.

    An explicitly requested file that is missing logs a warning; the implicit
    ``streamdeck_emotes.yaml`` in the working directory is optional.
    """

    cfg_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        if path:
            LOG.warning("config not found at %s; using defaults", cfg_path)
        else:
            LOG.debug("no %s in the working directory; using defaults", cfg_path)
        return default_config()
    with cfg_path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, Mapping):
        raise ValueError(f"{cfg_path}: top level must be a mapping")
    LOG.info("loaded config %s", cfg_path)
    return merge_dicts(_DEFAULT_CONFIG, loaded)


def apply_cli_overrides(cfg: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a new config with ``section.key`` overrides applied."""

    nested: Dict[str, Any] = {}
    for dotted_key, value in overrides.items():
        section, _, key = dotted_key.partition(".")
        if key:
            nested.setdefault(section, {})[key] = value
        else:
            nested[section] = value
    return merge_dicts(cfg, nested)


def _as_name_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(item).strip() for item in value if str(item).strip()]


def prepare_config(raw_cfg: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge with defaults and normalise types.

    * Validates the device model name (raises ``InvalidDeviceModel``).
    * Accepts comma separated strings for the ordering lists.
    * Resolves a missing output folder to the host's Stream Deck folder.
    """

    cfg = merge_dicts(_DEFAULT_CONFIG, raw_cfg or {})

    profile = cfg["profile"]
    profile["name"] = str(profile.get("name") or "Emotes").strip()
    profile["id"] = str(profile["id"]).strip().upper() if profile.get("id") else None

    device = cfg["device"]
    device["model"] = lookup_device_model(device.get("model") or "standard").name

    emotes = cfg["emotes"]
    emotes["prefix"] = str(emotes.get("prefix") or "")
    emotes["include_labels"] = bool(emotes.get("include_labels", True))
    emotes["prioritize"] = _as_name_list(emotes.get("prioritize"))
    emotes["deprioritize"] = _as_name_list(emotes.get("deprioritize"))

    output = cfg["output"]
    folder = output.get("folder")
    output["folder"] = str(Path(folder).expanduser()) if folder else str(default_output_dir())
    output["merge"] = bool(output.get("merge", True))

    icons = cfg["icons"]
    icons["enabled"] = bool(icons.get("enabled", False))
    icons["size"] = max(16, int(icons.get("size", 144)))
    icons["download"] = bool(icons.get("download", True))
    icons["timeout"] = max(1.0, float(icons.get("timeout", 30.0)))

    cfg["restart"]["enabled"] = bool(cfg["restart"].get("enabled", False))
    return cfg


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "default_config",
    "merge_dicts",
    "load_config_file",
    "apply_cli_overrides",
    "prepare_config",
]
