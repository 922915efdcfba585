"""Reading and writing the profile tree on disk.

Layout under the output root::

    <PROFILE_ID>.sdProfile/manifest.json
    <PROFILE_ID>.sdProfile/Profiles/<PAGE_ID>/manifest.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from .errors import ExistingManifestCorrupt, FilesystemFailure
from .manifest import page_from_dict, page_ids_from_dict, page_to_dict, profile_from_dict, profile_to_dict
from .models import ProfileManifest

LOG = logging.getLogger("streamdeck_emotes.store")

MANIFEST_NAME = "manifest.json"


def profile_dir(root: Path, profile_id: str) -> Path:
    return Path(root) / f"{profile_id}.sdProfile"


def page_dir(root: Path, profile_id: str, page_id: str) -> Path:
    return profile_dir(root, profile_id) / "Profiles" / page_id


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------


def read_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ExistingManifestCorrupt(f"failed to parse {path}: {exc}") from exc
    except OSError as exc:
        raise FilesystemFailure(f"failed to read {path}: {exc}") from exc


def _stage(path: Path, payload: Mapping[str, Any]) -> Path:
    """Write *payload* next to *path* and return the temporary file."""

    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise FilesystemFailure(f"failed to write {path}: {exc}") from exc
    return tmp


def _commit(tmp: Path, path: Path) -> None:
    try:
        tmp.replace(path)
    except OSError as exc:
        raise FilesystemFailure(f"failed to write {path}: {exc}") from exc


def write_json(path: Path, payload: Mapping[str, Any]) -> None:
    _commit(_stage(path, payload), path)


# ---------------------------------------------------------------------------
# Tree I/O
# ---------------------------------------------------------------------------


def read_tree(root: Path, profile_id: str) -> Optional[ProfileManifest]:
    """Load an existing profile tree, or ``None`` when there is none."""

    manifest_path = profile_dir(root, profile_id) / MANIFEST_NAME
    if not manifest_path.exists():
        LOG.info("no existing profile at %s", manifest_path.parent)
        return None

    data = read_json(manifest_path)
    pages = []
    for pid in page_ids_from_dict(data, str(manifest_path)):
        path = page_dir(root, profile_id, pid) / MANIFEST_NAME
        if not path.exists():
            raise ExistingManifestCorrupt(f"{manifest_path}: listed page {pid} has no manifest at {path}")
        pages.append(page_from_dict(read_json(path), str(path)))

    profile = profile_from_dict(data, pages, str(manifest_path))
    if profile.id != profile_id:
        raise ExistingManifestCorrupt(
            f"{manifest_path}: id {profile.id!r} does not match folder id {profile_id!r}"
        )
    LOG.info("loaded existing profile %s with %d page(s)", profile_id, len(pages))
    return profile


def write_tree(root: Path, profile: ProfileManifest) -> Path:
    """Write every page manifest, then the profile manifest that lists them.

    Every file is staged as a `.tmp` sibling first. If one of them cannot be
    written, the staged files are removed and the existing manifests stay as
    they were. Otherwise they are renamed into place, pages first.
    """

    target = profile_dir(root, profile.id)
    files = [(page_dir(root, profile.id, page.id) / MANIFEST_NAME, page_to_dict(page)) for page in profile.pages]
    files.append((target / MANIFEST_NAME, profile_to_dict(profile)))

    staged: List[Tuple[Path, Path]] = []
    try:
        for path, payload in files:
            staged.append((_stage(path, payload), path))
    except FilesystemFailure:
        for tmp, _ in staged:
            tmp.unlink(missing_ok=True)
        raise

    for tmp, path in staged:
        _commit(tmp, path)
    LOG.info("wrote profile %s (%d page(s)) to %s", profile.id, len(profile.pages), target)
    return target


__all__ = [
    "MANIFEST_NAME",
    "profile_dir",
    "page_dir",
    "read_json",
    "write_json",
    "read_tree",
    "write_tree",
]
