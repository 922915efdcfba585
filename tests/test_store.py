"""Tests for reading and writing the profile tree."""

import json
from pathlib import Path

import pytest

from streamdeck_emotes import store
from streamdeck_emotes.errors import ExistingManifestCorrupt, FilesystemFailure
from streamdeck_emotes.identifiers import derive
from streamdeck_emotes.layout import plan
from streamdeck_emotes.manifest import build, page_to_dict, profile_to_dict
from streamdeck_emotes.models import DEVICE_MODELS
from streamdeck_emotes.store import MANIFEST_NAME, page_dir, profile_dir, read_tree, write_tree

from conftest import emotes_of


@pytest.fixture
def profile():
    model = DEVICE_MODELS["mini"]
    return build(plan(emotes_of(*"abcdefghi"), model), derive("Pomu"), "Pomu", prefix="pomu", model=model)


class TestWriteTree:
    def test_layout_on_disk(self, tmp_path: Path, profile):
        target = write_tree(tmp_path, profile)
        assert target == tmp_path / f"{profile.id}.sdProfile"

        root_manifest = json.loads((target / MANIFEST_NAME).read_text(encoding="utf-8"))
        assert root_manifest["pages"] == profile.page_ids
        for page in profile.pages:
            path = target / "Profiles" / page.id / MANIFEST_NAME
            assert json.loads(path.read_text(encoding="utf-8")) == page_to_dict(page)

    def test_no_temp_files_left(self, tmp_path: Path, profile):
        write_tree(tmp_path, profile)
        assert not list(tmp_path.rglob("*.tmp"))

    def test_failed_write_leaves_existing_tree_untouched(self, tmp_path: Path, profile, monkeypatch):
        write_tree(tmp_path, profile)
        before = {p: p.read_bytes() for p in tmp_path.rglob(MANIFEST_NAME)}

        model = DEVICE_MODELS["mini"]
        renamed = build(plan(emotes_of(*"jklmnopqr"), model), derive("Pomu"), "Pomu", prefix="pomu", model=model)
        assert renamed.page_ids == profile.page_ids

        real_stage = store._stage
        calls = []

        def flaky_stage(path, payload):
            calls.append(path)
            if len(calls) == 3:
                raise FilesystemFailure(f"failed to write {path}: disk full")
            return real_stage(path, payload)

        monkeypatch.setattr(store, "_stage", flaky_stage)
        with pytest.raises(FilesystemFailure):
            write_tree(tmp_path, renamed)

        assert {p: p.read_bytes() for p in tmp_path.rglob(MANIFEST_NAME)} == before
        assert not list(tmp_path.rglob("*.tmp"))


class TestReadTree:
    def test_missing_returns_none(self, tmp_path: Path):
        assert read_tree(tmp_path, derive("nothing")) is None

    def test_reads_back_written_tree(self, tmp_path: Path, profile):
        write_tree(tmp_path, profile)
        loaded = read_tree(tmp_path, profile.id)
        assert profile_to_dict(loaded) == profile_to_dict(profile)
        assert [page_to_dict(p) for p in loaded.pages] == [page_to_dict(p) for p in profile.pages]

    def test_invalid_json(self, tmp_path: Path, profile):
        write_tree(tmp_path, profile)
        (profile_dir(tmp_path, profile.id) / MANIFEST_NAME).write_text("{not json", encoding="utf-8")
        with pytest.raises(ExistingManifestCorrupt):
            read_tree(tmp_path, profile.id)

    def test_missing_page_manifest(self, tmp_path: Path, profile):
        write_tree(tmp_path, profile)
        (page_dir(tmp_path, profile.id, profile.page_ids[1]) / MANIFEST_NAME).unlink()
        with pytest.raises(ExistingManifestCorrupt):
            read_tree(tmp_path, profile.id)

    def test_mismatched_id(self, tmp_path: Path, profile):
        write_tree(tmp_path, profile)
        path = profile_dir(tmp_path, profile.id) / MANIFEST_NAME
        data = json.loads(path.read_text(encoding="utf-8"))
        data["id"] = "SOMETHING-ELSE"
        path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(ExistingManifestCorrupt):
            read_tree(tmp_path, profile.id)
