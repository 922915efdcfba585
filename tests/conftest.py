"""Shared fixtures for the emote profile tests."""

from pathlib import Path

import pytest

from streamdeck_emotes.config import prepare_config
from streamdeck_emotes.models import DeviceModel, Emote


def emotes_of(*names):
    return [Emote(name) for name in names]


@pytest.fixture
def tiny_model() -> DeviceModel:
    # 2x2 grid: one reserved column, capacity 2.
    return DeviceModel("tiny", rows=2, columns=2)


@pytest.fixture
def cfg(tmp_path: Path):
    return prepare_config(
        {
            "profile": {"name": "Pomu"},
            "emotes": {"prefix": "pomu"},
            "output": {"folder": str(tmp_path / "profiles")},
        }
    )
