"""Tests for downloading emote images."""

from pathlib import Path

import pytest
from PIL import Image

from streamdeck_emotes.errors import ImageFetchFailed
from streamdeck_emotes.identifiers import derive
from streamdeck_emotes.images import fetch_image, fetch_images, image_urls
from streamdeck_emotes.layout import plan
from streamdeck_emotes.manifest import build
from streamdeck_emotes.models import Emote


def png_file(path: Path, colour=(200, 40, 40)) -> Path:
    Image.new("RGB", (8, 8), colour).save(path, "PNG")
    return path


class TestFetchImage:
    def test_reads_local_uri(self, tmp_path: Path):
        source = png_file(tmp_path / "a.png")
        assert fetch_image(source.as_uri()) == source.read_bytes()

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ImageFetchFailed):
            fetch_image((tmp_path / "absent.png").as_uri())

    def test_empty_body(self, tmp_path: Path):
        empty = tmp_path / "empty.png"
        empty.write_bytes(b"")
        with pytest.raises(ImageFetchFailed):
            fetch_image(empty.as_uri())

    def test_unsupported_url(self):
        with pytest.raises(ImageFetchFailed):
            fetch_image("not a url")


class TestFetchImages:
    def test_distinct_urls_in_page_order(self, tiny_model):
        emotes = [Emote("a", "https://x/1"), Emote("b", "https://x/2"), Emote("c", "https://x/1"), Emote("d")]
        profile = build(plan(emotes, tiny_model), derive("P"), "P")
        assert list(image_urls(profile)) == ["https://x/1", "https://x/2"]

    def test_downloads_each_url_once(self, tmp_path: Path, tiny_model):
        red = png_file(tmp_path / "red.png").as_uri()
        blue = png_file(tmp_path / "blue.png", (40, 40, 200)).as_uri()
        emotes = [Emote("a", red), Emote("b", blue), Emote("c", red)]
        profile = build(plan(emotes, tiny_model), derive("P"), "P")

        images = fetch_images(profile)

        assert set(images) == {red, blue}
        assert images[blue] == (tmp_path / "blue.png").read_bytes()
