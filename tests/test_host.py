"""Tests for host-specific paths and restarts."""

from pathlib import Path

from streamdeck_emotes import host


class TestDefaultOutputDir:
    def test_windows(self):
        path = host.default_output_dir("win32", {"APPDATA": "C:/Users/me/AppData/Roaming"})
        assert path == Path("C:/Users/me/AppData/Roaming") / "Elgato" / "StreamDeck" / "ProfilesV2"

    def test_macos(self):
        path = host.default_output_dir("darwin", {"HOME": "/Users/me"})
        assert path.parts[-3:] == ("Application Support", "com.elgato.StreamDeck", "ProfilesV2")

    def test_fallback(self):
        assert host.default_output_dir("linux", {}) == host.FALLBACK_OUTPUT


class TestRestart:
    def test_unsupported_platform(self, monkeypatch):
        calls = []
        monkeypatch.setattr(host.subprocess, "run", lambda *a, **k: calls.append(a))
        assert host.restart_streamdeck("linux") is False
        assert calls == []

    def test_macos_stops_then_starts(self, monkeypatch):
        calls = []
        monkeypatch.setattr(host.subprocess, "run", lambda cmd, **k: calls.append(cmd))
        monkeypatch.setattr(host.time, "sleep", lambda _: None)
        assert host.restart_streamdeck("darwin") is True
        assert calls[0][0] == "pkill"
        assert calls[1][:2] == ["open", "-a"]
