"""Host-specific glue: default profile folder and Stream Deck restarts."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from pathlib import Path
from typing import Mapping, Optional

LOG = logging.getLogger("streamdeck_emotes.host")

FALLBACK_OUTPUT = Path("out")


def default_output_dir(platform: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Path:
    """Where the Stream Deck application keeps its profiles on this host."""

    platform = platform or sys.platform
    env = os.environ if env is None else env

    if platform.startswith("win"):
        appdata = env.get("APPDATA")
        if appdata:
            return Path(appdata) / "Elgato" / "StreamDeck" / "ProfilesV2"
    elif platform == "darwin":
        home = env.get("HOME")
        if home:
            return Path(home) / "Library" / "Application Support" / "com.elgato.StreamDeck" / "ProfilesV2"

    LOG.warning("no Stream Deck profile folder known for %s; using %s", platform, FALLBACK_OUTPUT)
    return FALLBACK_OUTPUT


def restart_streamdeck(platform: Optional[str] = None) -> bool:
    """Stop and relaunch the Stream Deck application so it reloads profiles.

    Returns False when the host has no known way to restart the app.
    """

    platform = platform or sys.platform
    if platform.startswith("win"):
        stop = ["taskkill", "/IM", "StreamDeck.exe", "/F"]
        start = ["cmd", "/c", "start", "", r"C:\Program Files\Elgato\StreamDeck\StreamDeck.exe"]
    elif platform == "darwin":
        stop = ["pkill", "-x", "Stream Deck"]
        start = ["open", "-a", "Elgato Stream Deck"]
    else:
        LOG.warning("restart not supported on %s", platform)
        return False

    LOG.info("restarting Stream Deck")
    # Not running is fine; the relaunch below is what matters.
    subprocess.run(stop, check=False, capture_output=True)
    time.sleep(1.0)
    subprocess.run(start, check=True, capture_output=True)
    return True


__all__ = ["default_output_dir", "restart_streamdeck"]
