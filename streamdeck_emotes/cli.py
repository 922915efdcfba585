"""Command line entry-point for Stream Deck emote profile generation."""

from __future__ import annotations

import argparse
import logging
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .config import apply_cli_overrides, load_config_file, prepare_config
from .errors import FilesystemFailure, ProfileGenerationError
from .extract import parse_emotes
from .host import restart_streamdeck
from .pipeline import run_pipeline

LOG = logging.getLogger("streamdeck_emotes.cli")


def _apply_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map CLI flags to config override keys."""
    overrides: Dict[str, Any] = {}
    if args.out:
        overrides["output.folder"] = str(Path(args.out))
    if args.name:
        overrides["profile.name"] = args.name
    if args.profile_id:
        overrides["profile.id"] = args.profile_id
    if args.prefix is not None:
        overrides["emotes.prefix"] = args.prefix
    if args.model:
        overrides["device.model"] = args.model
    if args.prioritize is not None:
        overrides["emotes.prioritize"] = args.prioritize
    if args.deprioritize is not None:
        overrides["emotes.deprioritize"] = args.deprioritize
    if args.no_labels:
        overrides["emotes.include_labels"] = False
    if args.no_merge:
        overrides["output.merge"] = False
    if args.icons:
        overrides["icons.enabled"] = True
    if args.no_download:
        overrides["icons.download"] = False
    if args.restart:
        overrides["restart.enabled"] = True
    return overrides


def _read_source(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    try:
        return Path(source).read_bytes()
    except OSError as exc:
        raise FilesystemFailure(f"failed to read input {source}: {exc}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamdeck-emotes",
        description="Generate a paged Stream Deck profile of channel emotes",
    )
    parser.add_argument("--in", dest="input", default="-", help="Membership page HTML, or '-' for stdin")
    parser.add_argument("--plain", action="store_true", help="Input is a plain list, one emote per line")
    parser.add_argument("--out", dest="out", help="Stream Deck profiles folder override")
    parser.add_argument("--name", dest="name", help="Profile name")
    parser.add_argument("--profile-id", dest="profile_id", help="Explicit profile UUID")
    parser.add_argument("--prefix", dest="prefix", help="Emote prefix, e.g. 'pomu'")
    parser.add_argument("--model", dest="model", help="Device model: standard|xl|mini")
    parser.add_argument("--prioritize", dest="prioritize", help="Comma separated emotes to put first")
    parser.add_argument("--deprioritize", dest="deprioritize", help="Comma separated emotes to put last")
    parser.add_argument("--no-labels", dest="no_labels", action="store_true", help="Hide emote names on buttons")
    parser.add_argument("--no-merge", dest="no_merge", action="store_true", help="Replace instead of merging")
    parser.add_argument("--icons", action="store_true", help="Write button icons (emote images when available)")
    parser.add_argument(
        "--no-download", dest="no_download", action="store_true", help="Render text tiles instead of fetching emote images"
    )
    parser.add_argument("--restart", action="store_true", help="Restart Stream Deck afterwards")
    parser.add_argument("--config", dest="config", default="", help="Path to a YAML config")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used by `python -m streamdeck_emotes.cli`."""

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        cfg = load_config_file(Path(args.config) if args.config else None)
        cfg = prepare_config(apply_cli_overrides(cfg, _apply_overrides(args)))
        emotes = parse_emotes(_read_source(args.input), plain=args.plain)
        result = run_pipeline(emotes, cfg)
    except ProfileGenerationError as exc:
        LOG.error("%s: %s", type(exc).__name__, exc)
        return 1
    except Exception as exc:  # pragma: no cover - CLI feedback
        LOG.exception("generation failed: %s", exc)
        return 1

    LOG.info("profile %s: %d page(s) in %s", result["profile_id"], len(result["pages"]), result["profile_dir"])

    if cfg["restart"]["enabled"]:
        try:
            restart_streamdeck()
        except (OSError, subprocess.SubprocessError) as exc:
            LOG.error("profile written but Stream Deck restart failed: %s", exc)
            return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI behavior
    raise SystemExit(main())
