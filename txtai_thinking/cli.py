#!/usr/bin/env python3
# =============================================================
# cli.py
# -------------------------------------------------------------
# Commands:
#   query TEXT...        run one search and print the reference block
#   test-connection      POST a test query to the configured API
#   strip [FILE]         remove reference blocks from FILE (or stdin)
#
# Settings come from --settings (YAML, defaults to SETTINGS_PATH);
# --api-url overrides the stored URL for this run only.
# =============================================================

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from txtai_thinking.augment import AugmentationSession, format_reference_block, strip_reference_blocks
from txtai_thinking.log import configure_logging
from txtai_thinking.search import SearchClient
from txtai_thinking.settings import SettingsStore, ThinkingSettings, settings as app_settings


def _load_settings(args: argparse.Namespace) -> ThinkingSettings:
    current = SettingsStore(args.settings).load()
    if args.api_url is not None:
        current = current.model_copy(update={"api_url": args.api_url})
    return current


def _print_notifications(session: AugmentationSession) -> None:
    for n in session.notifier.drain():
        print(f"[{n['level']}] {n['message']}", file=sys.stderr)


def cmd_query(args: argparse.Namespace) -> int:
    cfg = _load_settings(args)
    session = AugmentationSession(session_id="cli", settings=cfg)
    text = " ".join(args.text).strip()

    results = SearchClient().search(text, cfg, session.notifier)
    _print_notifications(session)
    if not results:
        print("(no results)", file=sys.stderr)
        return 1

    print(results if args.raw else format_reference_block(cfg.template, results))
    return 0


def cmd_test_connection(args: argparse.Namespace) -> int:
    cfg = _load_settings(args)
    session = AugmentationSession(session_id="cli", settings=cfg)
    ok = SearchClient().test_connection(cfg, session.notifier)
    _print_notifications(session)
    return 0 if ok else 1


def cmd_strip(args: argparse.Namespace) -> int:
    if args.file and args.file != "-":
        text = Path(args.file).read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()
    sys.stdout.write(strip_reference_blocks(text))
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="txtai-thinking", description="txtai retrieval augmentation tools.")
    ap.add_argument("--settings", default=app_settings.SETTINGS_PATH, help="YAML settings file.")
    ap.add_argument("--api-url", default=None, help="Override the search API URL for this run.")
    ap.add_argument("--log-level", default=app_settings.LOG_LEVEL, help="Logging level (DEBUG, INFO, ...).")
    sub = ap.add_subparsers(dest="command", required=True)

    q = sub.add_parser("query", help="Search and print the formatted reference block.")
    q.add_argument("text", nargs="+", help="Query text.")
    q.add_argument("--raw", action="store_true", help="Print joined passages without the template.")
    q.set_defaults(func=cmd_query)

    t = sub.add_parser("test-connection", help="Check that the search API answers.")
    t.set_defaults(func=cmd_test_connection)

    s = sub.add_parser("strip", help="Remove reference blocks from text.")
    s.add_argument("file", nargs="?", help="Input file; stdin when omitted or '-'.")
    s.set_defaults(func=cmd_strip)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
