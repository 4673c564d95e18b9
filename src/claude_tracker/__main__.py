"""Entry point for `python -m claude_tracker`."""

import argparse
import logging
import sys
from dataclasses import replace


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claude-tracker",
        description="Analyze Claude Code and Cursor usage",
    )
    parser.add_argument("--json", action="store_true", help="output JSON instead of a table")
    parser.add_argument("--claude-dir", help="Claude projects directory")
    parser.add_argument("--cursor-dir", help="Cursor user data directory")
    parser.add_argument("--workers", type=int, help="parser threads per stage")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return parser


def run(argv=None) -> int:
    from PySide6.QtCore import QCoreApplication

    from claude_tracker.display import print_json, print_table
    from claude_tracker.services.config_manager import ConfigManager
    from claude_tracker.services.pipeline import load_data

    args = _build_parser().parse_args(argv)

    QCoreApplication.setOrganizationName("claude-tracker")
    QCoreApplication.setApplicationName("Claude Tracker")
    settings = ConfigManager()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose or settings.debug_logging() else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = settings.tracker_config()
    overrides = {}
    if args.claude_dir:
        overrides["claude_projects_dir"] = args.claude_dir
    if args.cursor_dir:
        overrides["cursor_user_dir"] = args.cursor_dir
    if args.workers:
        overrides["max_workers"] = args.workers
    if overrides:
        config = replace(config, **overrides)

    try:
        result = load_data(config)
    except OSError as e:
        logging.getLogger(__name__).error("Cannot read session logs: %s", e)
        return 1

    if args.json:
        print_json(result)
    else:
        print_table(result, theme=config.theme)
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
