from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

from .config import ConfigurationError, build_report_config, ensure_config_file, load_config
from .days import day_window, parse_day
from .git import RepositoryNotFoundError
from .messages import MessageProvider, PromptMessageProvider, StaticMessageProvider
from .run import run_report


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commit-report",
        description="Render daily git commit reports for several repos into an HTML dashboard and publish them.",
    )
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json.")
    parser.add_argument("--date", type=str, default="today", help="Day to report (YYYY-MM-DD, today, or yesterday).")
    parser.add_argument("--days", type=int, default=0, help="Days shown in the index, ending at --date (0 = config `index_days`).")
    parser.add_argument("--backfill", action="store_true", help="Regenerate day reports for every day of the index window.")
    parser.add_argument("--all-authors", action="store_true", help="Ignore the configured author filter.")
    parser.add_argument("-m", "--message", type=str, default=None, help="Commit message (prompted for when omitted).")
    parser.add_argument("--no-push", action="store_true", help="Write reports and index only; commit and push nothing.")
    return parser


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(argv)

    try:
        end = parse_day(args.date)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 2

    config_path: Path = args.config
    try:
        if not config_path.exists():
            candidate_template = config_path.resolve().parent / "config-template.json"
            raw = ensure_config_file(config_path=config_path, template_path=candidate_template)
        else:
            raw = load_config(config_path)
        config = build_report_config(raw, base_dir=config_path.resolve().parent)
    except ConfigurationError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    if args.all_authors:
        config = dataclasses.replace(config, filter_authors=False)

    days = int(args.days) if args.days else config.index_days
    if days < 1:
        print("--days must be >= 1", file=sys.stderr)
        return 2
    index_days = day_window(end, days)
    report_days = index_days if args.backfill else [end]

    provider: MessageProvider
    if args.message is not None:
        provider = StaticMessageProvider(args.message)
    else:
        provider = PromptMessageProvider()

    try:
        return run_report(
            config,
            report_days=report_days,
            index_days=index_days,
            message_provider=provider,
            publish=not args.no_push,
        )
    except ConfigurationError as e:
        print(f"Aborted: {e}", file=sys.stderr)
        return 2
    except RepositoryNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
