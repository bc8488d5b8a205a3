# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""isbot CLI."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from ..bots import Bots
from ..config import load_settings
from ..errors import FixtureError, InvalidPatternError
from ..fixtures import FIXTURES, download_fixtures, load_fixture, verify_fixture
from ..log import setup_logging

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="isbot", description="Detect if a user-agent is a known bot")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $ISBOT_LOG_LEVEL or WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Classify one or more user-agents")
    check.add_argument("user_agents", nargs="+", metavar="USER_AGENT", help="User-agent strings to classify")
    _add_pattern_arguments(check)
    check.add_argument("--json", action="store_true", help="Output JSON instead of one line per user-agent")
    check.add_argument("--explain", action="store_true", help="Show which patterns matched each user-agent")

    download = subparsers.add_parser("download-fixtures", help="Download fixture data for verification")
    download.add_argument("--output", default=None, help="Fixture directory (default: $ISBOT_FIXTURES_DIR or ./fixtures)")

    verify = subparsers.add_parser("verify", help="Check every user-agent in a fixture file")
    verify.add_argument("fixture", help="Fixture file (.json array or one user-agent per line)")
    verify.add_argument(
        "--expect",
        choices=("bot", "browser"),
        default=None,
        help="Expected classification (inferred from known fixture names when omitted)",
    )
    _add_pattern_arguments(verify)
    return parser


def _add_pattern_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--patterns", default=None, help="Pattern file to use instead of the bundled list")
    parser.add_argument("--append", nargs="+", default=[], metavar="PATTERN", help="Extra bot patterns")
    parser.add_argument("--remove", nargs="+", default=[], metavar="PATTERN", help="Patterns to remove")


def _build_bots(args: argparse.Namespace) -> Bots:
    if args.patterns:
        bots = Bots(Path(args.patterns).read_text(encoding="utf-8"))
    else:
        bots = Bots.default()
    if args.append:
        bots.append(args.append)
    if args.remove:
        bots.remove(args.remove)
    return bots


def _check(args: argparse.Namespace) -> int:
    bots = _build_bots(args)
    results: list[dict[str, Any]] = []
    for user_agent in args.user_agents:
        result: dict[str, Any] = {"user_agent": user_agent, "is_bot": bots.is_bot(user_agent)}
        if args.explain:
            result["patterns"] = bots.matching_patterns(user_agent)
        results.append(result)

    if args.json:
        json.dump(results, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return EXIT_OK

    for result in results:
        label = "bot" if result["is_bot"] else "not bot"
        print(f"{label}\t{result['user_agent']}")
        if args.explain and result["patterns"]:
            print(f"\tmatched: {', '.join(result['patterns'])}")
    return EXIT_OK


def _download(args: argparse.Namespace) -> int:
    directory = args.output or load_settings().fixtures_dir
    written = download_fixtures(directory)
    for name, path in sorted(written.items()):
        print(f"{name}: {path}")
    missing = sorted(set(FIXTURES) - set(written))
    if missing:
        print(f"Failed: {', '.join(missing)}", file=sys.stderr)
        return EXIT_MISMATCH
    return EXIT_OK


def _verify(args: argparse.Namespace) -> int:
    path = Path(args.fixture)
    fixture = FIXTURES.get(path.stem)
    if args.expect is not None:
        expect_bot = args.expect == "bot"
    elif fixture is not None:
        expect_bot = fixture.expect_bot
    else:
        print(f"Cannot infer expectation for {path.name}; pass --expect", file=sys.stderr)
        return EXIT_ERROR

    bots = _build_bots(args)
    user_agents = load_fixture(path)
    mismatches = verify_fixture(
        bots,
        user_agents,
        expect_bot=expect_bot,
        skip=fixture.skip if fixture is not None else None,
    )
    expected = "bot" if expect_bot else "browser"
    for user_agent in mismatches:
        print(f"not a {expected}: {user_agent}")
    print(f"{len(user_agents) - len(mismatches)}/{len(user_agents)} user-agents classified as {expected}")
    return EXIT_MISMATCH if mismatches else EXIT_OK


_COMMANDS = {
    "check": _check,
    "download-fixtures": _download,
    "verify": _verify,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        return _COMMANDS[args.command](args)
    except (InvalidPatternError, FixtureError, OSError) as exc:
        print(f"isbot: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
