# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Fixture data for validating the bot list against real-world user-agents.

Fixtures are JSON arrays of user-agent strings written to a local directory. They are
downloaded from three public sources:

- ua-parser's device test cases (split into browsers and ``Spider`` bots)
- omrilotan/isbot's browser fixtures
- myip.ms live web crawler list
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .bots import BotMatcher
from .config import HttpSettings, load_http_settings, load_settings
from .errors import FixtureError
from .http import HttpClient, HttpRequest, create_default_http_client, send_with_retries
from .http.models import RetryConfig
from .patterns import ascii_lower

logger = logging.getLogger(__name__)

MYIP_MS_BOTS = "myip-ms-live-bots"
UA_PARSER_BOTS = "ua-parser-bots"
UA_PARSER_BROWSERS = "ua-parser-browsers"
OMRILOTAN_BROWSERS = "omrilotan-browsers"

MYIP_MS_URL = "https://myip.ms/files/bots/live_webcrawlers.txt"
OMRILOTAN_BROWSERS_URL = "https://raw.githubusercontent.com/omrilotan/isbot/main/fixtures/browsers.yml"
UA_PARSER_BROWSERS_URL = "https://raw.githubusercontent.com/ua-parser/uap-core/master/tests/test_device.yaml"

_MYIP_MS_LINE_RE = re.compile(r"^#.+records - (.+)?")


def skip_cubot(user_agent: str) -> bool:
    """myip.ms lists CUBOT phones as crawlers."""
    return " CUBOT" in user_agent


@dataclass(frozen=True)
class FixtureSpec:
    name: str
    expect_bot: bool
    skip: Callable[[str], bool] | None = None


FIXTURES: dict[str, FixtureSpec] = {
    fixture.name: fixture
    for fixture in (
        FixtureSpec(MYIP_MS_BOTS, expect_bot=True, skip=skip_cubot),
        FixtureSpec(UA_PARSER_BOTS, expect_bot=True),
        FixtureSpec(UA_PARSER_BROWSERS, expect_bot=False),
        FixtureSpec(OMRILOTAN_BROWSERS, expect_bot=False),
    )
}


def _load_yaml_mapping(text: str, source: str) -> dict[Any, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise FixtureError(f"Could not parse YAML from {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise FixtureError(f"Invalid YAML from {source}: expected a mapping at the top level")
    return data


def parse_ua_parser(text: str) -> tuple[list[str], list[str]]:
    """
    Split ua-parser device test cases into ``(browsers, bots)``.

    ``Spider`` entries are bots. Remaining entries count as browsers unless the family is
    ``Other`` or the user-agent mentions ``spider`` or an ``http://`` link.
    """
    browsers: list[str] = []
    bots: list[str] = []
    for entries in _load_yaml_mapping(text, UA_PARSER_BROWSERS).values():
        if not isinstance(entries, list):
            raise FixtureError(f"Invalid YAML from {UA_PARSER_BROWSERS}: expected a list of test cases")
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            user_agent = str(entry.get("user_agent_string") or "")
            family = str(entry.get("family") or "")
            lowered = ascii_lower(user_agent)
            if family == "Spider":
                bots.append(user_agent)
            elif family != "Other" and "spider" not in lowered and "http://" not in lowered:
                browsers.append(user_agent)
    return browsers, bots


def parse_omrilotan(text: str) -> list[str]:
    """Flatten omrilotan's browser fixture groups into one list."""
    values: list[str] = []
    for group in _load_yaml_mapping(text, OMRILOTAN_BROWSERS).values():
        if not isinstance(group, list):
            raise FixtureError(f"Invalid YAML from {OMRILOTAN_BROWSERS}: expected lists of user-agents")
        for value in group:
            if not isinstance(value, str):
                raise FixtureError(f"Invalid YAML from {OMRILOTAN_BROWSERS}: {value!r} is not a string")
            values.append(value)
    return values


def parse_myip_ms(text: str) -> list[str]:
    """Extract user-agents from the ``# ... records - <user-agent>`` comment lines."""
    values = []
    for line in text.splitlines():
        match = _MYIP_MS_LINE_RE.match(line)
        if match and match.group(1) is not None:
            values.append(match.group(1))
    return values


def write_fixture(values: Iterable[str], name: str, directory: str | Path) -> Path:
    """Write sorted user-agents as pretty-printed JSON to ``<directory>/<name>.json``."""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"{name}.json"
    ordered = sorted(values)
    path.write_text(json.dumps(ordered, indent=2), encoding="utf-8")
    logger.info("[%-18s] saved %d user-agents to %s", name, len(ordered), path)
    return path


def fetch_text(client: HttpClient, url: str, *, retry_config: RetryConfig | None = None) -> str:
    response = send_with_retries(client, HttpRequest(url=url), retry_config=retry_config)
    if not response.ok:
        raise FixtureError(f"Download of {url} failed: {response.failure_reason()}")
    return response.text


def download_ua_parser(client: HttpClient, directory: str | Path) -> dict[str, Path]:
    logger.info("[%-18s] start download of YAML file", UA_PARSER_BROWSERS)
    browsers, bots = parse_ua_parser(fetch_text(client, UA_PARSER_BROWSERS_URL))
    return {
        UA_PARSER_BROWSERS: write_fixture(browsers, UA_PARSER_BROWSERS, directory),
        UA_PARSER_BOTS: write_fixture(bots, UA_PARSER_BOTS, directory),
    }


def download_omrilotan(client: HttpClient, directory: str | Path) -> dict[str, Path]:
    logger.info("[%-18s] start download of YAML file", OMRILOTAN_BROWSERS)
    values = parse_omrilotan(fetch_text(client, OMRILOTAN_BROWSERS_URL))
    return {OMRILOTAN_BROWSERS: write_fixture(values, OMRILOTAN_BROWSERS, directory)}


def download_myip_ms(client: HttpClient, directory: str | Path) -> dict[str, Path]:
    logger.info("[%-18s] start download of TEXT file", MYIP_MS_BOTS)
    values = parse_myip_ms(fetch_text(client, MYIP_MS_URL))
    return {MYIP_MS_BOTS: write_fixture(values, MYIP_MS_BOTS, directory)}


DOWNLOAD_TASKS: tuple[Callable[[HttpClient, str | Path], dict[str, Path]], ...] = (
    download_ua_parser,
    download_myip_ms,
    download_omrilotan,
)


def download_fixtures(
    directory: str | Path | None = None,
    *,
    client: HttpClient | None = None,
    settings: HttpSettings | None = None,
) -> dict[str, Path]:
    """
    Download every fixture source concurrently and return the written files by name.

    A failing source is logged and skipped; the others still complete.
    """
    target = Path(directory) if directory is not None else Path(load_settings().fixtures_dir)
    owns_client = client is None
    http_client = client or create_default_http_client(settings or load_http_settings())

    written: dict[str, Path] = {}
    try:
        with ThreadPoolExecutor(max_workers=len(DOWNLOAD_TASKS)) as executor:
            futures = {executor.submit(task, http_client, target): task.__name__ for task in DOWNLOAD_TASKS}
            for future, task_name in futures.items():
                try:
                    written.update(future.result())
                except (FixtureError, OSError) as exc:
                    logger.error("Fixture task %s failed: %s", task_name, exc)
    finally:
        if owns_client:
            http_client.close()
    return written


def load_fixture(path: str | Path) -> list[str]:
    """
    Read user-agents from a fixture file.

    ``.json`` files hold a JSON array of strings; anything else is read as one
    user-agent per line with blank lines skipped.
    """
    fixture_path = Path(path)
    try:
        text = fixture_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FixtureError(f"Unable to open file: {fixture_path}") from exc

    if fixture_path.suffix.lower() != ".json":
        return [line for line in text.splitlines() if line.strip()]

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FixtureError(f"Could not parse JSON from {fixture_path}: {exc}") from exc
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise FixtureError(f"Invalid fixture {fixture_path}: expected a JSON array of strings")
    return data


def verify_fixture(
    bots: BotMatcher,
    user_agents: Iterable[str],
    *,
    expect_bot: bool,
    skip: Callable[[str], bool] | None = None,
) -> list[str]:
    """Return the user-agents whose classification differs from ``expect_bot``."""
    mismatches = []
    for user_agent in user_agents:
        if skip is not None and skip(user_agent):
            continue
        if bots.is_bot(user_agent) != expect_bot:
            mismatches.append(user_agent)
    return mismatches


__all__ = [
    "DOWNLOAD_TASKS",
    "FIXTURES",
    "FixtureSpec",
    "download_fixtures",
    "download_myip_ms",
    "download_omrilotan",
    "download_ua_parser",
    "fetch_text",
    "load_fixture",
    "parse_myip_ms",
    "parse_omrilotan",
    "parse_ua_parser",
    "skip_cubot",
    "verify_fixture",
    "write_fixture",
]
