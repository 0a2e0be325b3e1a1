"""
INI config file loading.

Layout::

    [gcal-bulk]
    calendar_id = primary
    time_zone = Europe/Berlin

    [color-rule gym]
    match_type = contains
    pattern = Gym
    color_id = 5

    [delete-rule cancelled]
    match_type = regex
    pattern = ^cancel

Rules are applied in the order their sections appear in the file.
"""

import logging
from configparser import ConfigParser
from configparser import Error as ConfigParserError
from pathlib import Path
from zoneinfo import ZoneInfo
from zoneinfo import ZoneInfoNotFoundError

from gcal_bulk.matching import validate_rules
from gcal_bulk.models import DEFAULT_CALENDAR_ID
from gcal_bulk.models import DEFAULT_CLIENT_SECRETS
from gcal_bulk.models import DEFAULT_TOKEN_FILE
from gcal_bulk.models import BulkConfig
from gcal_bulk.models import ConfigError
from gcal_bulk.models import Rule

logger = logging.getLogger(__name__)

MAIN_SECTION = "gcal-bulk"
COLOR_RULE_PREFIX = "color-rule"
DELETE_RULE_PREFIX = "delete-rule"


def _read_parser(config_path: Path) -> ConfigParser:
    # Regex patterns may contain '%', so no interpolation.
    parser = ConfigParser(interpolation=None)
    if not config_path.exists():
        return parser
    try:
        parser.read(config_path, encoding="utf-8")
    except ConfigParserError as e:
        raise ConfigError(f"Cannot parse {config_path}: {e}") from e
    return parser


def _rules_from_sections(parser: ConfigParser, prefix: str) -> list[Rule]:
    rules = []
    for section in parser.sections():
        head, _, name = section.partition(" ")
        if head != prefix:
            continue
        values = parser[section]
        if "pattern" not in values:
            raise ConfigError(f"[{section}] is missing 'pattern'")
        rules.append(
            Rule(
                match_type=values.get("match_type", "contains"),
                pattern=values["pattern"],
                color_id=values.get("color_id") or None,
                name=name.strip(),
            )
        )
    return rules


def _expand(value: str | None, default: Path) -> Path:
    return Path(value).expanduser() if value else default


def validate_time_zone(name: str | None) -> None:
    if not name:
        return
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown time zone: {name!r}") from e


def load_config(
    config_path: Path,
    calendar_id: str | None = None,
    verbose: bool = False,
) -> BulkConfig:
    """Read the config file and validate it; ``calendar_id`` overrides the file."""
    parser = _read_parser(config_path)
    main = dict(parser[MAIN_SECTION]) if MAIN_SECTION in parser else {}

    try:
        lenient = parser.getboolean(MAIN_SECTION, "lenient_match_types", fallback=False)
    except ValueError as e:
        raise ConfigError(f"Invalid lenient_match_types: {e}") from e

    cfg = BulkConfig(
        calendar_id=calendar_id or main.get("calendar_id") or DEFAULT_CALENDAR_ID,
        time_zone=main.get("time_zone") or None,
        color_rules=_rules_from_sections(parser, COLOR_RULE_PREFIX),
        delete_rules=_rules_from_sections(parser, DELETE_RULE_PREFIX),
        client_secrets=_expand(main.get("client_secrets"), DEFAULT_CLIENT_SECRETS),
        token_file=_expand(main.get("token_file"), DEFAULT_TOKEN_FILE),
        client_id=main.get("client_id") or None,
        client_secret=main.get("client_secret") or None,
        lenient_match_types=lenient,
        verbose=verbose,
    )

    validate_time_zone(cfg.time_zone)
    validate_rules(cfg.color_rules, require_color=True, strict_types=not lenient)
    validate_rules(cfg.delete_rules, strict_types=not lenient)

    logger.debug(
        "Loaded %d color rule(s) and %d delete rule(s) from %s",
        len(cfg.color_rules),
        len(cfg.delete_rules),
        config_path,
    )
    return cfg
