"""
Tests for INI config loading in gcal_bulk.config.
"""

from pathlib import Path

import pytest

from gcal_bulk.config import load_config
from gcal_bulk.models import DEFAULT_CALENDAR_ID
from gcal_bulk.models import ConfigError
from gcal_bulk.models import MatchType


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "gcal-bulk.conf"
    path.write_text(text, encoding="utf-8")
    return path


FULL_CONFIG = """\
[gcal-bulk]
calendar_id = team@example.com
time_zone = Europe/Berlin
token_file = ~/tokens/gcal.json

[color-rule gym]
match_type = contains
pattern = Gym
color_id = 5

[delete-rule cancelled]
match_type = Regex
pattern = ^cancel(l)?ed

[color-rule standup]
match_type = equals
pattern = Standup
color_id = 9

[delete-rule percent]
match_type = contains
pattern = 100% off
"""


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "absent.conf")
    assert cfg.calendar_id == DEFAULT_CALENDAR_ID
    assert cfg.time_zone is None
    assert cfg.color_rules == []
    assert cfg.delete_rules == []


def test_rules_keep_file_order(tmp_path):
    cfg = load_config(_write(tmp_path, FULL_CONFIG))

    assert [r.name for r in cfg.color_rules] == ["gym", "standup"]
    assert [r.color_id for r in cfg.color_rules] == ["5", "9"]
    assert [r.name for r in cfg.delete_rules] == ["cancelled", "percent"]
    assert cfg.delete_rules[0].kind is MatchType.REGEX
    assert cfg.delete_rules[1].pattern == "100% off"


def test_main_section_values(tmp_path):
    cfg = load_config(_write(tmp_path, FULL_CONFIG))
    assert cfg.calendar_id == "team@example.com"
    assert cfg.time_zone == "Europe/Berlin"
    assert cfg.token_file == Path("~/tokens/gcal.json").expanduser()


def test_calendar_override(tmp_path):
    cfg = load_config(_write(tmp_path, FULL_CONFIG), calendar_id="other")
    assert cfg.calendar_id == "other"


def test_unknown_match_type_rejected(tmp_path):
    path = _write(tmp_path, "[color-rule x]\nmatch_type = startswith\npattern = A\ncolor_id = 1\n")
    with pytest.raises(ConfigError, match="unknown match_type"):
        load_config(path)


def test_unknown_match_type_allowed_when_lenient(tmp_path):
    path = _write(
        tmp_path,
        "[gcal-bulk]\nlenient_match_types = true\n\n"
        "[color-rule x]\nmatch_type = startswith\npattern = A\ncolor_id = 1\n",
    )
    cfg = load_config(path)
    assert cfg.lenient_match_types
    assert cfg.color_rules[0].kind is None


def test_invalid_regex_rejected(tmp_path):
    path = _write(tmp_path, "[delete-rule bad]\nmatch_type = regex\npattern = (oops\n")
    with pytest.raises(ConfigError, match="invalid regex"):
        load_config(path)


def test_missing_pattern_rejected(tmp_path):
    path = _write(tmp_path, "[delete-rule bad]\nmatch_type = equals\n")
    with pytest.raises(ConfigError, match="pattern"):
        load_config(path)


def test_unknown_time_zone_rejected(tmp_path):
    path = _write(tmp_path, "[gcal-bulk]\ntime_zone = Mars/Olympus_Mons\n")
    with pytest.raises(ConfigError, match="time zone"):
        load_config(path)


def test_lenient_flag_accepts_configparser_booleans(tmp_path):
    path = _write(tmp_path, "[gcal-bulk]\nlenient_match_types = yes\n")
    assert load_config(path).lenient_match_types


def test_invalid_lenient_flag_rejected(tmp_path):
    path = _write(tmp_path, "[gcal-bulk]\nlenient_match_types = maybe\n")
    with pytest.raises(ConfigError, match="lenient_match_types"):
        load_config(path)
