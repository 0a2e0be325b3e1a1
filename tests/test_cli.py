"""
CLI tests via typer's CliRunner, with the Google store replaced by FakeCalendarStore.
"""

from datetime import datetime
from datetime import timezone
from zoneinfo import ZoneInfo

import pytest
from typer.testing import CliRunner

from gcal_bulk import cli
from gcal_bulk.models import ConfigError
from tests.conftest import make_timed_event
from tests.fake_store import FakeCalendarStore

runner = CliRunner()

CONFIG = """\
[gcal-bulk]
calendar_id = test-calendar
time_zone = UTC

[color-rule gym]
match_type = contains
pattern = Gym
color_id = 5

[delete-rule cancelled]
match_type = equals
pattern = Cancelled
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "gcal-bulk.conf"
    path.write_text(CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def fake_store(monkeypatch):
    store = FakeCalendarStore(
        [
            make_timed_event("Morning Gym", "2025-09-02T07:00:00Z", "2025-09-02T08:00:00Z"),
            make_timed_event("Cancelled", "2025-09-03T07:00:00Z", "2025-09-03T08:00:00Z"),
        ]
    )
    monkeypatch.setattr(cli, "_connect", lambda cfg: store)
    return store


def _invoke(config_path, *args):
    return runner.invoke(cli.app, ["--config", str(config_path), *args])


class TestParseWhen:
    def test_naive_date_uses_time_zone(self):
        parsed = cli.parse_when("2025-09-01", "Europe/Berlin")
        assert parsed == datetime(2025, 9, 1, tzinfo=ZoneInfo("Europe/Berlin"))

    def test_aware_value_kept(self):
        parsed = cli.parse_when("2025-09-01T09:00:00Z", "Europe/Berlin")
        assert parsed == datetime(2025, 9, 1, 9, tzinfo=timezone.utc)

    def test_naive_without_zone_is_local_aware(self):
        assert cli.parse_when("2025-09-01T09:00").tzinfo is not None

    def test_invalid(self):
        with pytest.raises(ConfigError):
            cli.parse_when("next tuesday")


class TestRunValidation:
    def test_delete_and_copy_to_are_exclusive(self, config_path, fake_store):
        result = _invoke(
            config_path, "run", "2025-09-01", "2025-09-08", "--delete", "--copy-to", "2025-09-08"
        )
        assert result.exit_code == 1
        assert "together" in result.output
        assert fake_store.calls == []

    def test_invalid_date(self, config_path, fake_store):
        result = _invoke(config_path, "run", "2025-13-01", "2025-09-08")
        assert result.exit_code == 1
        assert fake_store.calls == []

    def test_end_before_start(self, config_path, fake_store):
        result = _invoke(config_path, "run", "2025-09-08", "2025-09-01")
        assert result.exit_code == 1

    def test_copy_to_window_start_never_connects(self, config_path, monkeypatch):
        connected = []
        monkeypatch.setattr(cli, "_connect", lambda cfg: connected.append(cfg))
        result = _invoke(
            config_path, "run", "2025-09-01", "2025-09-08", "--copy-to", "2025-09-01"
        )
        assert result.exit_code == 0, result.output
        assert "nothing to shift" in result.output
        assert connected == []

    def test_bad_config_exits_1(self, tmp_path, fake_store):
        path = tmp_path / "bad.conf"
        path.write_text("[delete-rule x]\nmatch_type = regex\npattern = (\n", encoding="utf-8")
        result = _invoke(path, "run", "2025-09-01", "2025-09-08", "--delete")
        assert result.exit_code == 1
        assert fake_store.calls == []


class TestRunModes:
    def test_recolor_by_default(self, config_path, fake_store):
        result = _invoke(config_path, "run", "2025-09-01", "2025-09-08")
        assert result.exit_code == 0, result.output
        assert len(fake_store.updates) == 1
        assert fake_store.deletes == []

    def test_delete(self, config_path, fake_store):
        result = _invoke(config_path, "run", "2025-09-01", "2025-09-08", "--delete")
        assert result.exit_code == 0, result.output
        assert len(fake_store.deletes) == 1
        assert fake_store.updates == []

    def test_copy_accepts_camel_case_flag(self, config_path, fake_store):
        result = _invoke(config_path, "run", "2025-09-01", "2025-09-08", "--copyTo", "2025-09-08")
        assert result.exit_code == 0, result.output
        assert len(fake_store.inserts) == 2

    def test_zero_effects_is_success(self, config_path, fake_store):
        result = _invoke(config_path, "run", "2025-10-01", "2025-10-08", "--delete")
        assert result.exit_code == 0, result.output
        assert fake_store.deletes == []

    def test_store_failure_exits_1(self, config_path, fake_store):
        fake_store.fail_on = {"update": 1}
        result = _invoke(config_path, "run", "2025-09-01", "2025-09-08")
        assert result.exit_code == 1
        assert "aborted" in result.output


def test_rules_command_lists_rules(config_path):
    result = _invoke(config_path, "rules")
    assert result.exit_code == 0, result.output
    assert "Gym" in result.output
    assert "Cancelled" in result.output
