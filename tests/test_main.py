"""
Tests for configuration and the command-line entry point.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from pointclaim.config import ClaimerConfig, ConfigurationError
from pointclaim.lock import RunLock
from pointclaim.main import build_config, main, parse_args


def test_default_config_is_valid_with_cookie():
    config = ClaimerConfig(cookie="sid=1", delay_min=3, delay_max=5, error_delay=3,
                           retry_delay=3, max_retry=3, request_timeout_s=30)
    assert config.validate() == []


def test_validate_reports_every_problem():
    config = ClaimerConfig(cookie="", delay_min=6, delay_max=5, error_delay=-1,
                           retry_delay=0, max_retry=0, request_timeout_s=0)
    errors = config.validate()

    assert "COOKIE not set" in errors
    assert any("delay_max" in e for e in errors)
    assert any("error_delay" in e for e in errors)
    assert any("max_retry" in e for e in errors)
    assert any("request_timeout_s" in e for e in errors)
    assert not any("retry_delay" in e for e in errors)

    with pytest.raises(ConfigurationError):
        config.require_valid()


def test_cli_overrides_environment():
    args = parse_args(["--usernames", "a.txt", "--used", "b.txt", "--cookie", "c",
                       "--min-delay", "1", "--max-delay", "2", "--max-retry", "5"])
    config = build_config(args)

    assert config.usernames_path == "a.txt"
    assert config.used_path == "b.txt"
    assert config.cookie == "c"
    assert (config.delay_min, config.delay_max, config.max_retry) == (1, 2, 5)


def test_main_empty_list_exits_zero(tmp_path, monkeypatch, capsys):
    """No usernames is reported but is not a crash."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "usernames.txt").write_text("\n\n", encoding="utf-8")

    code = main(["--usernames", "usernames.txt", "--used", "used.txt", "--cookie", "sid=1",
                 "--min-delay", "0", "--max-delay", "0", "--no-color"])

    out = capsys.readouterr().out
    assert code == 0
    assert "ERROR: No usernames found in usernames.txt" in out
    assert "SUMMARY: 0 processed | 0 success | 0 failed | 0 skipped" in out


def test_main_invalid_config_exits_one(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    assert main(["--cookie", "", "--no-color"]) == 1


def test_main_fatal_error_exits_one(tmp_path, monkeypatch, capsys):
    """Errors outside the claim loop abort the run."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "usernames.txt").mkdir()

    code = main(["--usernames", "usernames.txt", "--cookie", "sid=1",
                 "--min-delay", "0", "--max-delay", "0", "--no-color"])

    assert code == 1
    assert "FATAL ERROR:" in capsys.readouterr().out


def test_main_refuses_second_instance(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "usernames.txt").write_text("alice", encoding="utf-8")

    held = RunLock("data/claimer.lock")
    assert held.acquire()
    try:
        code = main(["--usernames", "usernames.txt", "--cookie", "sid=1",
                     "--min-delay", "0", "--max-delay", "0", "--no-color"])
    finally:
        held.release()

    assert code == 1
    assert "FATAL ERROR: Another instance holds data/claimer.lock" in capsys.readouterr().out
