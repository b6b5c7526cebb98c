# tests/test_config.py
from __future__ import annotations

import pytest

from vpm.services.gateways import SettingsIdentity
from vpm.utils.config import load_settings, save_settings
from vpm.utils.timeutil import format_date, parse_when


def test_settings_defaults_and_roundtrip(tmp_path):
    path = tmp_path / "settings.json"
    settings = load_settings(path)
    assert settings["ui"]["last_viewed_project"] is None

    settings["identity"]["email"] = "me@x.com"
    save_settings(settings, path)

    assert load_settings(path)["identity"]["email"] == "me@x.com"
    assert load_settings(path)["ui"]["last_viewed_project"] is None


def test_corrupt_settings_fall_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(path)["identity"]["email"] == ""


@pytest.mark.parametrize("raw", ['{"ui": null}', '{"ui": "x", "identity": []}', "[1, 2]"])
def test_malformed_settings_sections_keep_defaults(tmp_path, raw):
    path = tmp_path / "settings.json"
    path.write_text(raw, encoding="utf-8")
    settings = load_settings(path)
    assert settings["ui"]["last_viewed_project"] is None
    assert settings["identity"]["email"] == ""


def test_settings_identity_env_wins(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    save_settings({"identity": {"email": "file@x.com"}}, path)
    ident = SettingsIdentity(lambda: load_settings(path))

    monkeypatch.delenv("VPM_USER_EMAIL", raising=False)
    assert ident.current_email() == "file@x.com"
    monkeypatch.setenv("VPM_USER_EMAIL", "env@x.com")
    assert ident.current_email() == "env@x.com"


@pytest.mark.parametrize(
    "value,expected",
    [(None, "No date"), ("", "No date"), ("garbage", "Invalid date"), ("2025-03-07", "Mar 07, 2025")],
)
def test_format_date(value, expected):
    assert format_date(value) == expected


def test_parse_when_date_only_is_utc_midnight():
    dt = parse_when("2020-01-01")
    assert dt.isoformat() == "2020-01-01T00:00:00+00:00"
