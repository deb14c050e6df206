import io
import json

import pytest

from dockcompose.scan_suggest import (
    SCAN_SUGGEST_MSG,
    display_scan_suggest_msg,
    docker_config_dir,
    scan_already_invoked,
)


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv("DOCKER_SCAN_SUGGEST", raising=False)


def _write_scan_config(base, content):
    scan_dir = base / "scan"
    scan_dir.mkdir(parents=True, exist_ok=True)
    (scan_dir / "config.json").write_text(content)


def test_docker_config_dir_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCKER_CONFIG", str(tmp_path))
    assert docker_config_dir() == tmp_path


def test_docker_config_dir_default(monkeypatch, tmp_path):
    monkeypatch.delenv("DOCKER_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert docker_config_dir().name == ".docker"


def test_not_invoked_without_file(tmp_path):
    assert scan_already_invoked(tmp_path) is False


def test_invoked_when_opted_in(tmp_path):
    _write_scan_config(tmp_path, json.dumps({"optin": True}))
    assert scan_already_invoked(tmp_path) is True


def test_not_invoked_when_opted_out(tmp_path):
    _write_scan_config(tmp_path, json.dumps({"optin": False}))
    assert scan_already_invoked(tmp_path) is False


def test_invalid_json_counts_as_invoked(tmp_path):
    _write_scan_config(tmp_path, "{not json")
    assert scan_already_invoked(tmp_path) is True


def test_directory_counts_as_invoked(tmp_path):
    (tmp_path / "scan" / "config.json").mkdir(parents=True)
    assert scan_already_invoked(tmp_path) is True


def test_display_writes_message(tmp_path):
    out = io.StringIO()
    assert display_scan_suggest_msg(out, tmp_path, lambda: True) is True
    assert out.getvalue() == "\n" + SCAN_SUGGEST_MSG + "\n"


def test_display_skipped_when_disabled_by_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCKER_SCAN_SUGGEST", "false")
    out = io.StringIO()
    assert display_scan_suggest_msg(out, tmp_path, lambda: True) is False
    assert out.getvalue() == ""


def test_display_skipped_when_unavailable(tmp_path):
    out = io.StringIO()
    assert display_scan_suggest_msg(out, tmp_path, lambda: False) is False
    assert out.getvalue() == ""


def test_display_skipped_when_already_invoked(tmp_path):
    _write_scan_config(tmp_path, json.dumps({"optin": True}))
    out = io.StringIO()
    assert display_scan_suggest_msg(out, tmp_path, lambda: True) is False
    assert out.getvalue() == ""