from __future__ import annotations

from pathlib import Path

import requests

from conftest import FakeResponse
from tablescan.config import AppConfig, GeminiConfig, StorageConfig, get_config, update_config


def test_defaults():
    config = AppConfig()
    assert config.accepted_mime_types == ("image/jpeg", "image/png", "image/jpg")
    assert config.export_filename == "zzmotors_extracted_data.xlsx"
    assert config.storage.credential_key == "GEMINI_API_KEY"
    assert config.max_file_size_bytes == 20 * 1024 * 1024


def test_environment_overrides(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("TABLESCAN_CREDENTIALS_FILE", str(tmp_path / "key.env"))
    monkeypatch.setenv("GEMINI_MODEL", "gemini-custom")
    monkeypatch.setenv("GEMINI_BASE_URL", "https://example.test/v1")

    assert StorageConfig().credentials_file == tmp_path / "key.env"
    gemini = GeminiConfig()
    assert gemini.model == "gemini-custom"
    assert gemini.base_url == "https://example.test/v1"


def test_validate_connection_ok(monkeypatch):
    calls = []

    def fake_get(url, headers, timeout):
        calls.append((url, headers))
        return FakeResponse(200, {"models": [{"name": "models/gemini-2.5-flash"}]})

    monkeypatch.setattr(requests, "get", fake_get)

    ok, message = GeminiConfig.validate_connection("abc123", "https://gemini.test/v1beta/")
    assert ok
    assert "gemini-2.5-flash" in message
    assert calls[0] == ("https://gemini.test/v1beta/models", {"x-goog-api-key": "abc123"})


def test_validate_connection_rejected_key(monkeypatch):
    monkeypatch.setattr(
        requests, "get", lambda url, headers, timeout: FakeResponse(400, None, text="API key not valid")
    )
    ok, message = GeminiConfig.validate_connection("bad")
    assert not ok
    assert "400" in message


def test_validate_connection_unreachable(monkeypatch):
    def refuse(url, headers, timeout):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(requests, "get", refuse)
    ok, message = GeminiConfig.validate_connection("abc123")
    assert not ok
    assert "Cannot connect" in message


def test_update_config_sets_known_attributes(monkeypatch):
    monkeypatch.setattr("tablescan.config._config", None)

    config = update_config(export_filename="custom.xlsx", max_file_size_mb=5, unknown=1)

    assert config is get_config()
    assert config.export_filename == "custom.xlsx"
    assert config.max_file_size_bytes == 5 * 1024 * 1024
    assert not hasattr(config, "unknown")
