"""Shared fixtures for the Table Scanner test suite.

Images are generated with Pillow, the credential file lives in a temporary
directory, and HTTP calls are replaced with canned responses.
"""

from __future__ import annotations

import json
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from tablescan.config import AppConfig, GeminiConfig, StorageConfig
from tablescan.controller import ConversionController
from tablescan.errors import ExportError
from tablescan.export.excel import ExcelExporter
from tablescan.models.table import Table
from tablescan.storage.credentials import CredentialStore


def make_image_bytes(fmt: str = "JPEG", size: tuple[int, int] = (10, 3)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color="white").save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A valid 10x3 JPEG."""
    return make_image_bytes("JPEG", (10, 3))


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG", (4, 4))


@pytest.fixture
def credentials_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "credentials.env"


@pytest.fixture
def app_config(credentials_path: Path) -> AppConfig:
    return AppConfig(
        gemini=GeminiConfig(base_url="https://gemini.test/v1beta", model="gemini-test"),
        storage=StorageConfig(credentials_file=credentials_path),
    )


@pytest.fixture
def credential_store(app_config: AppConfig) -> CredentialStore:
    return CredentialStore(config=app_config.storage)


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload=None, text: str | None = None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


def gemini_reply(rows) -> dict:
    """A generateContent body whose first candidate holds the given rows."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": json.dumps(rows)}]},
                "finishReason": "STOP",
            }
        ]
    }


def gemini_error(message: str, code: int = 400, reason: str | None = None) -> dict:
    error = {"code": code, "message": message, "status": "INVALID_ARGUMENT"}
    if reason:
        error["details"] = [
            {"@type": "type.googleapis.com/google.rpc.ErrorInfo", "reason": reason}
        ]
    return {"error": error}


class RecordingPost:
    """Replacement for requests.post that records calls and returns a canned reply."""

    def __init__(self, response=None, exc: Exception | None = None):
        self.response = response
        self.exc = exc
        self.calls = []

    def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def fake_post(monkeypatch):
    """Install a RecordingPost; call it with a response or exception to configure."""

    def install(response=None, exc: Exception | None = None) -> RecordingPost:
        post = RecordingPost(response, exc)
        monkeypatch.setattr("tablescan.llm.client.requests.post", post)
        return post

    return install


class FakeClient:
    """Extraction client double for controller tests."""

    def __init__(self, table: Table | None = None, exc: Exception | None = None):
        self.table = table
        self.exc = exc
        self.calls = []

    def extract(self, payload, api_key):
        self.calls.append((payload, api_key))
        if self.exc is not None:
            raise self.exc
        return self.table


class FailingExporter(ExcelExporter):
    def export(self, table, filename):
        raise ExportError("disk on fire")


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient(table=Table.from_rows([["Name", "Qty", "Price"], ["Bolt", "5", "2.50"]]))


@pytest.fixture
def controller(credential_store, fake_client, app_config) -> ConversionController:
    ctrl = ConversionController(
        store=credential_store,
        client=fake_client,
        exporter=ExcelExporter(),
        config=app_config,
    )
    ctrl.start()
    return ctrl
