"""
Shared fixtures for the photo map tests.

Every test gets its own data directory under tmp_path, the default PIN and no
failed-login delay.
"""

import io
import os
import struct
import zlib

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from logic import config

TEST_PIN = "1234"


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point all data paths at a temporary directory."""
    monkeypatch.setattr(config, "DATA_DIR", str(tmp_path))
    monkeypatch.setattr(config, "UPLOADS_DIR", os.path.join(str(tmp_path), "uploads"))
    monkeypatch.setattr(config, "MARKERS_FILE", os.path.join(str(tmp_path), "markers.json"))
    monkeypatch.setattr(config, "SESSIONS_FILE", os.path.join(str(tmp_path), "sessions.json"))
    monkeypatch.setattr(config, "ADMIN_PIN", TEST_PIN)
    monkeypatch.setattr(config, "LOGIN_FAILURE_DELAY", 0)
    return tmp_path


@pytest.fixture
def client(data_dir):
    """Test client running the application lifespan against data_dir."""
    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Authorization headers for a freshly logged in session."""
    response = client.post("/api/auth", json={"pin": TEST_PIN})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


def make_image(fmt: str = "PNG", size=(8, 6), color=(200, 30, 30)) -> bytes:
    """Render a small real image in memory."""
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


def make_oversized_png(width: int = 20000, height: int = 20000) -> bytes:
    """Build a tiny PNG whose header declares a huge canvas and carries no pixel data."""
    def chunk(kind: bytes, body: bytes) -> bytes:
        crc = zlib.crc32(kind + body) & 0xFFFFFFFF
        return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b"")
