"""
Tests for the page, client configuration and health endpoints.

Run with: python -m pytest tests/test_routes.py
"""

from logic import config


def test_index_page(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "map-app.js" in response.text


def test_static_assets(client):
    assert client.get("/static/js/map-app.js").status_code == 200
    assert client.get("/static/css/style.css").status_code == 200


def test_client_config(client, monkeypatch):
    monkeypatch.setattr(config, "MAX_PHOTOS_PER_MARKER", 3)

    data = client.get("/api/config").json()

    assert data["map"] == {"lat": config.DEFAULT_LAT, "lng": config.DEFAULT_LNG, "zoom": config.DEFAULT_ZOOM}
    assert data["uploads"]["max_photos"] == 3
    assert data["uploads"]["allowed_extensions"] == config.ALLOWED_EXTENSIONS
    assert "ADMIN_PIN" not in str(data)


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_startup_creates_data_files(client, data_dir):
    assert (data_dir / "uploads").is_dir()
    assert (data_dir / "markers.json").is_file()
    assert (data_dir / "sessions.json").is_file()
