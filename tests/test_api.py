import httpx
import pytest
from fastapi.testclient import TestClient

from app.api import watermark as watermark_api
from app.main import app
from app.services.fetch_service import RemoteImageFetcher
from app.utils.data_url import to_inline

from .conftest import make_image


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def mock_remote(monkeypatch):
    def install(handler):
        fetcher = RemoteImageFetcher(
            watermark_api.watermark_service.settings,
            transport=httpx.MockTransport(handler),
        )
        monkeypatch.setattr(watermark_api.watermark_service, "fetcher", fetcher)

    return install


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_inline_endpoint(client, png_bytes):
    resp = client.post(
        "/image/watermark/inline",
        json={"image": to_inline(png_bytes, "image/png"), "options": {"position": "top-left"}},
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["status"] == "ok"
    assert body["image"].startswith("data:image/png;base64,")


def test_inline_endpoint_falls_back_on_garbage(client):
    garbage = to_inline(b"not an image", "image/png")

    resp = client.post("/image/watermark/inline", json={"image": garbage})

    assert resp.status_code == 200
    assert resp.json()["image"] == garbage


def test_remote_endpoint(client, mock_remote):
    jpeg = make_image("JPEG")
    mock_remote(lambda request: httpx.Response(200, content=jpeg, headers={"content-type": "image/jpeg"}))

    resp = client.post("/image/watermark/remote", json={"url": "https://cdn.example.com/a.jpg"})

    assert resp.status_code == 200, resp.text
    assert resp.json()["image"].startswith("data:image/jpeg;base64,")


def test_remote_endpoint_fetch_failure(client, mock_remote):
    mock_remote(lambda request: httpx.Response(500))

    resp = client.post("/image/watermark/remote", json={"url": "https://cdn.example.com/a.jpg"})

    assert resp.status_code == 502


def test_upload_endpoint(client, jpeg_bytes):
    resp = client.post(
        "/image/watermark/upload",
        files={"file": ("photo.jpg", jpeg_bytes, "image/jpeg")},
        data={"anchor": "bottom-right", "opacity": "0.8"},
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["image"].startswith("data:image/jpeg;base64,")


def test_upload_endpoint_rejects_non_images(client):
    resp = client.post(
        "/image/watermark/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )

    assert resp.status_code == 400


def test_upload_endpoint_returns_original_on_decode_failure(client):
    resp = client.post(
        "/image/watermark/upload",
        files={"file": ("broken.png", b"hello", "image/png")},
    )

    assert resp.status_code == 200
    assert resp.json()["image"] == to_inline(b"hello", "image/png")


@pytest.mark.parametrize("plan_id,expected", [("free", True), ("pro", False)])
def test_eligibility(client, plan_id, expected):
    resp = client.get(f"/image/watermark/eligibility/{plan_id}")

    assert resp.status_code == 200
    assert resp.json() == {"plan_id": plan_id, "apply_watermark": expected}


def test_inline_endpoint_accepts_fractional_font_size(client, png_bytes):
    resp = client.post(
        "/image/watermark/inline",
        json={"image": to_inline(png_bytes, "image/png"), "options": {"font_size": 40.5}},
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["image"].startswith("data:image/png;base64,")
