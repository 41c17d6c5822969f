"""Integration tests for the /img file endpoints."""

import base64
import io
from pathlib import Path

from fastapi.testclient import TestClient
from PIL import Image

from fileserve.infrastructure.api.dependencies import get_app_settings


def image_size(data: bytes) -> tuple[int, int]:
    return Image.open(io.BytesIO(data)).size


class TestRawFile:
    def test_get_file(self, client: TestClient, storage_root: Path):
        response = client.get("/img/photo.png")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["content-disposition"] == 'inline; filename="photo.png"'
        assert response.headers["cache-control"] == "public, max-age=3600"
        assert response.content == (storage_root / "photo.png").read_bytes()

    def test_extension_auto_detected(self, client: TestClient):
        response = client.get("/img/sub/deep")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"
        assert response.headers["content-disposition"] == 'inline; filename="deep.jpg"'

    def test_not_found(self, client: TestClient):
        response = client.get("/img/missing.png")

        assert response.status_code == 404
        assert response.json() == {"detail": "File not found"}

    def test_traversal_is_not_found(self, client: TestClient):
        response = client.get("/img/sub/..%2F..%2Fsecret.txt")

        assert response.status_code == 404

    def test_nul_byte_is_not_found(self, client: TestClient):
        assert client.get("/img/photo%00.png").status_code == 404
        assert client.get("/img/photo%00.png/metadata").status_code == 404
        assert client.get("/img/thumbnail/photo%00").status_code == 404

    def test_trailing_slash_does_not_match_dotfile(self, client: TestClient, storage_root: Path):
        (storage_root / "sub" / ".jpg").write_bytes(b"dotfile")

        response = client.get("/img/sub/")

        assert response.status_code == 404

    def test_non_ascii_file_name(self, client: TestClient, storage_root: Path):
        (storage_root / "café.txt").write_bytes(b"au lait")

        response = client.get("/img/café.txt")

        assert response.status_code == 200
        assert response.headers["content-disposition"] == "inline; filename*=utf-8''caf%C3%A9.txt"

    def test_caching_disabled(self, app, client: TestClient, settings):
        app.dependency_overrides[get_app_settings] = lambda: settings.model_copy(
            update={"enable_response_caching": False}
        )

        response = client.get("/img/photo.png")

        assert response.status_code == 200
        assert "cache-control" not in response.headers

    def test_read_failure_is_500(self, client: TestClient, monkeypatch):
        def fail(self):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "read_bytes", fail)

        response = client.get("/img/notes.txt")

        assert response.status_code == 500
        assert response.json() == {"detail": "An error occurred while retrieving the file"}


class TestBase64:
    def test_get_base64(self, client: TestClient, storage_root: Path):
        response = client.get("/img/base64/photo")

        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, max-age=3600"
        data = response.json()
        assert data["fileName"] == "photo.png"
        assert data["contentType"] == "image/png"
        assert base64.b64decode(data["base64Data"]) == (storage_root / "photo.png").read_bytes()

    def test_not_found(self, client: TestClient):
        assert client.get("/img/base64/missing.png").status_code == 404


class TestThumbnail:
    def test_thumbnail(self, client: TestClient):
        response = client.get("/img/thumbnail/photo.png")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert image_size(response.content) == (150, 75)

    def test_thumbnail_of_pdf_is_original(self, client: TestClient, storage_root: Path):
        response = client.get("/img/thumbnail/doc.pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content == (storage_root / "doc.pdf").read_bytes()

    def test_thumbnail_of_corrupt_image_is_original(self, client: TestClient):
        response = client.get("/img/thumbnail/broken.png")

        assert response.status_code == 200
        assert response.content == b"this is not a png"

    def test_thumbnail_base64(self, client: TestClient):
        response = client.get("/img/thumbnail/base64/landscape")

        assert response.status_code == 200
        data = response.json()
        assert data["fileName"] == "landscape.jpg"
        assert image_size(base64.b64decode(data["base64Data"])) == (150, 84)

    def test_thumbnail_not_found(self, client: TestClient):
        assert client.get("/img/thumbnail/missing.png").status_code == 404


class TestMobile:
    def test_mobile_defaults(self, client: TestClient):
        response = client.get("/img/mobile/landscape.jpg")

        assert response.status_code == 200
        assert image_size(response.content) == (800, 450)

    def test_mobile_overrides(self, client: TestClient):
        response = client.get("/img/mobile/landscape.jpg", params={"maxWidth": 100, "quality": 50})

        assert response.status_code == 200
        assert image_size(response.content) == (100, 56)

    def test_invalid_quality(self, client: TestClient):
        response = client.get("/img/mobile/landscape.jpg", params={"quality": 0})

        assert response.status_code == 400
        assert response.json() == {"detail": "Quality must be between 1 and 100"}

    def test_non_integer_quality_is_rejected_by_validation(self, client: TestClient):
        response = client.get("/img/mobile/landscape.jpg", params={"quality": "abc"})

        assert response.status_code == 422

    def test_invalid_quality_on_missing_file(self, client: TestClient):
        response = client.get("/img/mobile/missing.jpg", params={"quality": 101})

        assert response.status_code == 400

    def test_invalid_width(self, client: TestClient):
        response = client.get("/img/mobile/base64/landscape.jpg", params={"maxWidth": 0})

        assert response.status_code == 400

    def test_mobile_base64(self, client: TestClient):
        response = client.get("/img/mobile/base64/landscape.jpg", params={"maxHeight": 90})

        assert response.status_code == 200
        assert image_size(base64.b64decode(response.json()["base64Data"])) == (160, 90)


class TestMetadata:
    def test_metadata(self, client: TestClient):
        response = client.get("/img/notes.txt/metadata")

        assert response.status_code == 200
        data = response.json()
        assert data["fileName"] == "notes.txt"
        assert data["fileSize"] == 5
        assert data["contentType"] == "text/plain"
        assert "createdAt" in data
        assert "modifiedAt" in data

    def test_metadata_nested_with_detection(self, client: TestClient):
        response = client.get("/img/sub/deep/metadata")

        assert response.status_code == 200
        assert response.json()["fileName"] == "sub/deep.jpg"

    def test_metadata_not_found(self, client: TestClient):
        assert client.get("/img/missing.png/metadata").status_code == 404


class TestMiddleware:
    def test_security_headers(self, client: TestClient):
        response = client.get("/img/photo.png")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Content-Security-Policy" in response.headers
        assert "Strict-Transport-Security" not in response.headers

    def test_correlation_id_generated(self, client: TestClient):
        response = client.get("/img/photo.png")

        assert response.headers["X-Correlation-ID"].startswith("cid_")

    def test_correlation_id_echoed(self, client: TestClient):
        response = client.get("/img/photo.png", headers={"X-Correlation-ID": "cid_from_client"})

        assert response.headers["X-Correlation-ID"] == "cid_from_client"
