import pytest

from portfolio.api.photos import resolve_media_type
from portfolio.exceptions import StorageError


class TestPhotoProxy:
    def test_streams_object(self, client, stocked_s3):
        resp = client.get("/api/photos/streetphotography/a.jpg")
        assert resp.status_code == 200
        assert resp.content == b"bytes of streetphotography/a.jpg"
        assert resp.headers["content-type"] == "image/jpeg"
        assert resp.headers["cache-control"] == "public, max-age=31536000, immutable"
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["etag"] == '"streetphotography/a.jpg-etag"'
        assert resp.headers["content-length"] == str(len(resp.content))

    def test_png_type_from_extension(self, client, stocked_s3):
        resp = client.get("/api/photos/streetphotography/b.png")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"

    def test_stored_content_type_wins(self, client, fake_s3):
        fake_s3.add("travel/x.jpg", data=b"webp bytes", content_type="image/webp")
        resp = client.get("/api/photos/travel/x.jpg")
        assert resp.headers["content-type"] == "image/webp"

    @pytest.mark.parametrize("path", ["/api/photos", "/api/photos/"])
    def test_missing_path(self, client, path):
        resp = client.get(path)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Photo path required"

    def test_unknown_key(self, client, stocked_s3):
        resp = client.get("/api/photos/street/nope.jpg")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Image not found"

    def test_store_failure(self, client, stocked_s3):
        stocked_s3.get_error = StorageError("boom")
        resp = client.get("/api/photos/streetphotography/a.jpg")
        assert resp.status_code == 500
        assert resp.json()["error"] == "Internal server error"


class TestResolveMediaType:
    def test_stored_type(self):
        assert resolve_media_type("a.jpg", "image/avif") == "image/avif"

    def test_generic_stored_type_falls_back_to_extension(self):
        assert resolve_media_type("a.png", "binary/octet-stream") == "image/png"

    def test_unknown_extension_defaults_to_jpeg(self):
        assert resolve_media_type("photo", None) == "image/jpeg"
