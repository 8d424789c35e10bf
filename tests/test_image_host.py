"""
Image host tests: Cloudinary signing and the upload client.
"""

import asyncio
import hashlib
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from profilehub.services.image_host import CloudinaryUploader, ImageUploadError, sign_params


UPLOAD_URL = "https://api.cloudinary.test/v1_1/demo/image/upload"
SECURE_URL = "https://res.cloudinary.com/demo/image/upload/v1/me.png"


def upload_response(status_code=200, **kwargs):
    return httpx.Response(status_code, request=httpx.Request("POST", UPLOAD_URL), **kwargs)


def test_sign_params_sorts_and_appends_secret():
    signature = sign_params({"timestamp": "1700000000", "folder": "avatars"}, "shh")

    expected = hashlib.sha1(b"folder=avatars&timestamp=1700000000shh").hexdigest()
    assert signature == expected


class TestCloudinaryUploader:
    @pytest.fixture
    def cloud(self):
        return CloudinaryUploader(upload_url=UPLOAD_URL, api_key="key", api_secret="secret")

    def test_returns_secure_url(self, cloud):
        post = AsyncMock(return_value=upload_response(json={"secure_url": SECURE_URL}))
        with patch("httpx.AsyncClient.post", new=post):
            url = asyncio.run(cloud.upload(b"\x89PNG fake", "me.png"))

        assert url == SECURE_URL
        assert post.await_args.args[0] == UPLOAD_URL

    def test_sends_signed_form(self, cloud):
        post = AsyncMock(return_value=upload_response(json={"secure_url": SECURE_URL}))
        with patch("httpx.AsyncClient.post", new=post):
            asyncio.run(cloud.upload(b"\x89PNG fake", "me.png"))

        data = post.await_args.kwargs["data"]
        assert data["api_key"] == "key"
        assert data["signature"] == sign_params({"timestamp": data["timestamp"]}, "secret")
        assert "secret" not in data.values()
        assert post.await_args.kwargs["files"] == {"file": ("me.png", b"\x89PNG fake")}

    @pytest.mark.parametrize("status_code", [401, 500])
    def test_error_status_raises(self, cloud, status_code):
        response = upload_response(status_code, json={"error": {"message": "Invalid Signature"}})
        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=response)):
            with pytest.raises(ImageUploadError, match="returned an error"):
                asyncio.run(cloud.upload(b"x", "me.png"))

    def test_connection_failure_raises(self, cloud):
        error = httpx.ConnectError("connection refused", request=httpx.Request("POST", UPLOAD_URL))
        with patch("httpx.AsyncClient.post", new=AsyncMock(side_effect=error)):
            with pytest.raises(ImageUploadError, match="unavailable"):
                asyncio.run(cloud.upload(b"x", "me.png"))

    def test_invalid_json_raises(self, cloud):
        response = upload_response(content=b"<html>gateway</html>")
        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=response)):
            with pytest.raises(ImageUploadError, match="invalid JSON"):
                asyncio.run(cloud.upload(b"x", "me.png"))

    def test_missing_secure_url_raises(self, cloud):
        response = upload_response(json={"public_id": "me"})
        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=response)):
            with pytest.raises(ImageUploadError, match="no secure_url"):
                asyncio.run(cloud.upload(b"x", "me.png"))
