"""
Image upload validation tests.
"""

import asyncio
import io

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from profilehub.utils.file_upload import (
    MAX_FILE_SIZE_BYTES, get_file_extension, has_upload, read_image_upload,
)


def make_upload(filename, content=b"data", content_type="image/png"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def test_get_file_extension():
    assert get_file_extension("Me.JPG") == ".jpg"
    assert get_file_extension("archive.tar.gz") == ".gz"
    assert get_file_extension("noext") == ""


def test_has_upload():
    assert not has_upload(None)
    assert not has_upload(make_upload(""))
    assert has_upload(make_upload("me.png"))


def test_reads_valid_image():
    content, filename = asyncio.run(read_image_upload(make_upload("me.webp", b"RIFF", "image/webp")))

    assert content == b"RIFF"
    assert filename == "me.webp"


@pytest.mark.parametrize("upload, status", [
    (make_upload("me.bmp"), 400),
    (make_upload("me.png", content_type="application/pdf"), 400),
    (make_upload("me.png", content=b""), 400),
    (make_upload("me.png", content=b"x" * (MAX_FILE_SIZE_BYTES + 1)), 413),
])
def test_rejects_bad_uploads(upload, status):
    with pytest.raises(HTTPException) as exc:
        asyncio.run(read_image_upload(upload))

    assert exc.value.status_code == status
