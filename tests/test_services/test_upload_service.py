import io

import pytest
from werkzeug.datastructures import FileStorage

from sitegate.app.settings import DEFAULT_UPLOAD_TYPES
from sitegate.services.upload_service import UploadError, UploadStore


def _file(name="photo.png", content_type="image/png", data=b"\x89PNG fake", field="file"):
    return FileStorage(stream=io.BytesIO(data), filename=name, content_type=content_type, name=field)


@pytest.fixture
def store(tmp_path):
    return UploadStore(tmp_path / "media", DEFAULT_UPLOAD_TYPES, max_file_size=1024)


def test_save_uses_randomized_name(store):
    saved = store.save(_file())

    assert saved["originalname"] == "photo.png"
    assert saved["filename"] != "photo.png"
    assert saved["filename"].startswith("file-")
    assert saved["filename"].endswith(".png")
    assert saved["url"] == f"/uploads/{saved['filename']}"
    assert (store.directory / saved["filename"]).read_bytes() == b"\x89PNG fake"


@pytest.mark.parametrize(
    "name,content_type",
    [
        ("script.php", "image/png"),
        ("photo.png", "application/x-php"),
        ("archive.zip", "application/zip"),
        ("noextension", "image/png"),
    ],
)
def test_rejects_types_outside_whitelist(store, name, content_type):
    with pytest.raises(UploadError) as excinfo:
        store.save(_file(name=name, content_type=content_type))
    assert excinfo.value.status == 400


def test_rejects_oversized_file(store):
    with pytest.raises(UploadError) as excinfo:
        store.save(_file(data=b"x" * 2048))
    assert excinfo.value.status == 413


def test_save_many_validates_before_writing(store):
    with pytest.raises(UploadError):
        store.save_many([_file(), _file(name="bad.exe", content_type="application/octet-stream")])
    assert store.list_files() == []


def test_save_many_limit(store):
    with pytest.raises(UploadError):
        store.save_many([_file() for _ in range(3)], max_files=2)
    with pytest.raises(UploadError):
        store.save_many([])


def test_list_and_delete(store):
    saved = store.save(_file(name="song.mp3", content_type="audio/mpeg"))

    listing = store.list_files()
    assert [item["filename"] for item in listing] == [saved["filename"]]
    assert listing[0]["size"] == len(b"\x89PNG fake")

    assert store.delete(saved["filename"]) is True
    assert store.delete(saved["filename"]) is False
    assert store.list_files() == []


def test_resolve_rejects_traversal(store):
    assert store.resolve("../secret.txt") is None
    assert store.resolve("..") is None
    assert store.resolve("") is None
    assert store.resolve("file-1-abc.png") == (store.directory / "file-1-abc.png").resolve()
