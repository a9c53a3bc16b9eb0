import io
import os

import pytest

from errors import NotFound, PayloadTooLarge
from filename_utils import display_filename, new_stored_file_id, safe_extension
from storage import DiskFileStore


class UnseekableStream:
    """Reads like a network stream: no tell/seek."""

    def __init__(self, data):
        self._buf = io.BytesIO(data)

    def read(self, n=-1):
        return self._buf.read(n)


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("essay.pdf", ".pdf"),
        ("Essay Final.DOCX", ".docx"),
        ("archive.tar.gz", ".gz"),
        ("../../etc/passwd", ""),
        ("noextension", ""),
        ("", ""),
        (None, ""),
        ("weird.ext-with-dash", ""),
        ("long.abcdefghijkl", ""),
    ],
)
def test_safe_extension(filename, expected):
    assert safe_extension(filename) == expected


def test_new_stored_file_id_is_random_and_keeps_extension():
    a = new_stored_file_id("hw.pdf")
    b = new_stored_file_id("hw.pdf")
    assert a != b
    assert a.endswith(".pdf") and len(a) == 32 + 4


def test_display_filename_is_sanitized():
    assert display_filename("../secret/report.pdf") == "secret_report.pdf"
    assert display_filename("") is None


def test_save_writes_file(tmp_path):
    store = DiskFileStore(str(tmp_path / "up"), max_bytes=100)
    stored = store.save(io.BytesIO(b"abc"), "a.txt")
    assert stored.size_bytes == 3
    assert store.exists(stored.stored_file_id)
    assert store.list_ids() == [stored.stored_file_id]
    with open(stored.path, "rb") as f:
        assert f.read() == b"abc"


def test_save_over_limit_leaves_nothing(tmp_path):
    store = DiskFileStore(str(tmp_path / "up"), max_bytes=10)
    with pytest.raises(PayloadTooLarge):
        store.save(UnseekableStream(b"x" * 11), "a.txt")
    assert os.listdir(store.root) == []


def test_save_large_stream_in_chunks(tmp_path):
    store = DiskFileStore(str(tmp_path / "up"), max_bytes=300 * 1024)
    stored = store.save(UnseekableStream(b"y" * 200 * 1024), "big.bin")
    assert stored.size_bytes == 200 * 1024


def test_path_for_rejects_foreign_names(tmp_path):
    store = DiskFileStore(str(tmp_path / "up"), max_bytes=10)
    for bad in ("../x", "abc", "", "0" * 32 + "/../../x"):
        with pytest.raises(NotFound):
            store.path_for(bad)


def test_delete_is_idempotent(tmp_path):
    store = DiskFileStore(str(tmp_path / "up"), max_bytes=10)
    stored = store.save(io.BytesIO(b"abc"), "a.txt")
    store.delete(stored.stored_file_id)
    store.delete(stored.stored_file_id)
    assert store.list_ids() == []
