"""Disk-backed store for uploaded submission files."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass

from errors import NotFound, PayloadTooLarge
from filename_utils import new_stored_file_id

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
_STORED_ID_RE = re.compile(r"^[0-9a-f]{32}(\.[a-z0-9]{1,9})?$")


@dataclass
class StoredFile:
    stored_file_id: str
    path: str
    size_bytes: int


class DiskFileStore:
    """
    Stores each payload under a fresh random identifier in `root`.

    Bytes are streamed into a temp file and counted as they arrive; going
    over `max_bytes` aborts the write and removes the partial file. The temp
    file is renamed into place only once it is complete.
    """

    def __init__(self, root: str, max_bytes: int):
        self.root = os.path.abspath(root)
        self.max_bytes = max_bytes
        os.makedirs(self.root, exist_ok=True)

    def path_for(self, stored_file_id: str) -> str:
        if not _STORED_ID_RE.match(stored_file_id or ""):
            raise NotFound("File not found")
        return os.path.join(self.root, stored_file_id)

    def save(self, stream, filename: str | None) -> StoredFile:
        stored_file_id = new_stored_file_id(filename)
        final_path = self.path_for(stored_file_id)
        tmp_path = final_path + ".part"

        size = 0
        try:
            with open(tmp_path, "wb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise PayloadTooLarge()
                    out.write(chunk)
            os.replace(tmp_path, final_path)
        except BaseException:
            self._remove(tmp_path)
            raise

        logger.info("stored upload %s (%d bytes)", stored_file_id, size)
        return StoredFile(stored_file_id=stored_file_id, path=final_path, size_bytes=size)

    def delete(self, stored_file_id: str) -> None:
        self._remove(self.path_for(stored_file_id))

    def exists(self, stored_file_id: str) -> bool:
        return os.path.isfile(self.path_for(stored_file_id))

    def list_ids(self) -> list[str]:
        return sorted(
            name for name in os.listdir(self.root) if _STORED_ID_RE.match(name)
        )

    @staticmethod
    def _remove(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
