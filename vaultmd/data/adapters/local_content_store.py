"""Concrete ContentGateway writing payloads to the local filesystem.

Each payload lives at ``<objects_dir>/<scope_dir>/<key>_v<version>.txt``
with the key percent-encoded. Writes go to a temporary file in the target
directory and are renamed into place, so readers never observe a partial
payload.
"""

import hashlib
import os
import shutil
import tempfile
from typing import Union
from urllib.parse import quote

from vaultmd.domain.exceptions import ContentNotFoundError
from vaultmd.log import logger

logger = logger.getChild(__name__)

_ENCODING = "utf-8"
_CHUNK_SIZE = 64 * 1024


def compute_hash(content: Union[str, bytes]) -> str:
    """Return the SHA-256 hex digest of text or bytes."""
    if isinstance(content, str):
        content = content.encode(_ENCODING)
    return hashlib.sha256(content).hexdigest()


def _file_hash(path: str) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as fobj:
        for chunk in iter(lambda: fobj.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


class LocalContentStore:
    """Concrete ContentGateway backed by a local directory tree.

    Attributes:
        _objects_dir: Root directory holding one subdirectory per scope.
    """

    def __init__(self, objects_dir: str) -> None:
        """Initialize with the objects root.

        Args:
            objects_dir: Directory under which scope directories are made.
                Created lazily on first write.
        """
        self._objects_dir = os.path.abspath(objects_dir)

    @property
    def objects_dir(self) -> str:
        return self._objects_dir

    def scope_dir(self, scope_dir_name: str) -> str:
        return os.path.join(self._objects_dir, scope_dir_name)

    def file_path(self, scope_dir_name: str, key: str, version: int) -> str:
        """Build the payload location for a scope/key/version triple."""
        filename = f"{quote(key, safe='')}_v{version}.txt"
        return os.path.join(self.scope_dir(scope_dir_name), filename)

    def save(
        self,
        scope_dir_name: str,
        key: str,
        version: int,
        content: str,
    ) -> tuple[str, str]:
        data = content.encode(_ENCODING)
        path = self.file_path(scope_dir_name, key, version)
        self._write_atomic(path, data)
        logger.debug("Saved %s v%d to %s", key, version, path)
        return path, compute_hash(data)

    def read(self, path: str) -> str:
        try:
            with open(path, "rb") as fobj:
                return fobj.read().decode(_ENCODING)
        except FileNotFoundError as exc:
            raise ContentNotFoundError(f"Content not found: {path}") from exc

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def delete(self, path: str) -> bool:
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        logger.debug("Deleted %s", path)
        return True

    def verify(self, path: str, expected_hash: str) -> bool:
        try:
            actual = _file_hash(path)
        except FileNotFoundError:
            return False
        return actual == expected_hash

    def delete_all(self, scope_dir_name: str) -> bool:
        directory = self.scope_dir(scope_dir_name)
        if not os.path.isdir(directory):
            return False
        shutil.rmtree(directory)
        logger.debug("Removed scope directory %s", directory)
        return True

    def copy(
        self,
        path: str,
        scope_dir_name: str,
        key: str,
        version: int,
    ) -> tuple[str, str]:
        try:
            with open(path, "rb") as fobj:
                data = fobj.read()
        except FileNotFoundError as exc:
            raise ContentNotFoundError(f"Content not found: {path}") from exc

        dest = self.file_path(scope_dir_name, key, version)
        self._write_atomic(dest, data)
        logger.debug("Copied %s to %s", path, dest)
        return dest, compute_hash(data)

    def _write_atomic(self, path: str, data: bytes) -> None:
        directory = os.path.dirname(path)
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=".tmp-", suffix=".part"
        )
        try:
            with os.fdopen(fd, "wb") as fobj:
                fobj.write(data)
                fobj.flush()
                os.fsync(fobj.fileno())
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
