"""
Blob storage for generated stylesheets.

Keys are forward-slash paths relative to the storage root, e.g.
``themes/3/3_header.css``.
"""

from __future__ import annotations

import shutil
import threading
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from pagesmith.errors import StorageError

# =============================================================================
# Storage Backend Protocol
# =============================================================================


class BlobStorage(ABC):
    """Abstract storage backend interface."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name identifier."""
        pass

    @abstractmethod
    def put(self, key: str, content: str) -> None:
        """
        Write (or overwrite) a text blob.

        Raises:
            StorageError: the write failed
        """
        pass

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Read a blob; None if it does not exist."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete a blob.

        Returns:
            True if a blob was removed

        Raises:
            StorageError: the blob exists but could not be removed
        """
        pass

    @abstractmethod
    def list_files(self, directory: str) -> list[str]:
        """Names of the blobs directly inside ``directory``, sorted."""
        pass

    @abstractmethod
    def delete_folder(self, directory: str) -> bool:
        """Remove ``directory`` and everything in it; True if it existed."""
        pass

    @abstractmethod
    def get_url(self, key: str) -> str:
        """Public URL for a blob."""
        pass


def normalize_key(key: str) -> str:
    """
    Validate a storage key.

    Raises:
        StorageError: key is absolute or escapes the storage root
    """
    path = PurePosixPath(key.strip("/"))
    if not key.strip("/") or ".." in path.parts:
        raise StorageError(f"Invalid storage key: {key!r}")
    return str(path)


# =============================================================================
# Local Storage Backend
# =============================================================================


class LocalBlobStorage(BlobStorage):
    """
    Local filesystem storage backend.

    Suitable for development and single-host deployments where the web
    server serves ``base_path`` under ``base_url``.
    """

    def __init__(
        self,
        base_path: str | Path = ".pagesmith/storage",
        base_url: str = "/storage",
    ):
        """
        Initialize local storage.

        Args:
            base_path: Directory to store blobs
            base_url: Base URL for blob access
        """
        self.base_path = Path(base_path)
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "local"

    def _path(self, key: str) -> Path:
        return self.base_path / normalize_key(key)

    def put(self, key: str, content: str) -> None:
        full_path = self._path(key)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to write {key}: {exc}") from exc

    def get(self, key: str) -> str | None:
        full_path = self._path(key)
        if not full_path.is_file():
            return None
        try:
            return full_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def delete(self, key: str) -> bool:
        full_path = self._path(key)
        if not full_path.is_file():
            return False
        try:
            full_path.unlink()
        except OSError as exc:
            raise StorageError(f"Failed to delete {key}: {exc}") from exc
        return True

    def list_files(self, directory: str) -> list[str]:
        full_path = self._path(directory)
        if not full_path.is_dir():
            return []
        return sorted(p.name for p in full_path.iterdir() if p.is_file())

    def delete_folder(self, directory: str) -> bool:
        full_path = self._path(directory)
        if not full_path.is_dir():
            return False
        try:
            shutil.rmtree(full_path)
        except OSError as exc:
            raise StorageError(f"Failed to delete folder {directory}: {exc}") from exc
        return True

    def get_url(self, key: str) -> str:
        return f"{self.base_url}/{normalize_key(key)}"


# =============================================================================
# In-Memory Storage Backend
# =============================================================================


class InMemoryBlobStorage(BlobStorage):
    """Dictionary-backed storage for tests and previews."""

    def __init__(self, base_url: str = "/storage"):
        self.base_url = base_url.rstrip("/")
        self._blobs: dict[str, str] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "memory"

    def put(self, key: str, content: str) -> None:
        with self._lock:
            self._blobs[normalize_key(key)] = content

    def get(self, key: str) -> str | None:
        return self._blobs.get(normalize_key(key))

    def exists(self, key: str) -> bool:
        return normalize_key(key) in self._blobs

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._blobs.pop(normalize_key(key), None) is not None

    def list_files(self, directory: str) -> list[str]:
        prefix = normalize_key(directory) + "/"
        with self._lock:
            keys = list(self._blobs)
        return sorted(
            key[len(prefix) :] for key in keys if key.startswith(prefix) and "/" not in key[len(prefix) :]
        )

    def delete_folder(self, directory: str) -> bool:
        prefix = normalize_key(directory) + "/"
        with self._lock:
            doomed = [key for key in self._blobs if key.startswith(prefix)]
            for key in doomed:
                del self._blobs[key]
        return bool(doomed)

    def get_url(self, key: str) -> str:
        return f"{self.base_url}/{normalize_key(key)}"
