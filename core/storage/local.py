from __future__ import annotations

from pathlib import Path

from core.exceptions import BackendFailureError, MissingParameterError, ObjectNotFoundError

_META_DIR = ".meta"


class LocalStorage:
    """Filesystem stand-in for a bucket, laid out as ``root/bucket/key``.

    Content types live in a parallel ``.meta`` tree so object paths stay verbatim.
    Keys that resolve outside the bucket directory, or into ``.meta``, are refused
    before any filesystem access.
    """

    def __init__(self, root: Path, bucket: str = "local") -> None:
        self.bucket = bucket
        self.root = Path(root) / bucket
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, base: Path, key: str) -> Path:
        candidate = (base / key).resolve()
        if candidate == base.resolve() or not candidate.is_relative_to(base.resolve()):
            raise MissingParameterError("Invalid file name", {"key": key})
        return candidate

    def _path(self, key: str) -> Path:
        path = self._resolve(self.root, key)
        if path.is_relative_to((self.root / _META_DIR).resolve()):
            raise MissingParameterError("Invalid file name", {"key": key})
        return path

    def _meta_path(self, key: str) -> Path:
        return self._resolve(self.root / _META_DIR, key)

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def put_bytes(self, key: str, data: bytes, content_type: str) -> None:
        path = self._path(key)
        meta = self._meta_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            meta.parent.mkdir(parents=True, exist_ok=True)
            meta.write_text(content_type or "", encoding="utf-8")
        except OSError as exc:
            raise BackendFailureError(str(exc), {"operation": "put", "key": key}) from exc

    def get_bytes(self, key: str) -> tuple[bytes, str | None]:
        path = self._path(key)
        if not path.is_file():
            raise ObjectNotFoundError("File not found", {"operation": "get", "key": key})
        meta = self._meta_path(key)
        try:
            data = path.read_bytes()
            content_type = meta.read_text(encoding="utf-8") if meta.is_file() else ""
        except OSError as exc:
            raise BackendFailureError(str(exc), {"operation": "get", "key": key}) from exc
        return data, content_type or None

    def delete(self, key: str) -> None:
        path = self._path(key)
        if not path.is_file():
            raise ObjectNotFoundError("File not found", {"operation": "delete", "key": key})
        try:
            path.unlink()
            self._meta_path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise BackendFailureError(str(exc), {"operation": "delete", "key": key}) from exc


__all__ = ["LocalStorage"]
