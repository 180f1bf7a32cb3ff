from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from tasklist.errors import StorageError

from .interface import KeyValueStore


class FileKeyValueStore(KeyValueStore):
    """Key-value slots kept in a single JSON object file.

    Layout: ``{"<key>": "<string value>", ...}``. Every write rewrites the whole
    file through a temporary sibling and ``os.replace`` so readers never see a
    half-written file. A missing file reads as an empty store.
    """

    name = "file"

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageError(f"cannot read {self._path}", backend=self.name) from exc
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise StorageError(f"{self._path} is not valid JSON", backend=self.name) from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self._path} does not hold a JSON object", backend=self.name)
        # Hand-edited files may hold a slot as raw JSON; hand it on as text so the
        # caller validates it like any other value
        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"cannot write {self._path}", backend=self.name) from exc

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)


__all__ = ["FileKeyValueStore"]
