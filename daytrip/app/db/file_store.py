"""JSON-file implementation of the key-value store."""

import json
import os
import tempfile
from pathlib import Path


class JsonFileKeyValueStore:
    """Key-value store kept as a single JSON object on local disk.

    Writes go to a temp file in the same directory and are renamed into
    place, so a reader never sees a half-written document.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"storage file {self._path} does not hold a JSON object")
        return data

    def get(self, key: str) -> str | None:
        """Get blob by key."""
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Set blob by key."""
        try:
            data = self._read_all()
        except (ValueError, OSError):
            # Unreadable document is replaced rather than blocking writes
            data = {}
        data[key] = value

        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, prefix=".storage-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
