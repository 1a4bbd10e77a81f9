# src/todo_companion/storage/blob_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileBlobStore:
    """
    Key-value blob store kept in a single JSON object on disk.

    Every write rewrites the whole file through a temp file + os.replace, so a
    crash mid-write leaves the previous content intact. Reads never fail: a
    missing or corrupt file reads as empty.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileBlobStore ready path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Blob file %s is unreadable; treating as empty.", self._path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            logger.warning("Blob file %s does not hold an object; treating as empty.", self._path)
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def read(self, key: str) -> str | None:
        return self._read_all().get(key)

    def write(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value

        tmp = self._path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise
        with contextlib.suppress(OSError):
            # Best-effort: task text is personal, keep the file private on disk.
            os.chmod(self._path, 0o600)
        logger.debug("Blob written key=%s bytes=%d", key, len(value))
