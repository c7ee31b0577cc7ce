# src/tasklist/storage/kv_file.py

from __future__ import annotations

import contextlib
import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileKeyValueStore:
    """
    Key/value slots backed by one UTF-8 file per key.

    <root>/<key>.json holds the raw string value. Writes go through a temp
    file + os.replace so a crash never leaves a half-written slot behind.
    """

    def __init__(self, root_dir: str | Path) -> None:
        self._root = Path(root_dir)
        self._root.mkdir(parents=True, exist_ok=True)
        logger.info("FileKeyValueStore ready root=%s", self._root)

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        if not key or key in (".", "..") or not _KEY_RE.match(key):
            raise ValueError(f"invalid storage key: {key!r}")
        return self._root / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text("utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, "utf-8")
        os.replace(tmp, path)
        with contextlib.suppress(OSError):
            # Best-effort: personal data, keep the file private on disk.
            os.chmod(path, 0o600)
        logger.debug("Wrote key=%s bytes=%d", key, len(value))
