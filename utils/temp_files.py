"""
utils/temp_files.py
-------------------
Scoped ownership of temporary files created while handling one event.
Every path is registered up front and removed in a single cleanup step
when the arena closes, whichever step failed.
"""

import os
from pathlib import Path
from typing import Union

from utils.logger import get_logger

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


class TempFileArena:
    """
    Collects temporary paths and deletes them on exit.

    Usage:
        with TempFileArena() as arena:
            path = arena.register(tmp_dir / "abc.jpg")
            ...
    """

    def __init__(self):
        self._paths: list[Path] = []

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def register(self, path: PathLike) -> Path:
        """Track a path for cleanup. The file does not need to exist yet."""
        path = Path(path)
        if path not in self._paths:
            self._paths.append(path)
        return path

    def cleanup(self) -> None:
        """Remove every registered path. Missing files are skipped."""
        while self._paths:
            path = self._paths.pop()
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove temp file {path}: {e}")

    def __enter__(self) -> "TempFileArena":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
