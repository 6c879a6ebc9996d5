"""Port: bounded directory indexing."""

from __future__ import annotations

from typing import Protocol

from sherpa_model_detect.l1_entities.file_entry import FileEntry


class FileIndexer(Protocol):
    """Abstract directory scanner: lists files and finds named directories."""

    def exists(self, path: str) -> bool:
        """True if *path* exists right now."""
        ...

    def is_directory(self, path: str) -> bool:
        """True if *path* exists and is a directory."""
        ...

    def list_files(self, root: str, max_depth: int = 4) -> list[FileEntry]:
        """Every regular file within *max_depth* levels below *root*. Empty if root is unusable."""
        ...

    def find_directory(self, root: str, name: str, max_depth: int) -> str | None:
        """Path of the first directory called *name* (case-insensitive) below *root*, or None."""
        ...
