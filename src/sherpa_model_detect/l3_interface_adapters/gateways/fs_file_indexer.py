"""Gateway: local filesystem indexer, implements the FileIndexer port."""

from __future__ import annotations

import logging
import os

from sherpa_model_detect.l1_entities.file_entry import FileEntry

log = logging.getLogger('smd.indexer')


class FsFileIndexer:
    """Bounded, deterministic directory walker.

    Entries of each directory are visited in name order, files before
    subdirectories. The depth bound also stops symlink cycles.
    """

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path)

    def list_files(self, root: str, max_depth: int = 4) -> list[FileEntry]:
        if not root or not os.path.isdir(root):
            return []
        results: list[FileEntry] = []
        self._collect(root, max_depth, results)
        return results

    def find_directory(self, root: str, name: str, max_depth: int) -> str | None:
        target = name.lower()
        to_visit = self._subdirectories(root)
        depth = 0
        while to_visit and depth <= max_depth:
            next_level: list[str] = []
            for path in to_visit:
                if os.path.basename(path).lower() == target:
                    return path
                if depth < max_depth:
                    next_level.extend(self._subdirectories(path))
            to_visit = next_level
            depth += 1
        return None

    def _collect(self, directory: str, depth_left: int, results: list[FileEntry]) -> None:
        entries = self._scan(directory)
        subdirs: list[str] = []
        for entry in entries:
            try:
                if entry.is_file():
                    results.append(
                        FileEntry(path=entry.path, name_lower=entry.name.lower(), size=entry.stat().st_size)
                    )
                elif entry.is_dir():
                    subdirs.append(entry.path)
            except OSError as e:
                log.debug('Skipping %s: %s', entry.path, e)
        if depth_left <= 0:
            return
        for sub in subdirs:
            self._collect(sub, depth_left - 1, results)

    def _subdirectories(self, directory: str) -> list[str]:
        subdirs = []
        for entry in self._scan(directory):
            try:
                if entry.is_dir():
                    subdirs.append(entry.path)
            except OSError as e:
                log.debug('Skipping %s: %s', entry.path, e)
        return subdirs

    @staticmethod
    def _scan(directory: str) -> list[os.DirEntry]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda e: e.name)
        except OSError as e:
            log.debug('Cannot list %s: %s', directory, e)
            return []
