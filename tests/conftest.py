"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from sherpa_model_detect.l1_entities.file_entry import FileEntry
from sherpa_model_detect.l2_use_cases.detect_stt_model_use_case import DetectSttModelUseCase
from sherpa_model_detect.l2_use_cases.detect_tts_model_use_case import DetectTtsModelUseCase
from sherpa_model_detect.l3_interface_adapters.gateways.fs_file_indexer import FsFileIndexer

# --- Protocol-conforming Fakes ---


class FakeFileIndexer:
    """In-memory FileIndexer for L2 use case tests.

    Paths are plain strings joined with '/'. Anything listed in *vanished*
    shows up in ``list_files`` but no longer ``exists``.
    """

    def __init__(
        self,
        root: str,
        files: dict[str, int] | Iterable[str],
        directories: Iterable[str] = (),
        vanished: Iterable[str] = (),
    ):
        sizes = files if isinstance(files, dict) else dict.fromkeys(files, 1)
        self.root = root
        self._files = {f'{root}/{rel}': size for rel, size in sizes.items()}
        self._dirs = {root} | {f'{root}/{rel}' for rel in directories}
        self._vanished = {f'{root}/{rel}' for rel in vanished}
        self.list_calls: list[tuple[str, int]] = []

    def exists(self, path: str) -> bool:
        if path in self._vanished:
            return False
        return path in self._files or path in self._dirs

    def is_directory(self, path: str) -> bool:
        return path in self._dirs

    def list_files(self, root: str, max_depth: int = 4) -> list[FileEntry]:
        self.list_calls.append((root, max_depth))
        entries = []
        for path, size in self._files.items():
            rel = path[len(root) + 1 :]
            if path.startswith(root + '/') and rel.count('/') <= max_depth:
                entries.append(FileEntry(path=path, name_lower=rel.rsplit('/', 1)[-1].lower(), size=size))
        return entries

    def find_directory(self, root: str, name: str, max_depth: int) -> str | None:
        for path in sorted(self._dirs):
            rel = path[len(root) + 1 :]
            if path.startswith(root + '/') and rel.rsplit('/', 1)[-1].lower() == name.lower():
                return path
        return None


# --- Model directory builders ---

ModelDirFactory = Callable[..., Path]


@pytest.fixture
def models_root(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Neutral parent directory; tmp_path carries the test name, which can contain hint words."""
    return tmp_path_factory.mktemp('models')


@pytest.fixture
def make_model_dir(models_root: Path) -> ModelDirFactory:
    """Create ``models_root/<name>`` holding *files* (relative path -> size in bytes).

    Entries in *dirs* become empty directories.
    """

    def _make(name: str, files: dict[str, int] | Iterable[str] = (), dirs: Iterable[str] = ()) -> Path:
        root = models_root / name
        root.mkdir(parents=True)
        sizes = files if isinstance(files, dict) else dict.fromkeys(files, 1)
        for rel, size in sizes.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b'\0' * size)
        for rel in dirs:
            (root / rel).mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture
def stt_use_case() -> DetectSttModelUseCase:
    return DetectSttModelUseCase(FsFileIndexer())


@pytest.fixture
def tts_use_case() -> DetectTtsModelUseCase:
    return DetectTtsModelUseCase(FsFileIndexer())


# --- Config ---


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    config = tmp_path / 'config.yaml'
    config.write_text(
        'stt:\n  model_type: auto\n  prefer_int8: false\n  debug: false\ntts:\n  model_type: auto\noutput:\n  format: json\n',
        encoding='utf-8',
    )
    return config


@pytest.fixture(autouse=True)
def _isolate_user_config(monkeypatch: pytest.MonkeyPatch):
    """Never read the developer's own config.yaml during tests."""
    monkeypatch.setattr(
        'sherpa_model_detect.l3_interface_adapters.gateways.yaml_config_loader.DEFAULT_CONFIG_PATHS',
        [],
    )


@pytest.fixture(autouse=True)
def _reset_smd_logger():
    """CLI tests reconfigure the ``smd`` logger; restore it so caplog keeps working."""
    yield
    logger = logging.getLogger('smd')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
