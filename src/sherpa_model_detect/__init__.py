"""sherpa-model-detect: classify sherpa-onnx model directories and resolve their files."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version('sherpa-model-detect')
except PackageNotFoundError:  # running from a source checkout
    __version__ = '0.0.0'
