"""Dependency container: composition root for wiring all layers together."""

from __future__ import annotations

from sherpa_model_detect.l1_entities.detection import SttDetectResult, TtsDetectResult
from sherpa_model_detect.l2_use_cases.detect_stt_model_use_case import DetectSttModelUseCase
from sherpa_model_detect.l2_use_cases.detect_tts_model_use_case import DetectTtsModelUseCase
from sherpa_model_detect.l2_use_cases.ports.config_loader import ConfigLoader
from sherpa_model_detect.l2_use_cases.ports.file_indexer import FileIndexer
from sherpa_model_detect.l3_interface_adapters.gateways.fs_file_indexer import FsFileIndexer
from sherpa_model_detect.l3_interface_adapters.gateways.yaml_config_loader import YamlConfigLoader


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(self, indexer: FileIndexer | None = None) -> None:
        self.indexer: FileIndexer = indexer or FsFileIndexer()
        self.detect_stt = DetectSttModelUseCase(self.indexer)
        self.detect_tts = DetectTtsModelUseCase(self.indexer)

    @staticmethod
    def config_loader() -> ConfigLoader:
        return YamlConfigLoader()


def detect_stt_model(
    model_dir: str,
    prefer_int8: bool | None = None,
    model_type: str | None = None,
    *,
    debug: bool = False,
) -> SttDetectResult:
    """Classify an STT model directory using the local filesystem."""
    return DependencyContainer().detect_stt.execute(model_dir, prefer_int8, model_type, debug=debug)


def detect_tts_model(model_dir: str, model_type: str | None = None) -> TtsDetectResult:
    """Classify a TTS model directory using the local filesystem."""
    return DependencyContainer().detect_tts.execute(model_dir, model_type)
