"""Presenter: marshal detect results into the plain map host apps read over the native bridge."""

from __future__ import annotations

from sherpa_model_detect.l1_entities.detection import DetectionCandidate, SttDetectResult, TtsDetectResult

# Field names the host side already reads; everything else is plain snake -> camel.
_KEY_OVERRIDES = {
    'funasr_llm': 'funasrLLM',
}


def to_camel(name: str) -> str:
    if name in _KEY_OVERRIDES:
        return _KEY_OVERRIDES[name]
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def _present_candidates(candidates: list[DetectionCandidate]) -> list[dict[str, str]]:
    return [{'type': c.kind.value, 'modelDir': c.directory} for c in candidates]


def present_stt_result(result: SttDetectResult) -> dict:
    """Map an STT result to ``{success, error, modelType, detectedModels, paths, tokensRequired}``."""
    data = {
        'success': result.ok,
        'modelType': result.selected_kind.value,
        'detectedModels': _present_candidates(result.candidates),
        'paths': {to_camel(k): v for k, v in result.paths.populated().items()},
        'tokensRequired': result.tokens_required,
    }
    if result.error:
        data['error'] = result.error
    return data


def present_tts_result(result: TtsDetectResult) -> dict:
    """Map a TTS result to ``{success, error, modelType, detectedModels, paths}``."""
    data = {
        'success': result.ok,
        'modelType': result.selected_kind.value,
        'detectedModels': _present_candidates(result.candidates),
        'paths': {to_camel(k): v for k, v in result.paths.populated().items()},
    }
    if result.error:
        data['error'] = result.error
    return data
