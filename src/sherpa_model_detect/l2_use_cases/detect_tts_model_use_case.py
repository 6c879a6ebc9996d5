"""Use case: classify a speech-synthesis model directory and resolve its files."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sherpa_model_detect.l1_entities.detection import DetectionCandidate, TtsDetectResult, TtsModelPaths
from sherpa_model_detect.l1_entities.errors import (
    EmptyDirectoryError,
    MissingDataDirectoryError,
    MissingTokensError,
    ModelDetectionError,
    ModelDirectoryNotFoundError,
    NoCandidateDetectedError,
    StructuralMismatchError,
    UnknownModelKindError,
)
from sherpa_model_detect.l1_entities.model_kind import TtsModelKind, is_auto, parse_tts_model_kind
from sherpa_model_detect.l2_use_cases.ports.file_indexer import FileIndexer
from sherpa_model_detect.l2_use_cases.utils.matchers import (
    contains_word,
    find_by_any_token,
    find_by_exact_name,
    find_largest_excluding,
)

log = logging.getLogger('smd.tts')

MAX_SEARCH_DEPTH = 2
DATA_DIR_NAME = 'espeak-ng-data'

MODEL_STOPLIST = ('acoustic', 'vocoder', 'encoder', 'decoder', 'joiner')

_POCKET_FILES = ('lm_flow', 'lm_main', 'encoder', 'decoder', 'text_conditioner', 'vocab_json', 'token_scores_json')

_REQUIRED_FILES: dict[TtsModelKind, tuple[str, ...]] = {
    TtsModelKind.VITS: ('tts_model',),
    TtsModelKind.MATCHA: ('acoustic_model', 'vocoder'),
    TtsModelKind.KOKORO: ('tts_model', 'voices'),
    TtsModelKind.KITTEN: ('tts_model', 'voices'),
    TtsModelKind.ZIPVOICE: ('encoder', 'decoder'),
    TtsModelKind.POCKET: _POCKET_FILES,
}

_LABELS = {
    TtsModelKind.VITS: 'VITS',
    TtsModelKind.MATCHA: 'Matcha',
    TtsModelKind.KOKORO: 'Kokoro',
    TtsModelKind.KITTEN: 'Kitten',
    TtsModelKind.ZIPVOICE: 'Zipvoice',
    TtsModelKind.POCKET: 'Pocket',
}

# Kinds that phonemize through espeak-ng and read a tokens.txt.
_ESPEAK_KINDS = frozenset(
    {TtsModelKind.VITS, TtsModelKind.MATCHA, TtsModelKind.KOKORO, TtsModelKind.KITTEN, TtsModelKind.ZIPVOICE}
)

_SHARED_FIELDS = ('tokens', 'lexicon', 'data_dir')
_PATH_FIELDS: dict[TtsModelKind, tuple[str, ...]] = {
    TtsModelKind.VITS: ('tts_model', *_SHARED_FIELDS),
    TtsModelKind.MATCHA: ('acoustic_model', 'vocoder', *_SHARED_FIELDS),
    TtsModelKind.KOKORO: ('tts_model', 'voices', *_SHARED_FIELDS),
    TtsModelKind.KITTEN: ('tts_model', 'voices', *_SHARED_FIELDS),
    TtsModelKind.ZIPVOICE: ('encoder', 'decoder', 'vocoder', *_SHARED_FIELDS),
    TtsModelKind.POCKET: _POCKET_FILES,
}


@dataclass(frozen=True)
class TtsProbe:
    """Every structural probe for one TTS directory scan."""

    model_dir: str
    tts_model: str | None = None
    tokens: str | None = None
    lexicon: str | None = None
    data_dir: str | None = None
    voices: str | None = None
    acoustic_model: str | None = None
    vocoder: str | None = None
    encoder: str | None = None
    decoder: str | None = None
    lm_flow: str | None = None
    lm_main: str | None = None
    text_conditioner: str | None = None
    vocab_json: str | None = None
    token_scores_json: str | None = None
    kitten_hint: bool = False
    kokoro_hint: bool = False
    vits_hint: bool = False

    def missing(self, kind: TtsModelKind) -> list[str]:
        problems = [name for name in _REQUIRED_FILES[kind] if getattr(self, name) is None]
        # Full zipvoice ships a vocoder; the distilled variant uses lexicon + tokens instead.
        if kind is TtsModelKind.ZIPVOICE and self.vocoder is None and not (self.lexicon and self.tokens):
            problems.append('vocoder (or lexicon + tokens)')
        return problems

    def satisfies(self, kind: TtsModelKind) -> bool:
        return not self.missing(kind)

    @property
    def voices_kind(self) -> TtsModelKind:
        """Kokoro and Kitten share a layout; only the path tells them apart. Kokoro wins ties."""
        if self.kitten_hint and not self.kokoro_hint:
            return TtsModelKind.KITTEN
        return TtsModelKind.KOKORO

    @property
    def voices_ambiguous(self) -> bool:
        return self.kitten_hint == self.kokoro_hint


AUTO_PRIORITY: tuple[tuple[TtsModelKind, Callable[[TtsProbe], bool]], ...] = (
    (TtsModelKind.MATCHA, lambda p: p.satisfies(TtsModelKind.MATCHA)),
    (TtsModelKind.POCKET, lambda p: p.satisfies(TtsModelKind.POCKET)),
    (TtsModelKind.ZIPVOICE, lambda p: p.satisfies(TtsModelKind.ZIPVOICE)),
    (TtsModelKind.KITTEN, lambda p: p.satisfies(TtsModelKind.KITTEN) and p.voices_kind is TtsModelKind.KITTEN),
    (TtsModelKind.KOKORO, lambda p: p.satisfies(TtsModelKind.KOKORO)),
    (TtsModelKind.VITS, lambda p: p.satisfies(TtsModelKind.VITS)),
)


def build_candidates(probe: TtsProbe) -> list[DetectionCandidate]:
    """Every TTS kind the directory structurally satisfies, in detection order."""
    kinds: list[TtsModelKind] = []
    has_matcha = probe.satisfies(TtsModelKind.MATCHA)
    if has_matcha:
        kinds.append(TtsModelKind.MATCHA)
    if probe.satisfies(TtsModelKind.POCKET):
        kinds.append(TtsModelKind.POCKET)
    if probe.satisfies(TtsModelKind.ZIPVOICE) and not has_matcha:
        kinds.append(TtsModelKind.ZIPVOICE)
    has_voices = probe.satisfies(TtsModelKind.KOKORO)
    if has_voices:
        if probe.voices_ambiguous:
            kinds.extend([TtsModelKind.KOKORO, TtsModelKind.KITTEN])
        else:
            kinds.append(probe.voices_kind)
    if probe.satisfies(TtsModelKind.VITS) and (not has_voices or probe.vits_hint):
        kinds.append(TtsModelKind.VITS)
    return [DetectionCandidate(kind=kind, directory=probe.model_dir) for kind in kinds]


def select_kind(probe: TtsProbe, model_type: str | None) -> TtsModelKind:
    """Resolve the requested or auto-detected kind and check its files. Raises on failure."""
    if is_auto(model_type):
        kind = next((k for k, matches in AUTO_PRIORITY if matches(probe)), TtsModelKind.UNKNOWN)
        if kind is TtsModelKind.UNKNOWN:
            raise NoCandidateDetectedError(f'TTS: No compatible model type detected in {probe.model_dir}')
    else:
        kind = parse_tts_model_kind(model_type)
        if kind is TtsModelKind.UNKNOWN:
            raise UnknownModelKindError(f'TTS: Unknown model type: {model_type}', model_type)

    missing = probe.missing(kind)
    if missing:
        raise StructuralMismatchError(
            f'TTS: {_LABELS[kind]} model requested but {", ".join(missing)} not found in {probe.model_dir}',
            kind.value,
            missing,
        )
    return kind


class DetectTtsModelUseCase:
    """Scans a directory, decides which TTS architecture it holds and which files to load."""

    def __init__(self, indexer: FileIndexer) -> None:
        self._indexer = indexer

    def execute(self, model_dir: str, model_type: str | None = None) -> TtsDetectResult:
        log.info('DetectTtsModel: model_dir=%s, model_type=%s', model_dir, model_type or 'auto')
        candidates: list[DetectionCandidate] = []
        try:
            probe = self.probe(model_dir)
            candidates = build_candidates(probe)
            kind = select_kind(probe, model_type)
            paths = self._resolve_paths(probe, kind)
        except ModelDetectionError as e:
            log.warning('DetectTtsModel failed: %s', e)
            return TtsDetectResult(error=str(e), candidates=candidates)

        log.info('DetectTtsModel: detection OK for %s, selected kind=%s', model_dir, kind.value)
        return TtsDetectResult(ok=True, candidates=candidates, selected_kind=kind, paths=paths)

    def probe(self, model_dir: str) -> TtsProbe:
        """Index *model_dir* and run every structural probe once."""
        if not model_dir:
            raise EmptyDirectoryError('TTS: Model directory is empty')
        if not self._indexer.is_directory(model_dir):
            raise ModelDirectoryNotFoundError(
                f'TTS: Model directory does not exist or is not a directory: {model_dir}'
            )

        files = self._indexer.list_files(model_dir, MAX_SEARCH_DEPTH)
        log.info('DetectTtsModel: found %d files in %s', len(files), model_dir)
        for f in files:
            log.debug('  file: %s (size=%d)', f.path, f.size)

        def onnx(*tokens: str) -> str | None:
            return find_by_any_token(files, tokens)

        lowered = model_dir.lower()
        probe = TtsProbe(
            model_dir=model_dir,
            tts_model=onnx('model') or find_largest_excluding(files, MODEL_STOPLIST),
            tokens=find_by_exact_name(files, 'tokens.txt'),
            lexicon=find_by_exact_name(files, 'lexicon.txt'),
            data_dir=self._indexer.find_directory(model_dir, DATA_DIR_NAME, MAX_SEARCH_DEPTH),
            voices=find_by_exact_name(files, 'voices.bin'),
            acoustic_model=onnx('acoustic_model', 'acoustic-model'),
            vocoder=onnx('vocoder', 'vocos'),
            encoder=onnx('encoder'),
            decoder=onnx('decoder'),
            lm_flow=onnx('lm_flow', 'lm-flow'),
            lm_main=onnx('lm_main', 'lm-main'),
            text_conditioner=onnx('text_conditioner', 'text-conditioner'),
            vocab_json=find_by_exact_name(files, 'vocab.json'),
            token_scores_json=find_by_exact_name(files, 'token_scores.json'),
            kitten_hint=contains_word(lowered, 'kitten'),
            kokoro_hint=contains_word(lowered, 'kokoro'),
            vits_hint=contains_word(lowered, 'vits'),
        )
        log.info(
            'DetectTtsModel: model=%s, tokens=%s, data_dir=%s, voices=%s, acoustic=%s, vocoder=%s',
            probe.tts_model,
            probe.tokens,
            probe.data_dir,
            probe.voices,
            probe.acoustic_model,
            probe.vocoder,
        )
        return probe

    def _resolve_paths(self, probe: TtsProbe, kind: TtsModelKind) -> TtsModelPaths:
        if kind in _ESPEAK_KINDS:
            if not probe.data_dir or not self._indexer.is_directory(probe.data_dir):
                raise MissingDataDirectoryError(
                    f'TTS: {DATA_DIR_NAME} not found in {probe.model_dir}. '
                    f'Copy {DATA_DIR_NAME} into the model directory.'
                )
            if not probe.tokens or not self._indexer.exists(probe.tokens):
                raise MissingTokensError(f'TTS: tokens.txt not found in {probe.model_dir}')

        fields = {name: getattr(probe, name) for name in _PATH_FIELDS[kind]}
        gone = [name for name in _REQUIRED_FILES[kind] if not self._indexer.exists(fields[name])]
        if gone:
            raise StructuralMismatchError(
                f'TTS: {_LABELS[kind]} model files disappeared from {probe.model_dir}: {", ".join(gone)}',
                kind.value,
                gone,
            )
        return TtsModelPaths(**{name: path for name, path in fields.items() if path})
