"""Use case: classify a speech-recognition model directory and resolve its files."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from sherpa_model_detect.l1_entities.detection import DetectionCandidate, SttDetectResult, SttModelPaths
from sherpa_model_detect.l1_entities.errors import (
    EmptyDirectoryError,
    MissingTokensError,
    ModelDetectionError,
    ModelDirectoryNotFoundError,
    NoCandidateDetectedError,
    StructuralMismatchError,
    UnknownModelKindError,
)
from sherpa_model_detect.l1_entities.file_entry import FileEntry
from sherpa_model_detect.l1_entities.model_kind import CTC_FAMILY, SttModelKind, is_auto, parse_stt_model_kind
from sherpa_model_detect.l2_use_cases.ports.file_indexer import FileIndexer
from sherpa_model_detect.l2_use_cases.utils.matchers import (
    contains_any_word,
    find_by_any_token,
    find_by_exact_name,
    find_by_suffix,
    find_largest_excluding,
)

log = logging.getLogger('smd.stt')

# Reaches layouts like root/data/lang_bpe_500/tokens.txt (icefall, k2).
MAX_SEARCH_DEPTH = 4

MODEL_STOPLIST = (
    'encoder',
    'decoder',
    'joiner',
    'vocoder',
    'acoustic',
    'embedding',
    'llm',
    'encoder_adaptor',
    'encoder-adaptor',
)

HINT_WORDS: dict[str, tuple[str, ...]] = {
    'nemo': ('nemo', 'parakeet'),
    'tdt': ('tdt',),
    'wenet': ('wenet',),
    'sense_voice': ('sense', 'sensevoice'),
    'funasr': ('funasr', 'funasr-nano'),
    'zipformer': ('zipformer',),
    'moonshine': ('moonshine',),
    'dolphin': ('dolphin',),
    'fire_red': ('fire_red', 'fire-red'),
    'canary': ('canary',),
    'omnilingual': ('omnilingual',),
    'medasr': ('medasr',),
    'telespeech': ('telespeech',),
    'tone': ('tone', 't-one', 't_one'),
}

# A generic model file under one of these hints belongs to a dedicated kind, not to paraformer.
_MODEL_RELABEL_HINTS = (
    'nemo',
    'wenet',
    'sense_voice',
    'zipformer',
    'dolphin',
    'omnilingual',
    'medasr',
    'telespeech',
    'tone',
)


@dataclass(frozen=True)
class SttProbe:
    """Everything one directory scan found, computed once and matched against every kind."""

    model_dir: str
    encoder: str | None = None
    decoder: str | None = None
    joiner: str | None = None
    model: str | None = None
    funasr_encoder_adaptor: str | None = None
    funasr_llm: str | None = None
    funasr_embedding: str | None = None
    funasr_tokenizer: str | None = None
    moonshine_preprocessor: str | None = None
    moonshine_encoder: str | None = None
    moonshine_uncached_decoder: str | None = None
    moonshine_cached_decoder: str | None = None
    tokens: str | None = None
    bpe_vocab: str | None = None
    hints: frozenset[str] = frozenset()

    def hinted(self, *names: str) -> bool:
        return any(name in self.hints for name in names)

    def missing(self, kind: SttModelKind) -> list[str]:
        """What *kind* still needs in this directory. Empty means structurally satisfied."""
        req = STT_REQUIREMENTS[kind]
        problems = [name for name in req.files if getattr(self, name) is None]
        if req.forbids_joiner and self.joiner is not None:
            problems.append('joiner-free layout')
        if req.hint is not None and not self.hinted(req.hint):
            words = "', '".join(HINT_WORDS[req.hint])
            problems.append(f"path word '{words}'")
        return problems

    def satisfies(self, kind: SttModelKind) -> bool:
        return not self.missing(kind)

    @property
    def hinted_ctc_kind(self) -> SttModelKind | None:
        if self.model is None:
            return None
        if self.hinted('nemo'):
            return SttModelKind.NEMO_CTC
        if self.hinted('wenet'):
            return SttModelKind.WENET_CTC
        if self.hinted('sense_voice'):
            return SttModelKind.SENSE_VOICE
        return None

    @property
    def has_paraformer(self) -> bool:
        if not self.satisfies(SttModelKind.PARAFORMER) or self.hinted(*_MODEL_RELABEL_HINTS):
            return False
        return not (self.hinted('moonshine') and self.satisfies(SttModelKind.MOONSHINE))

    @property
    def has_whisper(self) -> bool:
        return self.satisfies(SttModelKind.WHISPER) and not self.hinted('canary', 'fire_red')


@dataclass(frozen=True)
class _Requirement:
    label: str
    files: tuple[str, ...]
    hint: str | None = None
    forbids_joiner: bool = False


_TRANSDUCER_FILES = ('encoder', 'decoder', 'joiner')
_MOONSHINE_FILES = ('moonshine_preprocessor', 'moonshine_encoder', 'moonshine_uncached_decoder', 'moonshine_cached_decoder')

STT_REQUIREMENTS: dict[SttModelKind, _Requirement] = {
    SttModelKind.TRANSDUCER: _Requirement('Transducer', _TRANSDUCER_FILES),
    SttModelKind.NEMO_TRANSDUCER: _Requirement('NeMo Transducer', _TRANSDUCER_FILES),
    SttModelKind.PARAFORMER: _Requirement('Paraformer', ('model',)),
    SttModelKind.NEMO_CTC: _Requirement('NeMo CTC', ('model',)),
    SttModelKind.WENET_CTC: _Requirement('WeNet CTC', ('model',)),
    SttModelKind.SENSE_VOICE: _Requirement('SenseVoice', ('model',)),
    SttModelKind.ZIPFORMER_CTC: _Requirement('Zipformer CTC', ('model',)),
    SttModelKind.TONE_CTC: _Requirement('Tone CTC', ('model',), hint='tone'),
    SttModelKind.WHISPER: _Requirement('Whisper', ('encoder', 'decoder'), forbids_joiner=True),
    SttModelKind.CANARY: _Requirement('Canary', ('encoder', 'decoder'), hint='canary', forbids_joiner=True),
    SttModelKind.FIRE_RED_ASR: _Requirement('FireRed ASR', ('encoder', 'decoder'), hint='fire_red'),
    SttModelKind.FUNASR_NANO: _Requirement(
        'FunASR Nano',
        ('funasr_encoder_adaptor', 'funasr_llm', 'funasr_embedding', 'funasr_tokenizer'),
    ),
    SttModelKind.MOONSHINE: _Requirement('Moonshine', _MOONSHINE_FILES),
    SttModelKind.DOLPHIN: _Requirement('Dolphin', ('model',), hint='dolphin'),
    SttModelKind.OMNILINGUAL: _Requirement('Omnilingual', ('model',), hint='omnilingual'),
    SttModelKind.MEDASR: _Requirement('MedASR', ('model',), hint='medasr'),
    SttModelKind.TELESPEECH_CTC: _Requirement('TeleSpeech CTC', ('model',), hint='telespeech'),
}


def _sat(kind: SttModelKind) -> Callable[[SttProbe], bool]:
    return lambda p: p.satisfies(kind)


# Auto-selection order. The first matching row wins.
AUTO_PRIORITY: tuple[tuple[SttModelKind, Callable[[SttProbe], bool]], ...] = (
    (SttModelKind.NEMO_TRANSDUCER, lambda p: p.satisfies(SttModelKind.TRANSDUCER) and p.hinted('nemo', 'tdt')),
    (SttModelKind.TRANSDUCER, _sat(SttModelKind.TRANSDUCER)),
    (SttModelKind.NEMO_CTC, lambda p: p.hinted_ctc_kind is SttModelKind.NEMO_CTC),
    (SttModelKind.WENET_CTC, lambda p: p.hinted_ctc_kind is SttModelKind.WENET_CTC),
    (SttModelKind.SENSE_VOICE, lambda p: p.hinted_ctc_kind is SttModelKind.SENSE_VOICE),
    (SttModelKind.FUNASR_NANO, lambda p: p.satisfies(SttModelKind.FUNASR_NANO) and p.hinted('funasr')),
    (SttModelKind.PARAFORMER, lambda p: p.has_paraformer),
    (SttModelKind.CANARY, _sat(SttModelKind.CANARY)),
    (SttModelKind.FIRE_RED_ASR, _sat(SttModelKind.FIRE_RED_ASR)),
    (SttModelKind.WHISPER, _sat(SttModelKind.WHISPER)),
    (SttModelKind.FUNASR_NANO, _sat(SttModelKind.FUNASR_NANO)),
    (SttModelKind.MOONSHINE, lambda p: p.satisfies(SttModelKind.MOONSHINE) and p.hinted('moonshine')),
    (SttModelKind.DOLPHIN, _sat(SttModelKind.DOLPHIN)),
    (SttModelKind.OMNILINGUAL, _sat(SttModelKind.OMNILINGUAL)),
    (SttModelKind.MEDASR, _sat(SttModelKind.MEDASR)),
    (SttModelKind.TELESPEECH_CTC, _sat(SttModelKind.TELESPEECH_CTC)),
    (SttModelKind.TONE_CTC, _sat(SttModelKind.TONE_CTC)),
    (SttModelKind.ZIPFORMER_CTC, _sat(SttModelKind.ZIPFORMER_CTC)),
)

# Result field -> probe attribute, per selected kind.
_PATH_FIELDS: dict[SttModelKind, dict[str, str]] = {
    SttModelKind.TRANSDUCER: {'encoder': 'encoder', 'decoder': 'decoder', 'joiner': 'joiner'},
    SttModelKind.NEMO_TRANSDUCER: {'encoder': 'encoder', 'decoder': 'decoder', 'joiner': 'joiner'},
    SttModelKind.PARAFORMER: {'paraformer_model': 'model'},
    **{kind: {'ctc_model': 'model'} for kind in CTC_FAMILY},
    SttModelKind.WHISPER: {'whisper_encoder': 'encoder', 'whisper_decoder': 'decoder'},
    SttModelKind.FUNASR_NANO: {
        'funasr_encoder_adaptor': 'funasr_encoder_adaptor',
        'funasr_llm': 'funasr_llm',
        'funasr_embedding': 'funasr_embedding',
        'funasr_tokenizer': 'funasr_tokenizer',
    },
    SttModelKind.MOONSHINE: {name: name for name in _MOONSHINE_FILES},
    SttModelKind.DOLPHIN: {'dolphin_model': 'model'},
    SttModelKind.FIRE_RED_ASR: {'fire_red_encoder': 'encoder', 'fire_red_decoder': 'decoder'},
    SttModelKind.CANARY: {'canary_encoder': 'encoder', 'canary_decoder': 'decoder'},
    SttModelKind.OMNILINGUAL: {'omnilingual_model': 'model'},
    SttModelKind.MEDASR: {'medasr_model': 'model'},
    SttModelKind.TELESPEECH_CTC: {'telespeech_ctc_model': 'model'},
}


def _resolve_tokenizer_dir(files: list[FileEntry], model_dir: str) -> str | None:
    """Directory holding the FunASR-Nano ``vocab.json``: the model dir itself or a ``*qwen3*`` subdir."""
    root = os.path.normpath(model_dir)
    nested: str | None = None
    for entry in files:
        if entry.name_lower != 'vocab.json':
            continue
        parent = os.path.dirname(entry.path)
        if os.path.normpath(parent) == root:
            return parent
        if nested is None and 'qwen3' in os.path.basename(parent).lower():
            nested = parent
    return nested


def _detect_hints(model_dir: str) -> frozenset[str]:
    lowered = model_dir.lower()
    return frozenset(name for name, words in HINT_WORDS.items() if contains_any_word(lowered, words))


def build_candidates(probe: SttProbe) -> list[DetectionCandidate]:
    """Every kind the directory structurally satisfies, in detection order."""
    kinds: list[SttModelKind] = []
    if probe.satisfies(SttModelKind.TRANSDUCER):
        nemo = probe.hinted('nemo', 'tdt')
        kinds.append(SttModelKind.NEMO_TRANSDUCER if nemo else SttModelKind.TRANSDUCER)
    ctc_kind = probe.hinted_ctc_kind
    if ctc_kind is not None:
        kinds.append(ctc_kind)
    elif probe.has_paraformer:
        kinds.append(SttModelKind.PARAFORMER)
    elif probe.hinted('zipformer') and probe.satisfies(SttModelKind.ZIPFORMER_CTC):
        kinds.append(SttModelKind.ZIPFORMER_CTC)
    if probe.has_whisper:
        kinds.append(SttModelKind.WHISPER)
    for kind in (
        SttModelKind.FUNASR_NANO,
        SttModelKind.MOONSHINE,
        SttModelKind.DOLPHIN,
        SttModelKind.FIRE_RED_ASR,
        SttModelKind.CANARY,
        SttModelKind.OMNILINGUAL,
        SttModelKind.MEDASR,
        SttModelKind.TELESPEECH_CTC,
        SttModelKind.TONE_CTC,
    ):
        if probe.satisfies(kind):
            kinds.append(kind)
    return [DetectionCandidate(kind=kind, directory=probe.model_dir) for kind in kinds]


def select_kind(probe: SttProbe, model_type: str | None) -> SttModelKind:
    """Validate an explicit *model_type*, or pick one by auto priority. Raises on failure."""
    if not is_auto(model_type):
        kind = parse_stt_model_kind(model_type)
        if kind is SttModelKind.UNKNOWN:
            raise UnknownModelKindError(f'Unknown model type: {model_type}', model_type)
        missing = probe.missing(kind)
        if missing:
            label = STT_REQUIREMENTS[kind].label
            raise StructuralMismatchError(
                f'{label} model requested but {", ".join(missing)} not found in {probe.model_dir}',
                kind.value,
                missing,
            )
        return kind

    for kind, matches in AUTO_PRIORITY:
        if matches(probe):
            return kind
    raise NoCandidateDetectedError(f'No compatible model type detected in {probe.model_dir}')


class DetectSttModelUseCase:
    """Scans a directory, decides which STT architecture it holds and which files to load.

    Failures never escape ``execute()``; they come back as ``SttDetectResult(ok=False)``
    with a message naming the directory.
    """

    def __init__(self, indexer: FileIndexer) -> None:
        self._indexer = indexer

    def execute(
        self,
        model_dir: str,
        prefer_int8: bool | None = None,
        model_type: str | None = None,
        *,
        debug: bool = False,
    ) -> SttDetectResult:
        log.info(
            'DetectSttModel: model_dir=%s, model_type=%s, prefer_int8=%s',
            model_dir,
            model_type or 'auto',
            'unset' if prefer_int8 is None else prefer_int8,
        )
        candidates: list[DetectionCandidate] = []
        try:
            probe = self.probe(model_dir, prefer_int8, debug=debug)
            candidates = build_candidates(probe)
            kind = select_kind(probe, model_type)
            log.info('DetectSttModel: selected kind=%s', kind.value)
            tokens_required = kind is not SttModelKind.FUNASR_NANO
            paths = self._resolve_paths(probe, kind, tokens_required)
        except ModelDetectionError as e:
            log.warning('DetectSttModel failed: %s', e)
            return SttDetectResult(error=str(e), candidates=candidates)

        log.info('DetectSttModel: detection OK for %s, tokens=%s', model_dir, paths.tokens)
        return SttDetectResult(
            ok=True,
            candidates=candidates,
            selected_kind=kind,
            tokens_required=tokens_required,
            paths=paths,
        )

    def probe(self, model_dir: str, prefer_int8: bool | None = None, *, debug: bool = False) -> SttProbe:
        """Index *model_dir* and run every structural probe once."""
        if not model_dir:
            raise EmptyDirectoryError('Model directory is empty')
        if not self._indexer.is_directory(model_dir):
            raise ModelDirectoryNotFoundError(f'Model directory does not exist or is not a directory: {model_dir}')

        files = self._indexer.list_files(model_dir, MAX_SEARCH_DEPTH)
        log.info('DetectSttModel: found %d files in %s', len(files), model_dir)
        if debug:
            for f in files:
                log.info('  file: %s (size=%d)', f.path, f.size)

        def onnx(*tokens: str) -> str | None:
            return find_by_any_token(files, tokens, prefer_int8)

        model = onnx('model') or find_largest_excluding(files, MODEL_STOPLIST)
        probe = SttProbe(
            model_dir=model_dir,
            encoder=onnx('encoder'),
            decoder=onnx('decoder'),
            joiner=onnx('joiner'),
            model=model,
            funasr_encoder_adaptor=onnx('encoder_adaptor', 'encoder-adaptor'),
            funasr_llm=onnx('llm'),
            funasr_embedding=onnx('embedding'),
            funasr_tokenizer=_resolve_tokenizer_dir(files, model_dir),
            moonshine_preprocessor=onnx('preprocess', 'preprocessor'),
            moonshine_encoder=onnx('encode'),
            moonshine_uncached_decoder=onnx('uncached_decode', 'uncached'),
            moonshine_cached_decoder=onnx('cached_decode', 'cached'),
            tokens=find_by_suffix(files, 'tokens.txt'),
            bpe_vocab=find_by_exact_name(files, 'bpe.vocab'),
            hints=_detect_hints(model_dir),
        )
        log.info(
            'DetectSttModel: encoder=%s, decoder=%s, joiner=%s, model=%s, tokens=%s, hints=%s',
            probe.encoder,
            probe.decoder,
            probe.joiner,
            probe.model,
            probe.tokens,
            sorted(probe.hints),
        )
        return probe

    def _resolve_paths(self, probe: SttProbe, kind: SttModelKind, tokens_required: bool) -> SttModelPaths:
        fields = {field: getattr(probe, attr) for field, attr in _PATH_FIELDS[kind].items()}
        missing = [field for field, path in fields.items() if not path or not self._indexer.exists(path)]
        if missing:
            raise StructuralMismatchError(
                f'{STT_REQUIREMENTS[kind].label} model files disappeared from {probe.model_dir}: {", ".join(missing)}',
                kind.value,
                missing,
            )

        if probe.tokens and self._indexer.exists(probe.tokens):
            fields['tokens'] = probe.tokens
        elif tokens_required:
            raise MissingTokensError(f'Tokens file not found in {probe.model_dir}')

        if probe.bpe_vocab and self._indexer.exists(probe.bpe_vocab):
            fields['bpe_vocab'] = probe.bpe_vocab
        return SttModelPaths(**fields)
