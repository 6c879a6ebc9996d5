"""L1 entity: model architecture catalogues for speech recognition and synthesis."""

from __future__ import annotations

import enum


class SttModelKind(enum.Enum):
    UNKNOWN = 'unknown'
    TRANSDUCER = 'transducer'
    NEMO_TRANSDUCER = 'nemo_transducer'
    PARAFORMER = 'paraformer'
    NEMO_CTC = 'nemo_ctc'
    WENET_CTC = 'wenet_ctc'
    SENSE_VOICE = 'sense_voice'
    ZIPFORMER_CTC = 'zipformer_ctc'
    WHISPER = 'whisper'
    FUNASR_NANO = 'funasr_nano'
    FIRE_RED_ASR = 'fire_red_asr'
    MOONSHINE = 'moonshine'
    DOLPHIN = 'dolphin'
    CANARY = 'canary'
    OMNILINGUAL = 'omnilingual'
    MEDASR = 'medasr'
    TELESPEECH_CTC = 'telespeech_ctc'
    TONE_CTC = 'tone_ctc'


class TtsModelKind(enum.Enum):
    UNKNOWN = 'unknown'
    VITS = 'vits'
    MATCHA = 'matcha'
    KOKORO = 'kokoro'
    KITTEN = 'kitten'
    POCKET = 'pocket'
    ZIPVOICE = 'zipvoice'


# Legacy names still sent by older host apps.
_STT_ALIASES = {
    'zipformer': SttModelKind.TRANSDUCER,
    'ctc': SttModelKind.ZIPFORMER_CTC,
}

CTC_FAMILY = frozenset(
    {
        SttModelKind.NEMO_CTC,
        SttModelKind.WENET_CTC,
        SttModelKind.SENSE_VOICE,
        SttModelKind.ZIPFORMER_CTC,
        SttModelKind.TONE_CTC,
    }
)


def parse_stt_model_kind(name: str) -> SttModelKind:
    """Map a model type string to its kind. Unrecognised names map to UNKNOWN."""
    key = name.strip().lower()
    if key in _STT_ALIASES:
        return _STT_ALIASES[key]
    try:
        return SttModelKind(key)
    except ValueError:
        return SttModelKind.UNKNOWN


def parse_tts_model_kind(name: str) -> TtsModelKind:
    """Map a model type string to its kind. Unrecognised names map to UNKNOWN."""
    try:
        return TtsModelKind(name.strip().lower())
    except ValueError:
        return TtsModelKind.UNKNOWN


def is_auto(model_type: str | None) -> bool:
    return model_type is None or model_type.strip().lower() in {'', 'auto'}
