"""Detection result entities: candidates, resolved paths and the final verdict."""

from __future__ import annotations

from pydantic import BaseModel, Field

from sherpa_model_detect.l1_entities.model_kind import SttModelKind, TtsModelKind


class DetectionCandidate(BaseModel):
    """A model kind whose structural probes were satisfied in *directory*."""

    kind: SttModelKind | TtsModelKind
    directory: str

    model_config = {'frozen': True}


class SttModelPaths(BaseModel):
    """Absolute file paths for the selected STT kind. Unused fields stay None."""

    encoder: str | None = None
    decoder: str | None = None
    joiner: str | None = None
    paraformer_model: str | None = None
    ctc_model: str | None = None
    whisper_encoder: str | None = None
    whisper_decoder: str | None = None
    tokens: str | None = None
    bpe_vocab: str | None = Field(default=None, description='sentencepiece bpe.vocab used for hotwords')
    funasr_encoder_adaptor: str | None = None
    funasr_llm: str | None = None
    funasr_embedding: str | None = None
    funasr_tokenizer: str | None = Field(default=None, description='Directory holding vocab.json')
    moonshine_preprocessor: str | None = None
    moonshine_encoder: str | None = None
    moonshine_uncached_decoder: str | None = None
    moonshine_cached_decoder: str | None = None
    dolphin_model: str | None = None
    omnilingual_model: str | None = None
    medasr_model: str | None = None
    telespeech_ctc_model: str | None = None
    fire_red_encoder: str | None = None
    fire_red_decoder: str | None = None
    canary_encoder: str | None = None
    canary_decoder: str | None = None

    def populated(self) -> dict[str, str]:
        """Return only the fields that carry a path."""
        return {k: v for k, v in self.model_dump().items() if v}


class TtsModelPaths(BaseModel):
    """Absolute file paths for the selected TTS kind. Unused fields stay None."""

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

    def populated(self) -> dict[str, str]:
        """Return only the fields that carry a path."""
        return {k: v for k, v in self.model_dump().items() if v}


class SttDetectResult(BaseModel):
    ok: bool = False
    error: str | None = None
    candidates: list[DetectionCandidate] = Field(default_factory=list)
    selected_kind: SttModelKind = SttModelKind.UNKNOWN
    tokens_required: bool = True
    paths: SttModelPaths = Field(default_factory=SttModelPaths)


class TtsDetectResult(BaseModel):
    ok: bool = False
    error: str | None = None
    candidates: list[DetectionCandidate] = Field(default_factory=list)
    selected_kind: TtsModelKind = TtsModelKind.UNKNOWN
    paths: TtsModelPaths = Field(default_factory=TtsModelPaths)
