"""Configuration Pydantic models, pure schema, no infrastructure defaults."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class SttDetectConfig(BaseModel):
    model_type: str
    prefer_int8: bool | None = None  # None = auto, quantized weights preferred
    debug: bool


class TtsDetectConfig(BaseModel):
    model_type: str


class OutputConfig(BaseModel):
    format: Literal['text', 'json']


class AppConfig(BaseModel):
    stt: SttDetectConfig
    tts: TtsDetectConfig
    output: OutputConfig
