"""Domain error types."""

from __future__ import annotations


class ModelDetectionError(Exception):
    """Base class for every reason a model directory cannot be classified."""


class EmptyDirectoryError(ModelDetectionError):
    """Raised when no model directory was given."""


class ModelDirectoryNotFoundError(ModelDetectionError):
    """Raised when the model directory is missing or is not a directory."""


class UnknownModelKindError(ModelDetectionError):
    """Raised when an explicitly requested model type is not in the catalogue."""

    def __init__(self, message: str, model_type: str) -> None:
        super().__init__(message)
        self.model_type = model_type


class StructuralMismatchError(ModelDetectionError):
    """Raised when a requested model kind's files are not all present."""

    def __init__(self, message: str, kind: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.missing = list(missing or [])


class NoCandidateDetectedError(ModelDetectionError):
    """Raised when auto-detection finds no structurally complete model kind."""


class MissingTokensError(ModelDetectionError):
    """Raised when the model files were found but the tokens file was not."""


class MissingDataDirectoryError(ModelDetectionError):
    """Raised when a TTS model needs espeak-ng-data and the directory is absent."""
