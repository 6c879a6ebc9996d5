"""File index entry entity."""

from __future__ import annotations

from pydantic import BaseModel


class FileEntry(BaseModel):
    """A regular file seen during a directory scan."""

    path: str
    name_lower: str
    size: int = 0

    model_config = {'frozen': True}

    @property
    def is_onnx(self) -> bool:
        return self.name_lower.endswith('.onnx')
