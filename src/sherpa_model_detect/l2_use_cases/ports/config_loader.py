"""Port: configuration loader."""

from __future__ import annotations

from typing import Protocol


class ConfigLoader(Protocol):
    """Abstract source of user settings."""

    def load_raw(self, config_path: str | None = None) -> dict:
        """Return the user's settings before defaults and validation are applied."""
        ...
