"""Gateway: YAML configuration loader, implements the ConfigLoader port."""

from __future__ import annotations

from pathlib import Path

import yaml

from sherpa_model_detect.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS


class YamlConfigLoader:
    """Reads detection settings from an explicit YAML file or the per-user default one."""

    def load_raw(self, config_path: str | None = None) -> dict:
        """Return the YAML data as a raw dict (before defaults and Pydantic validation)."""
        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f'Config file not found: {path}')
            return _read_mapping(path)
        existing = next((p for p in DEFAULT_CONFIG_PATHS if p.exists()), None)
        return _read_mapping(existing) if existing is not None else {}


def _read_mapping(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    if not isinstance(data, dict):
        raise ValueError(f'Config file must contain a mapping at top level: {path}')
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
