"""Built-in configuration defaults. Lives in L4, not domain."""

from __future__ import annotations

import copy

from sherpa_model_detect.l1_entities.config import AppConfig
from sherpa_model_detect.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'stt': {
        'model_type': 'auto',
        'prefer_int8': None,
        'debug': False,
    },
    'tts': {
        'model_type': 'auto',
    },
    'output': {
        'format': 'text',
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)
