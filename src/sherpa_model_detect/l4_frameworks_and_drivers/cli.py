"""CLI entry point for sherpa-model-detect."""

from __future__ import annotations

import json
import os
import sys

import click
from pydantic import ValidationError

from sherpa_model_detect import __version__
from sherpa_model_detect.l1_entities.config import AppConfig
from sherpa_model_detect.l1_entities.detection import DetectionCandidate
from sherpa_model_detect.l3_interface_adapters.presenters.bridge_presenter import (
    present_stt_result,
    present_tts_result,
)
from sherpa_model_detect.l4_frameworks_and_drivers.container import DependencyContainer
from sherpa_model_detect.l4_frameworks_and_drivers.infra_config import build_app_config
from sherpa_model_detect.l4_frameworks_and_drivers.logging_setup import setup_logging

# Left unchecked: the classifiers report empty and non-directory paths themselves.
_MODEL_DIR = click.Path()


def _load_config(config_path: str | None) -> AppConfig:
    try:
        raw = DependencyContainer.config_loader().load_raw(config_path)
        return build_app_config(raw)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)


def _absolute(model_dir: str) -> str:
    return os.path.abspath(model_dir) if model_dir else model_dir


def _prefer_int8(quantization: str | None, config: AppConfig) -> bool | None:
    """CLI choice wins over config; 'auto' means unset (int8 preferred)."""
    if quantization is None:
        return config.stt.prefer_int8
    return {'auto': None, 'int8': True, 'float': False}[quantization]


def _format_candidates(candidates: list[DetectionCandidate]) -> str:
    return ', '.join(c.kind.value for c in candidates) or '(none)'


def _emit(data: dict, candidates: list[DetectionCandidate], as_json: bool) -> None:
    """Print a presented result; exit 1 when detection failed."""
    if as_json:
        click.echo(json.dumps(data, indent=2, sort_keys=True))
    elif data['success']:
        click.echo(f'Model type: {data["modelType"]}')
        click.echo(f'Candidates: {_format_candidates(candidates)}')
        if 'tokensRequired' in data:
            click.echo(f'Tokens required: {"yes" if data["tokensRequired"] else "no"}')
        width = max((len(k) for k in data['paths']), default=0)
        for key, path in sorted(data['paths'].items()):
            click.echo(f'  {key.ljust(width)}  {path}')
    else:
        click.echo(f'Error: {data["error"]}', err=True)
        if candidates:
            click.echo(f'Candidates: {_format_candidates(candidates)}', err=True)
    if not data['success']:
        sys.exit(1)


@click.group()
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to YAML config file.',
)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context, config_path):
    """sherpa-model-detect -- identify sherpa-onnx STT/TTS model directories and resolve their files."""
    ctx.obj = _load_config(config_path)


@cli.command()
@click.argument('model_dir', type=_MODEL_DIR)
@click.option('-t', '--type', 'model_type', default=None, help="Model type to require, or 'auto'.")
@click.option(
    '-q',
    '--quantization',
    type=click.Choice(['auto', 'int8', 'float']),
    default=None,
    help='Which weights to pick when both int8 and full-precision files exist. auto prefers int8.',
)
@click.option('--debug', is_flag=True, help='Log every indexed file.')
@click.option('--json', 'as_json', is_flag=True, help='Print the bridge map as JSON.')
@click.pass_obj
def stt(config: AppConfig, model_dir, model_type, quantization, debug, as_json):
    """Detect a speech-recognition model in MODEL_DIR."""
    debug = debug or config.stt.debug
    setup_logging(debug)
    result = DependencyContainer().detect_stt.execute(
        _absolute(model_dir),
        _prefer_int8(quantization, config),
        model_type or config.stt.model_type,
        debug=debug,
    )
    json_out = as_json or config.output.format == 'json'
    _emit(present_stt_result(result), result.candidates, json_out)


@cli.command()
@click.argument('model_dir', type=_MODEL_DIR)
@click.option('-t', '--type', 'model_type', default=None, help="Model type to require, or 'auto'.")
@click.option('--debug', is_flag=True, help='Verbose logging.')
@click.option('--json', 'as_json', is_flag=True, help='Print the bridge map as JSON.')
@click.pass_obj
def tts(config: AppConfig, model_dir, model_type, debug, as_json):
    """Detect a speech-synthesis model in MODEL_DIR."""
    setup_logging(debug)
    result = DependencyContainer().detect_tts.execute(_absolute(model_dir), model_type or config.tts.model_type)
    json_out = as_json or config.output.format == 'json'
    _emit(present_tts_result(result), result.candidates, json_out)
