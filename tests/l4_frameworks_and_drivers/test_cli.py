"""Tests for the CLI entry point."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from sherpa_model_detect import __version__
from sherpa_model_detect.l4_frameworks_and_drivers.cli import (
    _prefer_int8,  # noqa: PLC2701 -- testing private helper
    cli,
)
from sherpa_model_detect.l4_frameworks_and_drivers.infra_config import build_app_config

TRIPLE = ['encoder.int8.onnx', 'decoder.int8.onnx', 'joiner.int8.onnx', 'tokens.txt']


def _resolved(path: Path) -> str:
    return os.path.abspath(path)


class TestVersion:
    def test_version_flag(self):
        result = CliRunner().invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestSttCommand:
    def test_text_output(self, make_model_dir):
        d = make_model_dir('asr-pack', TRIPLE)
        result = CliRunner().invoke(cli, ['stt', str(d)])
        assert result.exit_code == 0
        assert 'Model type: transducer' in result.output
        assert 'Candidates: transducer' in result.output
        assert 'Tokens required: yes' in result.output
        assert _resolved(d / 'joiner.int8.onnx') in result.output

    def test_json_output(self, make_model_dir):
        d = make_model_dir('asr-pack', TRIPLE)
        result = CliRunner().invoke(cli, ['stt', '--json', str(d)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['success'] is True
        assert data['modelType'] == 'transducer'
        assert data['paths']['encoder'] == _resolved(d / 'encoder.int8.onnx')
        assert data['detectedModels'] == [{'type': 'transducer', 'modelDir': _resolved(d)}]

    def test_explicit_type_and_quantization(self, make_model_dir):
        d = make_model_dir('asr-pack', ['model.onnx', 'model.int8.onnx', 'tokens.txt'])
        result = CliRunner().invoke(cli, ['stt', '--json', '-t', 'ctc', '-q', 'float', str(d)])
        data = json.loads(result.output)
        assert data['modelType'] == 'zipformer_ctc'
        assert data['paths']['ctcModel'] == _resolved(d / 'model.onnx')

    def test_failure_exits_one(self, make_model_dir):
        d = make_model_dir('asr-pack', TRIPLE[:3])
        result = CliRunner().invoke(cli, ['stt', str(d)])
        assert result.exit_code == 1
        assert f'Error: Tokens file not found in {_resolved(d)}' in result.output
        assert 'Candidates: transducer' in result.output

    def test_failure_json_still_printed(self, make_model_dir):
        d = make_model_dir('docs', ['README.md'])
        result = CliRunner().invoke(cli, ['stt', '--json', str(d)])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data['success'] is False
        assert data['error'].startswith('No compatible model type detected')

    def test_missing_directory(self, models_root):
        result = CliRunner().invoke(cli, ['stt', str(models_root / 'nope')])
        assert result.exit_code == 1
        assert 'does not exist or is not a directory' in result.output

    def test_empty_path_is_reported_not_resolved(self, make_model_dir, monkeypatch):
        d = make_model_dir('asr-pack', TRIPLE)
        monkeypatch.chdir(d)
        result = CliRunner().invoke(cli, ['stt', ''])
        assert result.exit_code == 1
        assert 'Error: Model directory is empty' in result.output

    def test_file_path_reported_by_classifier(self, models_root):
        f = models_root / 'model.onnx'
        f.write_bytes(b'\0')
        result = CliRunner().invoke(cli, ['stt', str(f)])
        assert result.exit_code == 1
        assert f'Error: Model directory does not exist or is not a directory: {f}' in result.output

    def test_relative_path_made_absolute(self, make_model_dir, monkeypatch):
        d = make_model_dir('asr-pack', TRIPLE)
        monkeypatch.chdir(d.parent)
        result = CliRunner().invoke(cli, ['stt', '--json', 'asr-pack'])
        assert result.exit_code == 0
        assert json.loads(result.output)['detectedModels'] == [{'type': 'transducer', 'modelDir': _resolved(d)}]

    def test_debug_lists_files(self, make_model_dir):
        d = make_model_dir('asr-pack', TRIPLE)
        result = CliRunner().invoke(cli, ['stt', '--debug', str(d)])
        assert result.exit_code == 0
        assert 'file: ' in result.output

    def test_funasr_reports_tokens_not_required(self, make_model_dir):
        d = make_model_dir(
            'sherpa-onnx-funasr-nano',
            ['encoder_adaptor.onnx', 'llm.onnx', 'embedding.onnx', 'vocab.json'],
        )
        result = CliRunner().invoke(cli, ['stt', str(d)])
        assert 'Model type: funasr_nano' in result.output
        assert 'Tokens required: no' in result.output


class TestTtsCommand:
    def test_text_output(self, make_model_dir):
        d = make_model_dir('tts-voice-pack', ['model.onnx', 'voices.bin', 'tokens.txt'], dirs=['espeak-ng-data'])
        result = CliRunner().invoke(cli, ['tts', str(d)])
        assert result.exit_code == 0
        assert 'Model type: kokoro' in result.output
        assert 'Candidates: kokoro, kitten' in result.output
        assert 'Tokens required' not in result.output

    def test_empty_path(self):
        result = CliRunner().invoke(cli, ['tts', ''])
        assert result.exit_code == 1
        assert 'Error: TTS: Model directory is empty' in result.output

    def test_file_path(self, models_root):
        f = models_root / 'voices.bin'
        f.write_bytes(b'\0')
        result = CliRunner().invoke(cli, ['tts', str(f)])
        assert result.exit_code == 1
        assert 'not a directory' in result.output

    def test_missing_espeak(self, make_model_dir):
        d = make_model_dir('vits-pack', ['model.onnx', 'tokens.txt'])
        result = CliRunner().invoke(cli, ['tts', '--json', str(d)])
        assert result.exit_code == 1
        assert 'espeak-ng-data not found' in json.loads(result.output)['error']


class TestConfigFile:
    def test_config_selects_json_and_float(self, make_model_dir, sample_config_yaml: Path):
        d = make_model_dir('sherpa-onnx-paraformer-zh', ['model.onnx', 'model.int8.onnx', 'tokens.txt'])
        result = CliRunner().invoke(cli, ['-c', str(sample_config_yaml), 'stt', str(d)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['paths']['paraformerModel'] == _resolved(d / 'model.onnx')

    def test_cli_quantization_beats_config(self, make_model_dir, sample_config_yaml: Path):
        d = make_model_dir('sherpa-onnx-paraformer-zh', ['model.onnx', 'model.int8.onnx', 'tokens.txt'])
        result = CliRunner().invoke(cli, ['-c', str(sample_config_yaml), 'stt', '-q', 'int8', str(d)])
        data = json.loads(result.output)
        assert data['paths']['paraformerModel'] == _resolved(d / 'model.int8.onnx')

    def test_config_model_type(self, make_model_dir, tmp_path: Path):
        cfg = tmp_path / 'cfg.yaml'
        cfg.write_text('tts:\n  model_type: kitten\n', encoding='utf-8')
        d = make_model_dir('tts-voice-pack', ['model.onnx', 'voices.bin', 'tokens.txt'], dirs=['espeak-ng-data'])
        result = CliRunner().invoke(cli, ['-c', str(cfg), 'tts', str(d)])
        assert 'Model type: kitten' in result.output

    def test_invalid_config_exits_one(self, tmp_path: Path):
        cfg = tmp_path / 'bad.yaml'
        cfg.write_text('output:\n  format: xml\n', encoding='utf-8')
        result = CliRunner().invoke(cli, ['-c', str(cfg), 'stt', str(tmp_path)])
        assert result.exit_code == 1
        assert 'Error:' in result.output

    def test_non_mapping_config_exits_one(self, tmp_path: Path):
        cfg = tmp_path / 'list.yaml'
        cfg.write_text('- a\n', encoding='utf-8')
        result = CliRunner().invoke(cli, ['-c', str(cfg), 'stt', str(tmp_path)])
        assert result.exit_code == 1
        assert 'mapping at top level' in result.output

    def test_nonexistent_config_is_usage_error(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ['-c', str(tmp_path / 'nope.yaml'), 'stt', str(tmp_path)])
        assert result.exit_code == 2


class TestPreferInt8:
    @pytest.mark.parametrize(('choice', 'expected'), [('auto', None), ('int8', True), ('float', False)])
    def test_cli_choice(self, choice, expected):
        assert _prefer_int8(choice, build_app_config({})) is expected

    def test_falls_back_to_config(self):
        config = build_app_config({'stt': {'prefer_int8': False}})
        assert _prefer_int8(None, config) is False
