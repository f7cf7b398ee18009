from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from basic_fits.config import (
    DEFAULT_SETTINGS,
    DecoderSettings,
    load_settings,
    settings_from_any,
    write_settings,
)


def test_defaults_decode_float64_only():
    s = DecoderSettings()
    assert s.enabled_bitpix == [-64]
    assert s.is_enabled(-64) and not s.is_enabled(16)
    assert s.continuation_sentinel == "&"
    assert s.max_header_blocks is None


def test_unknown_bitpix_rejected():
    with pytest.raises(ValidationError):
        DecoderSettings(enabled_bitpix=[-64, 12])


def test_duplicates_dropped():
    assert DecoderSettings(enabled_bitpix=[16, -64, 16]).enabled_bitpix == [16, -64]


@pytest.mark.parametrize("sentinel", ["", "&&"])
def test_sentinel_is_one_char(sentinel: str):
    with pytest.raises(ValidationError):
        DecoderSettings(continuation_sentinel=sentinel)


def test_unknown_keys_are_typos():
    with pytest.raises(ValidationError):
        DecoderSettings.model_validate({"enabled_bitpx": [16]})


def test_max_header_blocks_positive():
    with pytest.raises(ValidationError):
        DecoderSettings(max_header_blocks=0)


def test_load_yaml(tmp_path: Path):
    p = tmp_path / "settings.yaml"
    p.write_text("enabled_bitpix: [-64, -32]\nmax_header_blocks: 10\n", encoding="utf-8")
    s = load_settings(p)
    assert s.enabled_bitpix == [-64, -32]
    assert s.max_header_blocks == 10


def test_empty_yaml_gives_defaults(tmp_path: Path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_settings(p) == DEFAULT_SETTINGS


def test_non_mapping_yaml_rejected(tmp_path: Path):
    p = tmp_path / "list.yaml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(p)


def test_write_then_load(tmp_path: Path):
    s = DecoderSettings(enabled_bitpix=[8], continuation_sentinel="~")
    p = write_settings(s, tmp_path / "sub" / "s.yaml")
    assert load_settings(p) == s


def test_settings_from_any(tmp_path: Path):
    assert settings_from_any(None) is DEFAULT_SETTINGS
    s = DecoderSettings(enabled_bitpix=[32])
    assert settings_from_any(s) is s
    assert settings_from_any({"enabled_bitpix": [32]}) == s
    p = tmp_path / "s.yaml"
    p.write_text("enabled_bitpix: [32]\n", encoding="utf-8")
    assert settings_from_any(str(p)) == s
    with pytest.raises(TypeError):
        settings_from_any(42)
