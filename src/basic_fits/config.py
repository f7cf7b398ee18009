"""Decoder settings (pydantic) and their YAML round-trip.

Defaults reproduce the minimal decoder: only BITPIX=-64 data units are
decoded, every other BITPIX is reported as unsupported. A settings file
looks like::

    enabled_bitpix: [-64, -32, 16]
    continuation_sentinel: "&"
    max_header_blocks: 100
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional
import logging

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from basic_fits.layout import CONTINUATION_SENTINEL


log = logging.getLogger(__name__)

_BITPIX_CODES = (8, 16, 32, 64, -32, -64)


class DecoderSettings(BaseModel):
    """Knobs of :func:`basic_fits.decode`. Immutable once built."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled_bitpix: List[int] = Field(default_factory=lambda: [-64])
    continuation_sentinel: str = CONTINUATION_SENTINEL
    max_header_blocks: Optional[int] = Field(default=None, ge=1)

    @field_validator("enabled_bitpix")
    @classmethod
    def _known_bitpix(cls, v: List[int]) -> List[int]:
        bad = [x for x in v if x not in _BITPIX_CODES]
        if bad:
            raise ValueError(f"unknown BITPIX codes {bad}; allowed: {list(_BITPIX_CODES)}")
        # keep order, drop duplicates
        return list(dict.fromkeys(int(x) for x in v))

    @field_validator("continuation_sentinel")
    @classmethod
    def _single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("continuation_sentinel must be exactly one character")
        return v

    def is_enabled(self, bitpix_code: int) -> bool:
        return int(bitpix_code) in self.enabled_bitpix


DEFAULT_SETTINGS = DecoderSettings()


def load_settings(path: str | Path) -> DecoderSettings:
    """Load settings from a YAML file. An empty file gives the defaults."""

    path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(raw).__name__}")
    settings = DecoderSettings.model_validate(raw)
    log.debug("Loaded decoder settings from %s: %s", path, settings)
    return settings


def settings_from_any(obj: Any) -> DecoderSettings:
    """Accept None, a mapping, a YAML path or a :class:`DecoderSettings`."""

    if obj is None:
        return DEFAULT_SETTINGS
    if isinstance(obj, DecoderSettings):
        return obj
    if isinstance(obj, dict):
        return DecoderSettings.model_validate(obj)
    if isinstance(obj, (str, Path)):
        return load_settings(obj)
    raise TypeError(f"Unsupported settings type: {type(obj)}")


def write_settings(settings: DecoderSettings, out_path: str | Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(settings.model_dump(), f, sort_keys=False, allow_unicode=True)
    return out_path


__all__ = [
    "DEFAULT_SETTINGS",
    "DecoderSettings",
    "load_settings",
    "settings_from_any",
    "write_settings",
]
