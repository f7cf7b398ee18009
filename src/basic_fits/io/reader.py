from __future__ import annotations

from pathlib import Path
from typing import Any, Union
import logging

from basic_fits.fits import DecodedFits, decode, read_header
from basic_fits.header import Header


log = logging.getLogger(__name__)


def _read_bytes(path: Union[str, Path]) -> bytes:
    path = Path(path).expanduser()
    buf = path.read_bytes()
    log.debug("Read %d bytes from %s", len(buf), path)
    return buf


def read_fits_file(path: Union[str, Path], settings: Any = None) -> DecodedFits:
    """Read the whole file into memory and decode it.

    ``OSError`` from reading and :class:`~basic_fits.errors.FitsDecodeError`
    from decoding propagate unchanged.
    """

    return decode(_read_bytes(path), settings)


def read_fits_header(path: Union[str, Path], settings: Any = None) -> Header:
    """Header only. Still reads the whole file (no partial reads)."""

    return read_header(_read_bytes(path), settings)
