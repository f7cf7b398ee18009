"""Single entry point: bytes in, (Header, Data | None) out.

Only basic FITS files are handled, i.e. a primary header+data unit. Any
extensions after it are ignored.

The functions here are pure: they never modify the buffer, keep no state
between calls and can run concurrently on independent buffers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import logging

from basic_fits.cards import Buffer, read_cards
from basic_fits.config import settings_from_any
from basic_fits.data import Data, decode_data
from basic_fits.header import Header, assemble_keywords


log = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class DecodedFits:
    """A decoded primary unit. ``data`` is None when there is no data unit."""

    header: Header
    data: Data | None = None

    def __iter__(self):
        # allows ``header, data = decode(buf)``
        yield self.header
        yield self.data


def _read_header(buffer: Buffer, settings) -> tuple[Header, int]:
    hc = read_cards(buffer, max_blocks=settings.max_header_blocks)
    keywords = assemble_keywords(hc.cards, sentinel=settings.continuation_sentinel)
    header = Header.from_keywords(keywords)
    log.debug(
        "Header: %d keywords in %d blocks, BITPIX=%d, axes=%s",
        len(header.keywords),
        hc.n_blocks,
        header.bitpix.code,
        header.axes,
    )
    return header, hc.data_offset


def read_header(buffer: Buffer, settings: Any = None) -> Header:
    """Decode only the header; works for every valid BITPIX.

    Raises
    ------
    MalformedHeader, InvalidMandatoryKeyword, UnsupportedLiteral
    """

    header, _offset = _read_header(buffer, settings_from_any(settings))
    return header


def decode(buffer: Buffer, settings: Any = None) -> DecodedFits:
    """Decode a complete basic FITS file held in memory.

    Parameters
    ----------
    buffer
        The whole file content (``bytes``, ``bytearray`` or ``memoryview``).
    settings
        Anything :func:`basic_fits.config.settings_from_any` accepts.

    Raises
    ------
    FitsDecodeError
        One of MalformedHeader, InvalidMandatoryKeyword, UnsupportedLiteral,
        UnsupportedBitpix or TruncatedData.
    """

    settings = settings_from_any(settings)
    header, offset = _read_header(buffer, settings)
    data = decode_data(header, buffer, offset, settings)
    return DecodedFits(header=header, data=data)


__all__ = ["DecodedFits", "decode", "read_header"]
