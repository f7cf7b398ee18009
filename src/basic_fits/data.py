"""Data decoder: the primary data unit as a flat numpy buffer.

The data unit starts at the first block boundary after the END card and
holds ``prod(axes)`` big-endian elements whose type is given by BITPIX:

======  =========================  =====
BITPIX  element                    bytes
======  =========================  =====
8       unsigned integer           1
16      two's-complement integer   2
32      two's-complement integer   4
64      two's-complement integer   8
-32     IEEE-754 float             4
-64     IEEE-754 float             8
======  =========================  =====

Only codecs enabled in :class:`~basic_fits.config.DecoderSettings` are used;
the rest raise :class:`UnsupportedBitpix` rather than returning garbage.

Axis order
----------
NAXIS1 varies fastest in the file. :meth:`Data.as_array` therefore returns
an array of shape ``(NAXISn, ..., NAXIS2, NAXIS1)`` in C order, the same
convention as :mod:`astropy.io.fits`.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

import numpy as np

from basic_fits.cards import Buffer, iter_blocks
from basic_fits.config import DecoderSettings, settings_from_any
from basic_fits.errors import TruncatedData, UnsupportedBitpix
from basic_fits.header import Bitpix, Header
from basic_fits.layout import BLOCK_SIZE


log = logging.getLogger(__name__)


_WIRE_DTYPES: dict[Bitpix, str] = {
    Bitpix.INT8: ">u1",
    Bitpix.INT16: ">i2",
    Bitpix.INT32: ">i4",
    Bitpix.INT64: ">i8",
    Bitpix.FLOAT32: ">f4",
    Bitpix.FLOAT64: ">f8",
}


def wire_dtype(bitpix: Bitpix) -> np.dtype:
    """Big-endian numpy dtype of one data element."""

    return np.dtype(_WIRE_DTYPES[bitpix])


@dataclass(frozen=True, eq=False)
class Data:
    """Decoded data unit: flat, read-only, native byte order, file order."""

    values: np.ndarray
    axes: tuple[int, ...]
    bitpix: Bitpix

    def __len__(self) -> int:
        return int(self.values.size)

    @property
    def shape(self) -> tuple[int, ...]:
        """numpy shape of :meth:`as_array` (NAXIS1 last)."""

        return tuple(reversed(self.axes))

    def as_array(self) -> np.ndarray:
        """N-dimensional read-only view, NAXIS1 as the last (fastest) axis."""

        return self.values.reshape(self.shape)

    def tolist(self) -> list:
        return self.values.tolist()


def _read_data_bytes(buffer: Buffer, offset: int, expected: int) -> bytes:
    chunks: list[bytes] = []
    remaining = expected
    for block in iter_blocks(buffer, offset):
        take = min(remaining, BLOCK_SIZE)
        # the rest of the last block is padding
        chunks.append(bytes(block[:take]))
        remaining -= take
        if remaining == 0:
            break

    if remaining:
        raise TruncatedData(expected=expected, available=expected - remaining)
    return b"".join(chunks)


def decode_data(
    header: Header,
    buffer: Buffer,
    offset: int,
    settings: DecoderSettings | None = None,
) -> Data | None:
    """Decode the data unit that follows the header.

    Parameters
    ----------
    header
        Validated header (gives BITPIX and the axes).
    buffer
        The complete file content.
    offset
        Byte offset of the first block after the END card.

    Returns
    -------
    Data or None
        None when the header declares no data unit (NAXIS = 0).

    Raises
    ------
    UnsupportedBitpix
        If no codec is enabled for ``header.bitpix``.
    TruncatedData
        If fewer whole blocks are available than the data unit needs.
    """

    if not header.axes:
        return None

    settings = settings_from_any(settings)
    if not settings.is_enabled(header.bitpix.code):
        raise UnsupportedBitpix(header.bitpix.code, header=header)

    expected = header.data_size
    raw = _read_data_bytes(buffer, offset, expected)
    dt = wire_dtype(header.bitpix)
    values = np.frombuffer(raw, dtype=dt).astype(dt.newbyteorder("="))
    values.setflags(write=False)
    log.debug(
        "Decoded %d elements (BITPIX=%d, %d bytes) at offset %d",
        values.size,
        header.bitpix.code,
        expected,
        offset,
    )
    return Data(values=values, axes=header.axes, bitpix=header.bitpix)


__all__ = ["Data", "decode_data", "wire_dtype"]
