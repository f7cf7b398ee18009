from __future__ import annotations

import numpy as np
import pytest

from basic_fits.config import DecoderSettings
from basic_fits.data import decode_data, wire_dtype
from basic_fits.errors import TruncatedData, UnsupportedBitpix
from basic_fits.header import Bitpix, Header, Naxis
from basic_fits.layout import BLOCK_SIZE

from fitsgen import pad

ALL_BITPIX = DecoderSettings(enabled_bitpix=[8, 16, 32, 64, -32, -64])


def _header(bitpix: int, axes: tuple[int, ...]) -> Header:
    return Header(simple=True, bitpix=Bitpix.from_code(bitpix), naxis=Naxis(len(axes)), axes=axes)


def _buffer(raw: bytes) -> bytes:
    # one fake header block, then the data unit
    return b" " * BLOCK_SIZE + pad(raw)


def test_no_axes_no_data():
    assert decode_data(_header(-64, ()), b"", BLOCK_SIZE) is None


def test_zero_axis_length_rejected():
    with pytest.raises(ValueError):
        _header(-64, (3, 0))


def test_float64_flat_in_file_order():
    raw = np.array([1.0, 2.0, -3.5], dtype=">f8").tobytes()
    d = decode_data(_header(-64, (3,)), _buffer(raw), BLOCK_SIZE)
    assert d is not None
    assert d.tolist() == [1.0, 2.0, -3.5]
    assert len(d) == 3
    assert d.values.dtype == np.float64
    assert d.values.dtype.isnative


def test_padding_is_not_data():
    raw = np.array([7.0], dtype=">f8").tobytes()
    buf = b" " * BLOCK_SIZE + raw + np.array([9.0] * 359, dtype=">f8").tobytes()
    d = decode_data(_header(-64, (1,)), buf, BLOCK_SIZE)
    assert d.tolist() == [7.0]


def test_data_spanning_blocks():
    values = np.arange(500, dtype=np.float64)  # 4000 bytes -> 2 blocks
    d = decode_data(_header(-64, (500,)), _buffer(values.astype(">f8").tobytes()), BLOCK_SIZE)
    np.testing.assert_array_equal(d.values, values)


def test_truncated_data():
    values = np.arange(500, dtype=np.float64)
    buf = _buffer(values.astype(">f8").tobytes())
    with pytest.raises(TruncatedData) as e:
        decode_data(_header(-64, (500,)), buf[:-1], BLOCK_SIZE)
    assert e.value.expected == 4000
    assert e.value.available == BLOCK_SIZE
    assert e.value.code == "TRUNCATED_DATA"


def test_missing_padding_is_truncated():
    values = np.arange(500, dtype=np.float64)
    buf = _buffer(values.astype(">f8").tobytes())
    # all 4000 data bytes are there, the last block is not
    with pytest.raises(TruncatedData) as e:
        decode_data(_header(-64, (500,)), buf[: BLOCK_SIZE + 4000], BLOCK_SIZE)
    assert e.value.available == BLOCK_SIZE


def test_missing_data_unit_is_truncated():
    with pytest.raises(TruncatedData) as e:
        decode_data(_header(-64, (2,)), b" " * BLOCK_SIZE, BLOCK_SIZE)
    assert e.value.available == 0


@pytest.mark.parametrize("bitpix", [8, 16, 32, 64, -32])
def test_other_bitpix_unsupported_by_default(bitpix: int):
    h = _header(bitpix, (2,))
    with pytest.raises(UnsupportedBitpix) as e:
        decode_data(h, _buffer(b"\0" * 16), BLOCK_SIZE)
    assert e.value.bitpix == bitpix
    assert e.value.header is h


@pytest.mark.parametrize(
    "bitpix, values",
    [
        (8, [0, 1, 255]),
        (16, [-32768, -1, 0, 32767]),
        (32, [-(2**31), 123456, 2**31 - 1]),
        (64, [-(2**63), 42, 2**63 - 1]),
        (-32, [1.5, -0.25, float("inf")]),
        (-64, [1e300, -2.0]),
    ],
)
def test_enabled_codecs(bitpix: int, values: list):
    bp = Bitpix.from_code(bitpix)
    raw = np.array(values, dtype=wire_dtype(bp)).tobytes()
    d = decode_data(_header(bitpix, (len(values),)), _buffer(raw), BLOCK_SIZE, ALL_BITPIX)
    assert d.bitpix is bp
    assert d.tolist() == values


def test_big_endian_on_the_wire():
    raw = b"\x01\x02" + b"\xff\xfe"
    d = decode_data(_header(16, (2,)), _buffer(raw), BLOCK_SIZE, ALL_BITPIX)
    assert d.tolist() == [0x0102, -2]


def test_as_array_is_fastest_axis_last():
    # NAXIS1=3 (fastest), NAXIS2=2
    raw = np.arange(6, dtype=">f8").tobytes()
    d = decode_data(_header(-64, (3, 2)), _buffer(raw), BLOCK_SIZE)
    a = d.as_array()
    assert d.shape == (2, 3)
    assert a.shape == (2, 3)
    assert a[0].tolist() == [0.0, 1.0, 2.0]
    assert a[1, 0] == 3.0


def test_data_is_read_only():
    raw = np.arange(4, dtype=">f8").tobytes()
    d = decode_data(_header(-64, (2, 2)), _buffer(raw), BLOCK_SIZE)
    with pytest.raises(ValueError):
        d.values[0] = 1.0
    with pytest.raises(ValueError):
        d.as_array()[0, 0] = 1.0
