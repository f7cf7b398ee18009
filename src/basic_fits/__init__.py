"""basic-fits: decoder for basic (single header+data unit) FITS files.

Main entrypoint: :func:`basic_fits.decode`.
"""

from __future__ import annotations

from .errors import (
    FitsDecodeError,
    InvalidMandatoryKeyword,
    MalformedHeader,
    TruncatedData,
    UnsupportedBitpix,
    UnsupportedLiteral,
)
from .fits import DecodedFits, decode, read_header
from .header import Bitpix, Header, Keyword, KeywordKind, Naxis
from .data import Data
from .config import DecoderSettings
from .version import __version__

__all__ = [
    "__version__",
    "Bitpix",
    "Data",
    "DecodedFits",
    "DecoderSettings",
    "FitsDecodeError",
    "Header",
    "InvalidMandatoryKeyword",
    "Keyword",
    "KeywordKind",
    "MalformedHeader",
    "Naxis",
    "TruncatedData",
    "UnsupportedBitpix",
    "UnsupportedLiteral",
    "decode",
    "read_header",
]
