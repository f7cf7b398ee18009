"""Fixed byte layout of a basic FITS file.

Reference: FITS Standard 4.0, sections 3.1 and 4.1.
https://fits.gsfc.nasa.gov/standard40/fits_standard40aa-le.pdf

Changing any of these values breaks compatibility with every FITS reader.
"""

from __future__ import annotations


BLOCK_SIZE: int = 2880

CARD_SIZE: int = 80
CARDS_PER_BLOCK: int = BLOCK_SIZE // CARD_SIZE

NAME_SIZE: int = 8
VALUE_INDICATOR: bytes = b"= "
VALUE_INDICATOR_SIZE: int = len(VALUE_INDICATOR)

END_CARD: bytes = b"END".ljust(CARD_SIZE, b" ")

# Keyword names with a fixed meaning for the decoder.
END_KEYWORD = "END"
SIMPLE_KEYWORD = "SIMPLE"
BITPIX_KEYWORD = "BITPIX"
NAXIS_KEYWORD = "NAXIS"
CONTINUE_KEYWORD = "CONTINUE"

CONTINUATION_SENTINEL = "&"
COMMENT_MARKER = "/"
QUOTE = "'"

MAX_NAXIS: int = 999


def axis_keyword(n: int) -> str:
    """Return the extent keyword of axis ``n`` (1-based), e.g. ``NAXIS2``."""

    return f"{NAXIS_KEYWORD}{int(n)}"
