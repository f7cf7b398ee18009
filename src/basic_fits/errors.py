"""Decode errors.

Every failure of :func:`basic_fits.decode` is a :class:`FitsDecodeError`
subclass with a stable ``code``. We do *not* return partially valid
header/data pairs: the caller either gets a complete result or one of these.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from basic_fits.header import Header


class FitsDecodeError(ValueError):
    """Base class for all decode failures."""

    code: str = "FITS_DECODE_ERROR"

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        self.message = str(message)
        self.context = context or {}
        base = f"[{self.code}] {self.message}"
        if self.context:
            # keep short & readable
            ctx = ", ".join(f"{k}={v!r}" for k, v in list(self.context.items())[:8])
            base += f" | ctx: {ctx}"
        super().__init__(base)


class MalformedHeader(FitsDecodeError):
    """No END card was found before the buffer ran out."""

    code = "MALFORMED_HEADER"


class InvalidMandatoryKeyword(FitsDecodeError):
    """NAXIS, BITPIX or NAXISn is missing, wrongly typed or out of range."""

    code = "INVALID_MANDATORY_KEYWORD"

    def __init__(self, key: str, message: str, *, value: Any = None):
        self.key = str(key)
        self.value = value
        super().__init__(f"{self.key}: {message}", context={"value": value} if value is not None else None)


class UnsupportedBitpix(FitsDecodeError):
    """BITPIX is valid but no codec is enabled for it.

    The header itself is fine and is attached as :attr:`header` so callers
    can still show it.
    """

    code = "UNSUPPORTED_BITPIX"

    def __init__(self, bitpix: int, *, header: "Header | None" = None):
        self.bitpix = int(bitpix)
        self.header = header
        super().__init__(f"no data codec enabled for BITPIX={self.bitpix}")


class TruncatedData(FitsDecodeError):
    """The data unit is shorter than BITPIX and NAXISn declare."""

    code = "TRUNCATED_DATA"

    def __init__(self, *, expected: int, available: int):
        self.expected = int(expected)
        self.available = int(available)
        super().__init__(
            f"data unit needs {self.expected} bytes but only {self.available} are available"
        )


class UnsupportedLiteral(FitsDecodeError):
    """A value literal the parser recognizes but does not support (complex numbers)."""

    code = "UNSUPPORTED_LITERAL"

    def __init__(self, literal: str, *, key: str | None = None):
        self.literal = str(literal)
        self.key = key
        where = f"{key}: " if key else ""
        super().__init__(f"{where}unsupported value literal {self.literal!r}")

    def with_key(self, key: str) -> "UnsupportedLiteral":
        """Return a copy of this error that names the offending keyword."""

        return UnsupportedLiteral(self.literal, key=key)


__all__ = [
    "FitsDecodeError",
    "MalformedHeader",
    "InvalidMandatoryKeyword",
    "UnsupportedBitpix",
    "TruncatedData",
    "UnsupportedLiteral",
]
