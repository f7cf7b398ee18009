"""Value parser: typed scalars from the value field of a card.

The rules are applied in strict order, first match wins:

1. empty field -> :class:`Undefined`
2. ``/`` first -> :class:`Undefined` (the field only holds a comment)
3. ``'`` first -> :class:`Str` (``''`` is an escaped quote)
4. ``T``/``F`` first -> :class:`Boolean`
5. ``(`` first -> complex literal, raises :class:`UnsupportedLiteral`
6. token up to the first space or ``/``: contains ``.`` -> :class:`Float`,
   only digits and signs -> :class:`Integer`, anything else -> :class:`Undefined`

The order matters: ``'T'`` must be a string and ``T`` a boolean.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union
import re

from basic_fits.errors import UnsupportedLiteral
from basic_fits.layout import COMMENT_MARKER, QUOTE


@dataclass(frozen=True)
class Undefined:
    """A keyword without a value."""


@dataclass(frozen=True)
class Integer:
    value: int


@dataclass(frozen=True)
class Float:
    value: float


@dataclass(frozen=True)
class Str:
    value: str


@dataclass(frozen=True)
class Boolean:
    value: bool


Value = Union[Undefined, Integer, Float, Str, Boolean]

UNDEFINED = Undefined()

_INTEGER_CHARS = frozenset("0123456789+-")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1

# Fixed-format real: mantissa with a point, optional E or D exponent.
_REAL_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+)(?:[EeDd][+-]?\d+)?")


@dataclass(frozen=True)
class ParsedValue:
    """Typed value plus the inline comment (text after ``/``), if any."""

    value: Value
    comment: str | None = None


def _comment_after(rest: str) -> str | None:
    pos = rest.find(COMMENT_MARKER)
    if pos < 0:
        return None
    return rest[pos + 1 :].strip()


def _parse_string(field: str) -> ParsedValue:
    # field[0] is the opening quote
    chars: list[str] = []
    i = 1
    n = len(field)
    closed_at = n
    while i < n:
        ch = field[i]
        if ch == QUOTE:
            if i + 1 < n and field[i + 1] == QUOTE:
                chars.append(QUOTE)
                i += 2
                continue
            closed_at = i
            break
        chars.append(ch)
        i += 1

    # Trailing blanks inside the quotes are padding, leading ones are significant.
    text = "".join(chars).rstrip(" ")
    return ParsedValue(Str(text), _comment_after(field[closed_at + 1 :]))


def _parse_number(field: str) -> ParsedValue:
    cut = len(field)
    for i, ch in enumerate(field):
        if ch == " " or ch == COMMENT_MARKER:
            cut = i
            break
    token, rest = field[:cut], field[cut:]
    comment = _comment_after(rest)

    if "." in token:
        if not _REAL_RE.fullmatch(token):
            return ParsedValue(UNDEFINED, comment)
        # Fortran-style double exponents (1.0D+03) are legal FITS.
        return ParsedValue(Float(float(token.replace("D", "E").replace("d", "e"))), comment)

    if token and all(ch in _INTEGER_CHARS for ch in token):
        try:
            number = int(token)
        except ValueError:
            # e.g. "+-" or "1-2"
            return ParsedValue(UNDEFINED, comment)
        if not _INT64_MIN <= number <= _INT64_MAX:
            return ParsedValue(UNDEFINED, comment)
        return ParsedValue(Integer(number), comment)

    return ParsedValue(UNDEFINED, comment)


def parse_value(field: str) -> ParsedValue:
    """Parse the raw value field of a Value card.

    Raises
    ------
    UnsupportedLiteral
        For parenthesized complex-number literals such as ``(1.0, 2.0)``.
    """

    field = field.strip()
    if not field:
        return ParsedValue(UNDEFINED)

    first = field[0]
    if first == COMMENT_MARKER:
        return ParsedValue(UNDEFINED, field[1:].strip())
    if first == QUOTE:
        return _parse_string(field)
    if first in ("T", "F"):
        return ParsedValue(Boolean(first == "T"), _comment_after(field[1:]))
    if first == "(":
        end = field.find(")")
        literal = field if end < 0 else field[: end + 1]
        raise UnsupportedLiteral(literal)
    return _parse_number(field)


def python_value(value: Value) -> int | float | str | bool | None:
    """Return the plain Python scalar held by ``value`` (None for Undefined)."""

    if isinstance(value, Undefined):
        return None
    return value.value


def format_value(value: Value) -> str:
    """Render ``value`` the way it would appear in a header listing."""

    if isinstance(value, Undefined):
        return ""
    if isinstance(value, Boolean):
        return "T" if value.value else "F"
    if isinstance(value, Str):
        return QUOTE + value.value.replace(QUOTE, QUOTE * 2) + QUOTE
    return repr(value.value) if isinstance(value, Float) else str(value.value)


__all__ = [
    "Boolean",
    "Float",
    "Integer",
    "ParsedValue",
    "Str",
    "UNDEFINED",
    "Undefined",
    "Value",
    "format_value",
    "parse_value",
    "python_value",
]
