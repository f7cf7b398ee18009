"""Header assembler.

Turns classified cards into typed keywords, merges long-string
continuations and extracts the mandatory fields (SIMPLE, BITPIX, NAXIS,
NAXISn) into an immutable :class:`Header`.

Continuation cards
------------------
A string that does not fit in one card ends with ``&`` and continues in the
next ``CONTINUE`` card::

    LONGSTR = 'abc&'       / first part of the comment &
    CONTINUE  'def'        / and the rest

The two cards are merged into one keyword ``LONGSTR = 'abcdef'``. A
``CONTINUE`` card without a suitable predecessor is kept as a standalone
keyword of kind ``CONTINUE``; the header stays usable.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from functools import reduce
from typing import Any, Iterable, Iterator
import logging
import operator

from basic_fits.cards import Card, CardKind
from basic_fits.errors import InvalidMandatoryKeyword, UnsupportedLiteral
from basic_fits.layout import (
    BITPIX_KEYWORD,
    CONTINUATION_SENTINEL,
    CONTINUE_KEYWORD,
    MAX_NAXIS,
    NAXIS_KEYWORD,
    NAME_SIZE,
    QUOTE,
    SIMPLE_KEYWORD,
    axis_keyword,
)
from basic_fits.values import (
    UNDEFINED,
    Boolean,
    Integer,
    ParsedValue,
    Str,
    Undefined,
    Value,
    format_value,
    parse_value,
    python_value,
)


log = logging.getLogger(__name__)


# -----------------------------
# Bounded mandatory fields
# -----------------------------


class Bitpix(Enum):
    """Data type of the data unit (FITS Standard 4.0, table 8)."""

    INT8 = 8
    INT16 = 16
    INT32 = 32
    INT64 = 64
    FLOAT32 = -32
    FLOAT64 = -64

    @classmethod
    def from_code(cls, code: int) -> "Bitpix":
        """Return the member for a BITPIX code or raise ``ValueError``."""

        try:
            return cls(int(code))
        except ValueError:
            allowed = ", ".join(str(m.value) for m in cls)
            raise ValueError(f"BITPIX={code!r} is not one of {{{allowed}}}") from None

    @property
    def code(self) -> int:
        return int(self.value)

    @property
    def itemsize(self) -> int:
        """Element width in bytes."""

        return abs(self.value) // 8

    @property
    def is_float(self) -> bool:
        return self.value < 0


class Naxis(int):
    """Number of axes, an ``int`` restricted to ``0..=999``."""

    def __new__(cls, value: int) -> "Naxis":
        n = int(value)
        if not 0 <= n <= MAX_NAXIS:
            raise ValueError(f"NAXIS={n} is outside 0..{MAX_NAXIS}")
        return super().__new__(cls, n)

    def __repr__(self) -> str:
        return f"Naxis({int(self)})"


# -----------------------------
# Keywords
# -----------------------------


class KeywordKind(str, Enum):
    VALUE = "VALUE"
    COMMENTARY = "COMMENTARY"
    CONTINUE = "CONTINUE"


@dataclass(frozen=True)
class Keyword:
    """One header entry.

    ``VALUE`` and ``CONTINUE`` keywords carry a typed :attr:`value` and an
    optional inline :attr:`comment`; ``COMMENTARY`` keywords only carry the
    raw :attr:`text` that followed the name.
    """

    name: str
    kind: KeywordKind = KeywordKind.VALUE
    value: Value = UNDEFINED
    comment: str | None = None
    text: str = ""

    @property
    def has_value(self) -> bool:
        return self.kind is not KeywordKind.COMMENTARY and not isinstance(self.value, Undefined)

    def format(self) -> str:
        """One listing line, e.g. ``NAXIS1  = 3 / length of axis 1``."""

        if self.kind is KeywordKind.COMMENTARY:
            return f"{self.name:<{NAME_SIZE}}{self.text.rstrip()}"
        sep = "  " if self.kind is KeywordKind.CONTINUE else "= "
        line = f"{self.name:<{NAME_SIZE}}{sep}{format_value(self.value)}"
        if self.comment:
            line += f" / {self.comment}"
        return line


def _is_continuable(kw: Keyword, sentinel: str) -> bool:
    return (
        kw.kind is not KeywordKind.COMMENTARY
        and isinstance(kw.value, Str)
        and kw.value.value.endswith(sentinel)
    )


def _strip_sentinel(text: str | None, sentinel: str) -> str | None:
    if text is not None and text.endswith(sentinel):
        return text[: -len(sentinel)]
    return text


def _join_comments(first: str | None, second: str | None) -> str | None:
    if first is None and second is None:
        return None
    return (first or "") + (second or "")


def _continue(keywords: list[Keyword], parsed: ParsedValue, sentinel: str) -> None:
    """Merge a CONTINUE string into the previous keyword, in place.

    ``parsed.value`` is always a :class:`Str` here.
    """

    if keywords and _is_continuable(keywords[-1], sentinel):
        prev = keywords.pop()
        head = _strip_sentinel(prev.value.value, sentinel) or ""
        merged = replace(
            prev,
            value=Str(head + parsed.value.value),
            comment=_join_comments(_strip_sentinel(prev.comment, sentinel), parsed.comment),
        )
        keywords.append(merged)
        return

    prev_name = keywords[-1].name if keywords else None
    log.warning(
        "CONTINUE card without a continued string before it (previous keyword: %s); keeping it standalone",
        prev_name,
    )
    keywords.append(
        Keyword(CONTINUE_KEYWORD, KeywordKind.CONTINUE, parsed.value, parsed.comment)
    )


def _parse_card_value(card: Card) -> ParsedValue:
    try:
        return parse_value(card.text)
    except UnsupportedLiteral as e:
        raise e.with_key(card.name) from e


def assemble_keywords(
    cards: Iterable[Card], *, sentinel: str = CONTINUATION_SENTINEL
) -> tuple[Keyword, ...]:
    """Build the ordered keyword list from classified cards.

    Stops at the first End card, if the stream contains one.

    Raises
    ------
    UnsupportedLiteral
        If a value card holds a complex-number literal.
    """

    keywords: list[Keyword] = []
    for card in cards:
        if card.kind is CardKind.END:
            break

        if card.kind is CardKind.VALUE:
            parsed = _parse_card_value(card)
            if card.name == CONTINUE_KEYWORD and isinstance(parsed.value, Str):
                _continue(keywords, parsed, sentinel)
            else:
                keywords.append(Keyword(card.name, KeywordKind.VALUE, parsed.value, parsed.comment))
            continue

        # The standard CONTINUE layout has blanks in bytes 8-9: it arrives as commentary.
        if card.name == CONTINUE_KEYWORD and card.text.lstrip().startswith(QUOTE):
            _continue(keywords, _parse_card_value(card), sentinel)
            continue

        keywords.append(Keyword(card.name, KeywordKind.COMMENTARY, text=card.text))

    return tuple(keywords)


# -----------------------------
# Header
# -----------------------------


def _find(keywords: Iterable[Keyword], name: str) -> Keyword | None:
    for kw in keywords:
        if kw.kind is KeywordKind.VALUE and kw.name == name:
            return kw
    return None


def _kind_name(value: Value) -> str:
    return type(value).__name__


def _require_integer(keywords: tuple[Keyword, ...], name: str) -> int:
    kw = _find(keywords, name)
    if kw is None:
        raise InvalidMandatoryKeyword(name, "mandatory keyword is missing")
    if not isinstance(kw.value, Integer):
        raise InvalidMandatoryKeyword(
            name,
            f"expected an integer, got {_kind_name(kw.value)}",
            value=python_value(kw.value),
        )
    return kw.value.value


@dataclass(frozen=True)
class Header:
    """Validated primary header.

    ``axes`` follows the file order: ``axes[0]`` is NAXIS1, the
    fastest-varying axis of the data unit.
    """

    simple: bool
    bitpix: Bitpix
    naxis: Naxis
    axes: tuple[int, ...]
    keywords: tuple[Keyword, ...] = ()

    def __post_init__(self) -> None:
        if len(self.axes) != int(self.naxis):
            raise ValueError(f"NAXIS={int(self.naxis)} but {len(self.axes)} axes given")
        if any(int(n) < 1 for n in self.axes):
            raise ValueError(f"axis lengths must be positive, got {self.axes}")

    @classmethod
    def from_keywords(cls, keywords: Iterable[Keyword]) -> "Header":
        """Extract and validate the mandatory fields.

        Lookup is by exact name, first match wins. A missing or non-boolean
        SIMPLE is tolerated (``simple=False``).

        Raises
        ------
        InvalidMandatoryKeyword
            For a missing/mistyped NAXIS, BITPIX or NAXISn, naming the key.
        """

        keywords = tuple(keywords)

        simple_kw = _find(keywords, SIMPLE_KEYWORD)
        if simple_kw is not None and isinstance(simple_kw.value, Boolean):
            simple = simple_kw.value.value
        else:
            log.warning("SIMPLE is missing or not a boolean; assuming SIMPLE = F")
            simple = False

        naxis_raw = _require_integer(keywords, NAXIS_KEYWORD)
        try:
            naxis = Naxis(naxis_raw)
        except ValueError as e:
            raise InvalidMandatoryKeyword(NAXIS_KEYWORD, str(e), value=naxis_raw) from None

        bitpix_raw = _require_integer(keywords, BITPIX_KEYWORD)
        try:
            bitpix = Bitpix.from_code(bitpix_raw)
        except ValueError as e:
            raise InvalidMandatoryKeyword(BITPIX_KEYWORD, str(e), value=bitpix_raw) from None

        axes: list[int] = []
        for i in range(1, int(naxis) + 1):
            key = axis_keyword(i)
            extent = _require_integer(keywords, key)
            if extent < 1:
                raise InvalidMandatoryKeyword(key, "axis length must be positive", value=extent)
            axes.append(extent)

        return cls(simple=simple, bitpix=bitpix, naxis=naxis, axes=tuple(axes), keywords=keywords)

    # --- lookup ---

    def keyword(self, name: str) -> Keyword | None:
        """First value keyword called ``name`` (exact match) or None."""

        return _find(self.keywords, name)

    def get(self, name: str, default: Any = None) -> Any:
        """Plain Python value of keyword ``name`` (``default`` if absent or undefined)."""

        kw = self.keyword(name)
        if kw is None or isinstance(kw.value, Undefined):
            return default
        return python_value(kw.value)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.keyword(name) is not None

    def __iter__(self) -> Iterator[Keyword]:
        return iter(self.keywords)

    # --- data unit geometry ---

    @property
    def n_elements(self) -> int:
        """Number of data elements (0 when there is no data unit)."""

        if not self.axes:
            return 0
        return reduce(operator.mul, self.axes, 1)

    @property
    def data_size(self) -> int:
        """Size of the data unit in bytes, padding excluded."""

        return self.n_elements * self.bitpix.itemsize

    def format_keywords(self) -> list[str]:
        return [kw.format() for kw in self.keywords]


__all__ = [
    "Bitpix",
    "Header",
    "Keyword",
    "KeywordKind",
    "Naxis",
    "assemble_keywords",
]
