"""Card reader: split a buffer into blocks and 80-byte cards, classify cards.

Classification only looks at fixed byte positions:

* the exact END literal is the End card;
* ``"= "`` at bytes 8-9 makes a Value card;
* everything else is Commentary (COMMENT/HISTORY, blank keywords,
  ``CONTINUE  '...'`` and malformed lines without the indicator).

Values are *not* parsed here, see :mod:`basic_fits.values`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union
import logging

from basic_fits.errors import MalformedHeader
from basic_fits.layout import (
    BLOCK_SIZE,
    CARD_SIZE,
    END_CARD,
    END_KEYWORD,
    NAME_SIZE,
    VALUE_INDICATOR,
    VALUE_INDICATOR_SIZE,
)


log = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]


class CardKind(str, Enum):
    END = "END"
    COMMENTARY = "COMMENTARY"
    VALUE = "VALUE"


@dataclass(frozen=True)
class Card:
    """One classified 80-byte record.

    ``text`` is the raw value field for Value cards (bytes 10..80) and the
    free text for Commentary cards (bytes 8..80). Both are untrimmed.
    """

    kind: CardKind
    name: str = ""
    text: str = ""

    @property
    def is_end(self) -> bool:
        return self.kind is CardKind.END


END = Card(CardKind.END, END_KEYWORD)


@dataclass(frozen=True)
class HeaderCards:
    """Cards up to (excluding) END and the offset of the first data block."""

    cards: tuple[Card, ...]
    data_offset: int
    n_blocks: int


def _ascii(raw: bytes) -> str:
    # Non-ASCII bytes are not allowed in headers; keep going with a marker.
    return raw.decode("ascii", errors="replace")


def iter_blocks(buffer: Buffer, start: int = 0) -> Iterator[memoryview]:
    """Yield successive whole blocks of ``buffer`` starting at byte ``start``.

    A trailing partial block is not a block and is never yielded.
    """

    view = memoryview(buffer).cast("B")
    pos = int(start)
    while pos + BLOCK_SIZE <= len(view):
        yield view[pos : pos + BLOCK_SIZE]
        pos += BLOCK_SIZE


def split_cards(block: Buffer) -> Iterator[bytes]:
    """Yield the 80-byte records of one block."""

    view = memoryview(block)
    if len(view) % CARD_SIZE:
        raise ValueError(f"block size {len(view)} is not a multiple of {CARD_SIZE}")
    for pos in range(0, len(view), CARD_SIZE):
        yield bytes(view[pos : pos + CARD_SIZE])


def classify_card(record: bytes) -> Card:
    """Classify one record as End, Value or Commentary."""

    record = bytes(record)
    if record == END_CARD:
        return END

    name = _ascii(record[:NAME_SIZE]).strip()
    indicator = record[NAME_SIZE : NAME_SIZE + VALUE_INDICATOR_SIZE]
    if indicator == VALUE_INDICATOR:
        return Card(CardKind.VALUE, name, _ascii(record[NAME_SIZE + VALUE_INDICATOR_SIZE :]))
    return Card(CardKind.COMMENTARY, name, _ascii(record[NAME_SIZE:]))


def read_cards(buffer: Buffer, *, max_blocks: int | None = None) -> HeaderCards:
    """Scan header blocks until the END card.

    Raises
    ------
    MalformedHeader
        If the buffer (or ``max_blocks``) is exhausted before END.
    """

    cards: list[Card] = []
    n_blocks = 0
    for block in iter_blocks(buffer):
        if max_blocks is not None and n_blocks >= max_blocks:
            raise MalformedHeader(
                f"no END card within the first {max_blocks} header blocks",
                context={"cards": len(cards)},
            )
        n_blocks += 1
        for record in split_cards(block):
            card = classify_card(record)
            if card.is_end:
                log.debug("END found in header block %d (%d cards)", n_blocks, len(cards))
                return HeaderCards(tuple(cards), n_blocks * BLOCK_SIZE, n_blocks)
            cards.append(card)

    raise MalformedHeader(
        "end of buffer while reading header, expected an END card",
        context={"blocks": n_blocks, "cards": len(cards), "buffer_size": len(buffer)},
    )


__all__ = [
    "Card",
    "CardKind",
    "HeaderCards",
    "classify_card",
    "iter_blocks",
    "read_cards",
    "split_cards",
]
