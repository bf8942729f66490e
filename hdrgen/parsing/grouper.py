"""Fold a token stream into declaration records."""

from __future__ import annotations

from typing import Iterable, List

from ..errors import GrammarError
from ..logging import get_logger
from ..models import Record, RecordKind, Token, TokenKind

_LOGGER = get_logger("grouper")


class RecordBuilder:
    """Accumulates tokens until they form one closed record."""

    def __init__(self) -> None:
        self.kind = RecordKind.EMPTY
        self.nesting = 0
        self._ids: List[str] = []
        self._tokens: List[Token] = []

    @property
    def is_ready(self) -> bool:
        return self.nesting == 0 and self.kind is not RecordKind.EMPTY

    def add(self, token: Token) -> None:
        record_kind = token.record_kind
        if record_kind is not None:
            self.kind = self.kind.merge(record_kind)
            if token.ident and token.ident not in self._ids:
                self._ids.append(token.ident)
        elif token.kind is TokenKind.IF:
            self.nesting += 1
        elif token.kind is TokenKind.ENDIF:
            self.nesting -= 1
            if self.nesting < 0:
                raise GrammarError("unmatched #endif", line=token.span)
        self._tokens.append(token)

    def build(self) -> Record:
        return Record(kind=self.kind, tokens=tuple(self._tokens), ids=tuple(self._ids))


def group_tokens(tokens: Iterable[Token], filename: str | None = None) -> List[Record]:
    """Group ``tokens`` into records.

    The trailing accumulator is always kept, even when it holds nothing but
    whitespace and comments, so no input text is lost.
    """
    records: List[Record] = []
    builder = RecordBuilder()
    for token in tokens:
        try:
            builder.add(token)
        except GrammarError as exc:
            raise GrammarError(exc.reason, filename=filename, line=exc.line) from exc
        if builder.is_ready:
            records.append(builder.build())
            builder = RecordBuilder()
    records.append(builder.build())
    _LOGGER.debug("Grouped %d records", len(records))
    return records


__all__ = ["RecordBuilder", "group_tokens"]
