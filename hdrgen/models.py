"""Core data models shared across hdrgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class TokenKind(Enum):
    """Lexical class of a span cut from the declarations header."""

    COMMENT = "comment"
    TYPEDEF = "typedef"
    FUNCTION = "function"
    CONST = "const"
    PRIVATE = "private"
    DEFINE = "define"
    INCLUDE = "include"
    IF = "if"
    ELSE = "else"
    ENDIF = "endif"
    WHITESPACE = "whitespace"


class RecordKind(Enum):
    """Classification of a grouped record."""

    EMPTY = "empty"
    MULTIPLE = "multiple"
    PRIVATE = "private"
    TYPEDEF = "typedef"
    FUNCTION = "function"
    CONST = "const"
    DEFINE = "define"
    INCLUDE = "include"

    def merge(self, other: "RecordKind") -> "RecordKind":
        """Return the classification after folding in ``other``.

        The first classification wins; a further classification of a
        different kind turns the record into ``MULTIPLE``, which then stays put.
        """
        if self is RecordKind.EMPTY:
            return other
        if self is RecordKind.MULTIPLE or self is other:
            return self
        return RecordKind.MULTIPLE


_CLASSIFYING_KINDS = {
    TokenKind.TYPEDEF: RecordKind.TYPEDEF,
    TokenKind.FUNCTION: RecordKind.FUNCTION,
    TokenKind.CONST: RecordKind.CONST,
    TokenKind.PRIVATE: RecordKind.PRIVATE,
    TokenKind.DEFINE: RecordKind.DEFINE,
    TokenKind.INCLUDE: RecordKind.INCLUDE,
}


@dataclass(frozen=True)
class Token:
    """Classified span of the input. ``span`` never carries a trailing newline."""

    kind: TokenKind
    ident: str
    span: str

    @property
    def record_kind(self) -> RecordKind | None:
        return _CLASSIFYING_KINDS.get(self.kind)

    def render(self) -> str:
        return f"{self.span}\n"


@dataclass(frozen=True)
class Record:
    """One logical declaration with its comments and enclosing conditionals."""

    kind: RecordKind
    tokens: Tuple[Token, ...]
    ids: Tuple[str, ...] = ()

    def contains_id(self, ident: str) -> bool:
        return ident in self.ids

    @property
    def is_trivial(self) -> bool:
        """Records that may legitimately be routed nowhere."""
        return self.kind in (RecordKind.EMPTY, RecordKind.PRIVATE)

    @property
    def token_ids(self) -> List[str]:
        """Identifiers and conditional lines of the record, in token order."""
        return [token.ident for token in self.tokens if token.ident]

    def render(self) -> str:
        """Comments first, then code; whitespace is dropped."""
        comments = [t.render() for t in self.tokens if t.kind is TokenKind.COMMENT]
        code = [
            t.render()
            for t in self.tokens
            if t.kind not in (TokenKind.COMMENT, TokenKind.WHITESPACE)
        ]
        return "".join(comments + code)


@dataclass(frozen=True)
class FuncArg:
    """Argument of a mined function: C type name, qualifier and parameter name."""

    typename: str
    cv: str
    name: str

    @property
    def qualified(self) -> str:
        return f"{self.cv} {self.typename}" if self.cv else self.typename


@dataclass(frozen=True)
class FunctionSignature:
    """Semantic description of one function of a naming convention family."""

    return_type: str
    func_name: str
    args: Tuple[FuncArg, ...] = field(default_factory=tuple)

    @property
    def owner(self) -> FuncArg:
        return self.args[0]

    @property
    def payload(self) -> FuncArg | None:
        return self.args[1] if len(self.args) > 1 else None
