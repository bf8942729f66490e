"""Tokenizer for the restricted declaration grammar emitted by the bindings generator.

The input is cut into classified spans by an ordered chain of recognizers.
Each recognizer looks at the text starting at a given offset and either
returns a token covering the shortest well-formed span there, or ``None``.
The first recognizer that matches wins.

Spans never contain the newline that ends a directive or line comment; that
newline is picked up by the following whitespace token. On output every token
is terminated with a single newline, which lets records be reordered freely.
"""

from __future__ import annotations

import re
from typing import Callable, Iterator, List, Optional

from ..errors import GrammarError
from ..models import Token, TokenKind

Recognizer = Callable[[str, int], Optional[Token]]

_TRAILING_IDENT = re.compile(r"\w*\Z")
_CONST_KEYWORD = re.compile(r"\bconst\b")
_IF_PREFIXES = ("#if ", "#ifdef ", "#ifndef ")
_DEFINE_PREFIX = "#define "
_INCLUDE_FORMS = (('#include "', '"'), ("#include <", ">"))


def _line_end(text: str, pos: int) -> int:
    end = text.find("\n", pos)
    return len(text) if end == -1 else end


def _statement_end(text: str, pos: int) -> int | None:
    """Offset just past the next ``;``, or ``None`` when there is none."""
    end = text.find(";", pos)
    return None if end == -1 else end + 1


def _trailing_ident(fragment: str) -> str:
    match = _TRAILING_IDENT.search(fragment)
    return match.group(0) if match else ""


def whitespace(text: str, pos: int) -> Token | None:
    end = pos
    length = len(text)
    while end < length and text[end].isspace():
        end += 1
    if end == pos:
        return None
    return Token(TokenKind.WHITESPACE, "", text[pos:end])


def comment(text: str, pos: int) -> Token | None:
    if text.startswith("/*", pos):
        close = text.find("*/", pos + 2)
        end = len(text) if close == -1 else close + 2
        return Token(TokenKind.COMMENT, "", text[pos:end])
    if text.startswith("//", pos):
        return Token(TokenKind.COMMENT, "", text[pos:_line_end(text, pos)])
    return None


def endif(text: str, pos: int) -> Token | None:
    if not text.startswith("#endif", pos):
        return None
    return Token(TokenKind.ENDIF, "", text[pos:_line_end(text, pos)])


def include(text: str, pos: int) -> Token | None:
    for opener, closer in _INCLUDE_FORMS:
        if not text.startswith(opener, pos):
            continue
        start = pos + len(opener)
        close = text.find(closer, start)
        if close == -1:
            raise GrammarError(
                "Unterminated #include", line=text[pos:_line_end(text, pos)]
            )
        return Token(TokenKind.INCLUDE, text[start:close], text[pos:close + len(closer)])
    return None


def define(text: str, pos: int) -> Token | None:
    if not text.startswith(_DEFINE_PREFIX, pos):
        return None
    span = text[pos:_line_end(text, pos)]
    words = span[len(_DEFINE_PREFIX):].split()
    if not words:
        raise GrammarError("#define without a name", line=span)
    name = words[0]
    kind = TokenKind.PRIVATE if name.startswith("_") else TokenKind.DEFINE
    return Token(kind, name, span)


def conditional(text: str, pos: int) -> Token | None:
    if not any(text.startswith(prefix, pos) for prefix in _IF_PREFIXES):
        return None
    span = text[pos:_line_end(text, pos)]
    # the whole condition line stands in as the identifier
    return Token(TokenKind.IF, span, span)


def else_(text: str, pos: int) -> Token | None:
    if not text.startswith("#else", pos):
        return None
    return Token(TokenKind.ELSE, "", text[pos:_line_end(text, pos)])


def typedef(text: str, pos: int) -> Token | None:
    if not text.startswith("typedef", pos):
        return None
    after = pos + len("typedef")
    if after < len(text) and (text[after].isalnum() or text[after] == "_"):
        return None
    depth = 0
    for index in range(after, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == ";" and depth == 0:
            span = text[pos:index + 1]
            ident = _trailing_ident(span[:-1])
            kind = TokenKind.PRIVATE if ident.startswith("_") else TokenKind.TYPEDEF
            return Token(kind, ident, span)
    raise GrammarError("Unterminated typedef", line=text[pos:_line_end(text, pos)])


def const(text: str, pos: int) -> Token | None:
    if text.startswith("#", pos):
        return None
    end = _statement_end(text, pos)
    if end is None:
        return None
    span = text[pos:end]
    if not _CONST_KEYWORD.search(span):
        return None
    ident = _trailing_ident(span[:-1])
    if not ident:
        # const-qualified prototypes end with ")" and belong to ``function``
        return None
    return Token(TokenKind.CONST, ident, span)


def function(text: str, pos: int) -> Token | None:
    if text.startswith("#", pos):
        return None
    end = _statement_end(text, pos)
    if end is None:
        return None
    span = text[pos:end]
    if "(" not in span:
        return None
    return Token(TokenKind.FUNCTION, _function_name(span), span)


def _function_name(span: str) -> str:
    body = span[:-1].rstrip()
    opener = -1
    if body.endswith(")"):
        depth = 0
        for index in range(len(body) - 1, -1, -1):
            char = body[index]
            if char == ")":
                depth += 1
            elif char == "(":
                depth -= 1
                if depth == 0:
                    opener = index
                    break
    if opener == -1:
        opener = body.rfind("(")
    return _trailing_ident(body[:opener].rstrip())


RECOGNIZERS: List[Recognizer] = [
    whitespace,
    comment,
    endif,
    include,
    define,
    conditional,
    else_,
    typedef,
    const,
    function,
]


def next_token(text: str, pos: int = 0) -> Token | None:
    """Return the token starting at ``pos`` according to recognizer priority."""
    for recognizer in RECOGNIZERS:
        token = recognizer(text, pos)
        if token is not None:
            return token
    return None


def tokenize(text: str, filename: str = "<input>") -> Iterator[Token]:
    """Yield tokens covering ``text`` front to back.

    Raises :class:`GrammarError` at the first position no recognizer accepts.
    """
    pos = 0
    length = len(text)
    while pos < length:
        try:
            token = next_token(text, pos)
        except GrammarError as exc:
            raise GrammarError(exc.reason, filename=filename, line=exc.line) from exc
        if token is None:
            line = text[pos:_line_end(text, pos)]
            raise GrammarError("Couldn't parse C declarations", filename=filename, line=line)
        pos += len(token.span)
        yield token


__all__ = ["RECOGNIZERS", "Recognizer", "next_token", "tokenize"]
