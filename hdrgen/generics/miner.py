"""Recover convention-named function families from generated declarations.

Every opaque type ``T`` exposes functions named after a fixed convention
(``T_loan``, ``T_drop``, ...). The miner walks the function prototypes of the
declarations header, normalizes their spelling, and matches each against one
anchored pattern per convention. New opaque types are picked up without any
change here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Tuple

from ..logging import get_logger
from ..models import FuncArg, FunctionSignature, Token, TokenKind
from ..parsing import tokenize

_LOGGER = get_logger("generics.miner")

_WHITESPACE = re.compile(r"\s+")
_OPEN_PAREN = re.compile(r"\(\s+")
_CLOSE_PAREN = re.compile(r"\s+\)")
_COMMA = re.compile(r"\s*,\s*")
_POINTER = re.compile(r"\s*\*\s*")
_SEMICOLON = re.compile(r"\s+;")

_CV = r"(?:(?P<cv>const|volatile) )?"
_RET_CV = r"(?P<ret_cv>const )?"
_LEAD = r"(?:^|(?<=\s))"


def normalize_prototype(span: str) -> str:
    """Collapse formatting differences so prototypes can be matched literally.

    >>> normalize_prototype("bool  z_x_check( const struct z_x_t*  this_ ) ;")
    'bool z_x_check(const struct z_x_t *this_);'
    """
    text = _WHITESPACE.sub(" ", span).strip()
    text = _POINTER.sub(" *", text)
    text = _OPEN_PAREN.sub("(", text)
    text = _CLOSE_PAREN.sub(")", text)
    text = _COMMA.sub(", ", text)
    return _SEMICOLON.sub(";", text)


def _pointer_return(match: re.Match[str]) -> str:
    return f"{match.group('ret_cv') or ''}{match.group('ret')}*"


def _single_arg(match: re.Match[str]) -> Tuple[FuncArg, ...]:
    return (FuncArg(match.group("type"), match.group("cv") or "", match.group("name")),)


@dataclass(frozen=True)
class Convention:
    """One naming convention: its suffix, prototype shape and how to read a match."""

    name: str
    pattern: re.Pattern[str]
    return_type: Callable[[re.Match[str]], str]
    args: Callable[[re.Match[str]], Tuple[FuncArg, ...]] = _single_arg

    def match(self, prototype: str) -> FunctionSignature | None:
        found = self.pattern.search(prototype)
        if found is None:
            return None
        return FunctionSignature(
            return_type=self.return_type(found),
            func_name=found.group("func"),
            args=self.args(found),
        )


def _call_args(match: re.Match[str]) -> Tuple[FuncArg, ...]:
    return (
        FuncArg(match.group("type"), "const", match.group("name")),
        FuncArg(match.group("arg_type"), match.group("arg_cv") or "", match.group("arg_name")),
    )


LOAN = Convention(
    "loan",
    re.compile(
        _LEAD + _RET_CV + r"struct (?P<ret>\w+) \*(?P<func>\w+_loan)\("
        + _CV + r"struct (?P<type>\w+) \*(?P<name>\w+)\);\Z"
    ),
    _pointer_return,
)
LOAN_MUT = Convention(
    "loan_mut",
    re.compile(
        _LEAD + _RET_CV + r"struct (?P<ret>\w+) \*(?P<func>\w+_loan_mut)\("
        + _CV + r"struct (?P<type>\w+) \*(?P<name>\w+)\);\Z"
    ),
    _pointer_return,
)
DROP = Convention(
    "drop",
    re.compile(
        _LEAD + r"void (?P<func>\w+_drop)\(" + _CV + r"struct (?P<type>\w+) \*(?P<name>\w+)\);\Z"
    ),
    lambda _: "void",
)
NULL = Convention(
    "null",
    re.compile(
        _LEAD + r"void (?P<func>\w+_null)\(" + _CV + r"struct (?P<type>\w+) \*(?P<name>\w+)\);\Z"
    ),
    lambda _: "void",
)
CHECK = Convention(
    "check",
    re.compile(
        _LEAD + r"bool (?P<func>\w+_check)\((?P<cv>const) struct (?P<type>\w+) \*(?P<name>\w+)\);\Z"
    ),
    lambda _: "bool",
)
CALL = Convention(
    "call",
    re.compile(
        _LEAD + r"(?P<ret>\w+) (?P<func>\w+_call)\(const struct (?P<type>\w+) \*(?P<name>\w+), "
        r"(?:(?P<arg_cv>const|volatile) )?struct (?P<arg_type>\w+) \*(?P<arg_name>\w+)\);\Z"
    ),
    lambda match: match.group("ret"),
    _call_args,
)

CONVENTIONS: Tuple[Convention, ...] = (LOAN, LOAN_MUT, DROP, NULL, CHECK, CALL)


def function_prototypes(tokens: Iterable[Token]) -> List[str]:
    return [normalize_prototype(t.span) for t in tokens if t.kind is TokenKind.FUNCTION]


def find_signatures(prototypes: Iterable[str], convention: Convention) -> List[FunctionSignature]:
    """Signatures of ``convention`` in declaration order, one per owner type."""
    found: List[FunctionSignature] = []
    owners: Dict[str, str] = {}
    for prototype in prototypes:
        signature = convention.match(prototype)
        if signature is None:
            continue
        owner = signature.owner.typename
        if owner in owners:
            _LOGGER.warning(
                "Ignoring %s for %s: %s already handles it",
                signature.func_name,
                owner,
                owners[owner],
            )
            continue
        owners[owner] = signature.func_name
        found.append(signature)
    return found


def mine(text: str, filename: str = "<input>") -> Dict[str, List[FunctionSignature]]:
    """Mine every convention from the declarations ``text``."""
    prototypes = function_prototypes(tokenize(text, filename))
    families = {convention.name: find_signatures(prototypes, convention) for convention in CONVENTIONS}
    for name, signatures in families.items():
        _LOGGER.debug("Mined %d %s functions", len(signatures), name)
    return families


__all__ = [
    "CONVENTIONS",
    "Convention",
    "find_signatures",
    "function_prototypes",
    "mine",
    "normalize_prototype",
]
