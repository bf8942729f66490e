"""Type-generic dispatch generation for convention-named functions."""

from .dispatch import DispatchGenerator, generic_table
from .miner import CONVENTIONS, find_signatures, mine, normalize_prototype

__all__ = [
    "CONVENTIONS",
    "DispatchGenerator",
    "find_signatures",
    "generic_table",
    "mine",
    "normalize_prototype",
]
