"""Routing of declaration records into per-topic headers."""

from .guide import Brand, Exclusive, Shared, SplitGuide, parse_rule
from .splitter import Routing, Splitter, resolve, unused_records

__all__ = [
    "Brand",
    "Exclusive",
    "Routing",
    "Shared",
    "SplitGuide",
    "Splitter",
    "parse_rule",
    "resolve",
    "unused_records",
]
