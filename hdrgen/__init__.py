"""Generate curated C headers and type-generic dispatch macros from bindings output."""

__version__ = "0.1.0"
