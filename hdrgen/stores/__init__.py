"""File access helpers shared by the generation stages."""

from .locked_file import locked_file, read_locked, rewrite_locked, write_locked

__all__ = ["locked_file", "read_locked", "rewrite_locked", "write_locked"]
