"""Tokenizing and grouping of generated C declarations."""

from .grouper import RecordBuilder, group_tokens
from .tokenizer import next_token, tokenize

__all__ = ["RecordBuilder", "group_tokens", "next_token", "tokenize"]
