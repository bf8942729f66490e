"""Post-processing applied to generated headers."""

from .replace import DEFAULT_REPLACEMENTS, apply_replacements, replace_in_files, write_configure_header

__all__ = ["DEFAULT_REPLACEMENTS", "apply_replacements", "replace_in_files", "write_configure_header"]
