"""Shared constants and filesystem helpers."""

from .constants import (
    BOARDS,
    DEFAULT_HEADER,
    DEFAULT_INSTRUCTIONS,
    Choice,
    resolve_board_label,
)
from .path_utils import paper_filename, safe_filename, slugify

__all__ = [
    "BOARDS",
    "DEFAULT_HEADER",
    "DEFAULT_INSTRUCTIONS",
    "Choice",
    "resolve_board_label",
    "paper_filename",
    "safe_filename",
    "slugify",
]
