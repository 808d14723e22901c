"""
Filesystem naming helpers.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paper_toolkit.core.models.settings import PaperSettings

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")
_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def safe_filename(name: str) -> str:
    """Replace every character outside [A-Za-z0-9_.-] with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def paper_filename(settings: "PaperSettings") -> str:
    """
    Default PDF name for a paper.

    Example:
        >>> paper_filename(settings)  # subject="math", class 10, board "cbse"
        'math_Class10_Board_cbse_Paper.pdf'
    """
    raw = (
        f"{settings.subject}_Class{settings.class_level}"
        f"_Board_{settings.board}_Paper.pdf"
    )
    return safe_filename(raw)


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated form of a label ("Linear Eq." -> "linear-eq")."""
    slug = _SLUG_SEPARATORS.sub("-", text.lower()).strip("-")
    return slug or "topic"
