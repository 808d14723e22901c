"""Board catalogue and default paper text.

Board values are the codes a form submits; labels are what a printed paper shows.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Choice:
    """A selectable value with its display label."""

    value: str
    label: str


BOARDS: tuple[Choice, ...] = (
    Choice("cbse", "CBSE"),
    Choice("icse", "ICSE"),
    Choice("west bengal", "West Bengal State Board"),
)

DEFAULT_INSTRUCTIONS = (
    "1. All questions are compulsory.\n"
    "2. Marks are indicated against each question."
)
DEFAULT_HEADER = "Sample Question Paper"


def resolve_board_label(board: str) -> str:
    """Display label for a board code, or the code itself if unknown.

    Examples:
        >>> resolve_board_label("west bengal")
        'West Bengal State Board'
        >>> resolve_board_label("Kerala")
        'Kerala'
    """
    for choice in BOARDS:
        if choice.value == board:
            return choice.label
    return board
