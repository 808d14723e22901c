"""
Module: builder.layout.sections

Purpose:
    Group assigned questions into sections by mark value.
    Sections are ordered ascending by mark and lettered by position
    (A, B, C, ...), independent of the mark values themselves.

Key Functions:
    - prepare_sections(): Build FormattedSections from a selection

Dependencies:
    - builder.layout.models: FormattedSection

Used By:
    - builder.layout.document: Paper serialization
"""

from __future__ import annotations

import logging
import string
from typing import Dict, List, Sequence

from paper_toolkit.core.models import Question

from .models import FormattedSection

logger = logging.getLogger(__name__)


def section_letter(index: int) -> str:
    """
    Letter ordinal for a zero-based section index.

    Runs A..Z, then AA, AB, ... should a paper ever need more than 26
    distinct mark values.
    """
    letters = string.ascii_uppercase
    label = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        label = letters[rem] + label
    return label


def prepare_sections(questions: Sequence[Question]) -> List[FormattedSection]:
    """
    Group assigned questions into lettered sections.

    Args:
        questions: Questions with assigned marks, in selection order

    Returns:
        One section per distinct mark value, ascending by mark

    Raises:
        ValueError: If a question has no assigned marks

    Example:
        >>> [s.title for s in prepare_sections(selected)]
        ['Section A (2 Mark Questions)', 'Section B (5 Mark Questions)']
    """
    by_marks: Dict[int, List[Question]] = {}
    for q in questions:
        if not q.is_assigned:
            raise ValueError(f"Question {q.id} has no assigned marks")
        by_marks.setdefault(q.marks, []).append(q)

    sections = [
        FormattedSection(
            letter=section_letter(index),
            mark_value=mark,
            questions=tuple(by_marks[mark]),
        )
        for index, mark in enumerate(sorted(by_marks))
    ]

    logger.debug(
        f"Prepared {len(sections)} sections from {len(questions)} questions"
    )
    return sections
