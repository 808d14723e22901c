"""
Module: builder.layout.models

Purpose:
    Data models for paper layout.
    Immutable dataclasses representing sections and the assembled paper.

Key Classes:
    - FormattedSection: Questions sharing one mark value, with a letter title
    - AssembledPaper: Sections, settings and the serialized HTML document

Dependencies:
    - dataclasses (std)
    - core.models: Question, PaperSettings

Used By:
    - builder.layout.sections: Creates FormattedSections
    - builder.layout.document: Serializes sections
    - builder.output: Rasterizes math and renders PDF
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from paper_toolkit.core.models import PaperSettings, Question


def section_title(letter: str, mark_value: int) -> str:
    """Heading used for a section, e.g. "Section A (1 Mark Questions)"."""
    return f"Section {letter} ({mark_value} Mark Questions)"


@dataclass(frozen=True)
class FormattedSection:
    """
    A group of questions sharing the same assigned mark value.

    Attributes:
        letter: Ordinal letter by position ("A", "B", ...)
        mark_value: Marks of every question in the section
        questions: Questions in selection order

    Example:
        >>> section = FormattedSection("B", 5, (q1, q2))
        >>> section.title
        'Section B (5 Mark Questions)'
    """

    letter: str
    mark_value: int
    questions: tuple[Question, ...]

    def __post_init__(self) -> None:
        """Validate section on construction."""
        mismatched = [q.id for q in self.questions if q.marks != self.mark_value]
        if mismatched:
            raise ValueError(
                f"Section {self.letter} holds questions not worth "
                f"{self.mark_value} marks: {mismatched}"
            )

    @property
    def title(self) -> str:
        return section_title(self.letter, self.mark_value)

    @property
    def total_marks(self) -> int:
        return self.mark_value * len(self.questions)


@dataclass(frozen=True)
class AssembledPaper:
    """
    A complete, ready-to-export question paper (immutable).

    Attributes:
        settings: Settings the paper was built for
        sections: Sections in ascending mark order
        html: Serialized document (header, instructions, sections)
    """

    settings: PaperSettings
    sections: tuple[FormattedSection, ...]
    html: str

    @property
    def questions(self) -> tuple[Question, ...]:
        """All questions in printed (numbering) order."""
        return tuple(q for section in self.sections for q in section.questions)

    def numbered_questions(self) -> Iterator[tuple[int, Question]]:
        """Yield (number, question) with paper-wide numbering from 1."""
        return enumerate(self.questions, start=1)

    @property
    def total_marks(self) -> int:
        return sum(section.total_marks for section in self.sections)

    @property
    def is_empty(self) -> bool:
        return not self.questions
