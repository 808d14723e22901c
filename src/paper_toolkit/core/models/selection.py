"""
Module: selection

Purpose:
    Provides SelectionResult - the selector's output: questions carrying
    assigned marks, in the order they were assigned, plus the target they
    were selected against. A short or empty result is a recognised
    outcome, not an error.

Key Functions:
    - SelectionResult.total_marks: Sum of assigned marks
    - SelectionResult.is_empty / is_short / shortfall
    - SelectionResult.marks_by_value: mark value -> question count

Dependencies:
    - dataclasses (std)
    - .questions.Question

Used By:
    - builder.selection.selector: Produces results
    - builder.controller: Reports shortfall / empty outcomes
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Dict

from .questions import Question


@dataclass(frozen=True)
class SelectionResult:
    """
    Result of mark assignment (immutable).

    Attributes:
        questions: Assigned questions in assignment order
        target_marks: Total the selection aimed for

    Invariants:
        - Every question has marks > 0
        - Question ids are unique

    Example:
        >>> result = SelectionResult(questions=(q1.with_marks(5),), target_marks=10)
        >>> result.is_short, result.shortfall
        (True, 5)
    """

    questions: tuple[Question, ...]
    target_marks: int

    def __post_init__(self) -> None:
        """Validate selection on construction."""
        unassigned = [q.id for q in self.questions if not q.is_assigned]
        if unassigned:
            raise ValueError(f"Selection contains unassigned questions: {unassigned}")
        ids = [q.id for q in self.questions]
        if len(set(ids)) != len(ids):
            raise ValueError("Selection contains duplicate question ids")

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties (NEVER stored)
    # ─────────────────────────────────────────────────────────────────────────

    @cached_property
    def total_marks(self) -> int:
        """Sum of assigned marks."""
        return sum(q.marks for q in self.questions)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def is_empty(self) -> bool:
        """True when no viable selection could be made."""
        return not self.questions

    @property
    def is_short(self) -> bool:
        """True when the selection falls below the target (best effort)."""
        return self.total_marks < self.target_marks

    @property
    def shortfall(self) -> int:
        """Marks missing from the target (0 when met)."""
        return max(0, self.target_marks - self.total_marks)

    @cached_property
    def marks_by_value(self) -> Dict[int, int]:
        """Number of selected questions at each mark value, ascending."""
        counts: Dict[int, int] = {}
        for q in self.questions:
            counts[q.marks] = counts.get(q.marks, 0) + 1
        return dict(sorted(counts.items()))

    @property
    def sources(self) -> Dict[str, int]:
        """Number of selected questions per provenance tag."""
        counts: Dict[str, int] = {}
        for q in self.questions:
            counts[q.source] = counts.get(q.source, 0) + 1
        return counts

    def to_dict(self) -> dict:
        """Serialize for metadata output."""
        return {
            "target_marks": self.target_marks,
            "total_marks": self.total_marks,
            "question_count": self.question_count,
            "marks_by_value": {str(k): v for k, v in self.marks_by_value.items()},
            "questions": [q.to_dict() for q in self.questions],
        }
