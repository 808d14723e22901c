"""
Module: questions

Purpose:
    Provides the Question dataclass - the unit that flows through the whole
    pipeline. A question starts life in the candidate pool with no marks and
    becomes part of a paper only once the selector hands back a copy carrying
    an assigned mark value.

Key Functions:
    - Question.with_marks(value): Copy with an assigned mark value
    - Question.is_assigned: True once marks > 0
    - Question.to_dict() / Question.from_dict(): Serialization

Dependencies:
    - dataclasses (std)

Used By:
    - builder.sources.pool: Creates unmarked candidates
    - builder.selection.selector: Assigns marks
    - builder.layout: Groups and numbers assigned questions
"""

from __future__ import annotations

from dataclasses import dataclass, replace


# Provenance tags
SOURCE_AI = "AI Generated"
SOURCE_PYQ = "PYQ"

# Topic sentinel for AI-generated questions that are not tied to one topic
AI_GENERATED_TOPIC = "AI Generated"


@dataclass(frozen=True)
class Question:
    """
    Candidate question with provenance (immutable).

    Attributes:
        id: Opaque identifier, unique within a generation request
        text: Question body; may embed $...$ / $$...$$ math markup which
            must be carried verbatim through every transformation
        marks: 0 until assigned by the selector
        topic: Topic label, or AI_GENERATED_TOPIC
        source: Provenance tag such as SOURCE_AI or SOURCE_PYQ

    Invariants:
        - marks >= 0
        - Only questions with marks > 0 appear in a selection

    Example:
        >>> q = Question("pyq-algebra-0-1a2b", "Solve $x^2 = 4$.", topic="Algebra")
        >>> q.is_assigned
        False
        >>> q.with_marks(2).marks
        2
    """

    id: str
    text: str
    marks: int = 0
    topic: str = AI_GENERATED_TOPIC
    source: str = SOURCE_AI

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if not self.id:
            raise ValueError("Question id must be non-empty")
        if self.marks < 0:
            raise ValueError(f"Question marks cannot be negative: {self.marks}")

    # ─────────────────────────────────────────────────────────────────────────
    # Mark Assignment
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_assigned(self) -> bool:
        """True once the selector has given this question a mark value."""
        return self.marks > 0

    def with_marks(self, value: int) -> Question:
        """
        Return a copy carrying the given mark value.

        The original (pool) instance is left untouched, so the same
        candidate pool can be re-selected without leaking marks.

        Args:
            value: Positive mark value to assign

        Returns:
            New Question with marks=value

        Raises:
            ValueError: If value is not positive
        """
        if value <= 0:
            raise ValueError(f"Assigned marks must be positive: {value}")
        return replace(self, marks=value)

    @property
    def text_length(self) -> int:
        """Length of the question body, used to rank leftover candidates."""
        return len(self.text)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "id": self.id,
            "text": self.text,
            "marks": self.marks,
            "topic": self.topic,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        """Deserialize from a dict produced by to_dict()."""
        return cls(
            id=data["id"],
            text=data["text"],
            marks=data.get("marks", 0),
            topic=data.get("topic", AI_GENERATED_TOPIC),
            source=data.get("source", SOURCE_AI),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        preview = self.text[:30] + ("..." if len(self.text) > 30 else "")
        return f"Question({self.id!r}, marks={self.marks}, topic={self.topic!r}, text={preview!r})"
