"""
Module: settings

Purpose:
    Provides PaperSettings - the user-specified configuration for one
    generation request, validated on construction. Every problem found is
    reported at once through SettingsValidationError so a front-end can
    show all of them before any generation starts.

Key Functions:
    - PaperSettings.from_form(data): Build from a loose form submission
    - PaperSettings.validate(): Raise with every problem found
    - PaperSettings.syllabus_content: Text sent to the AI source
    - PaperSettings.board_label: Display label for the board

Dependencies:
    - dataclasses (std)
    - .marks.MarkDistribution
    - common.constants: Default text and board labels

Used By:
    - builder.controller: Pipeline entry
    - builder.sources.pool: Query parameters
    - builder.layout.document: Header block
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from paper_toolkit.common.constants import (
    DEFAULT_HEADER,
    DEFAULT_INSTRUCTIONS,
    resolve_board_label,
)

from .marks import MarkDistribution


class SettingsValidationError(ValueError):
    """Invalid paper settings; carries every issue found."""

    def __init__(self, issues: list[str]) -> None:
        self.issues = list(issues)
        super().__init__("; ".join(self.issues))


@dataclass(frozen=True)
class PaperSettings:
    """
    Configuration for one question paper (immutable).

    Attributes:
        board: Board code (e.g. "cbse"); labels resolved at render time
        class_level: Class level (e.g. "10")
        subject: Subject code or name
        topics: Ordered topics; each triggers one PYQ search when enabled
        total_marks: Maximum marks of the paper
        time_duration: Time allowed in minutes
        mark_distribution: Required question counts per mark value
        instructions: Line-oriented instructions (newline = new line)
        header: Title line, usually the school or teacher name
        include_pyqs: Search past-year questions per topic
        generate_probables: Ask the AI source for probable questions
        syllabus_text: Optional syllabus; topics are used when blank

    Invariants:
        - board, class_level, subject non-empty
        - topics non-empty, no blank entries
        - total_marks > 0 and time_duration > 0
        - mark_distribution undeclared or totalling exactly total_marks

    Example:
        >>> settings = PaperSettings(
        ...     board="cbse", class_level="10", subject="math",
        ...     topics=("Quadratic Equations",), total_marks=10,
        ...     time_duration=30,
        ...     mark_distribution=MarkDistribution.from_mapping({"5": 2}),
        ... )
        >>> settings.board_label
        'CBSE'
    """

    board: str
    class_level: str
    subject: str
    topics: tuple[str, ...]
    total_marks: int
    time_duration: int
    mark_distribution: MarkDistribution = field(default_factory=MarkDistribution.empty)
    instructions: str = DEFAULT_INSTRUCTIONS
    header: str = DEFAULT_HEADER
    include_pyqs: bool = False
    generate_probables: bool = True
    syllabus_text: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate settings on construction."""
        # Accept lists for convenience but store a tuple
        if not isinstance(self.topics, tuple):
            object.__setattr__(self, "topics", tuple(self.topics))

        self.validate()

    def validate(self) -> None:
        """
        Check every field and report all problems together.

        Raises:
            SettingsValidationError: Carrying one message per problem
        """
        issues = self.collect_issues()
        if issues:
            raise SettingsValidationError(issues)

    def collect_issues(self) -> list[str]:
        """Return a message for each invalid field (empty when valid)."""
        issues: list[str] = []
        if not (self.board or "").strip():
            issues.append("Board is required")
        if not (self.class_level or "").strip():
            issues.append("Class is required")
        if not (self.subject or "").strip():
            issues.append("Subject is required")

        if not self.topics:
            issues.append("At least one topic is required")
        elif any(not (t or "").strip() for t in self.topics):
            issues.append("Topic cannot be empty")

        if self.total_marks <= 0:
            issues.append("Total marks must be positive")
        if self.time_duration <= 0:
            issues.append("Time duration must be positive")

        if (
            self.mark_distribution.is_declared
            and self.total_marks > 0
            and self.mark_distribution.total_marks != self.total_marks
        ):
            issues.append(
                "Sum of marks in distribution must equal Total Marks "
                f"({self.mark_distribution.total_marks} != {self.total_marks})"
            )
        return issues

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_form(cls, data: Mapping[str, Any]) -> PaperSettings:
        """
        Build settings from a form submission.

        Accepts camelCase (classLevel, totalMarks, markDistribution, ...) or
        snake_case keys, and numbers given as strings.

        Args:
            data: Raw submitted values

        Returns:
            Validated PaperSettings

        Raises:
            SettingsValidationError: If any field is missing or invalid
        """
        def get(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        issues: list[str] = []

        def as_int(value: Any, label: str) -> int:
            try:
                return int(str(value).strip())
            except (TypeError, ValueError):
                issues.append(f"{label} must be a whole number")
                return 0

        try:
            distribution = MarkDistribution.from_mapping(
                get("mark_distribution", "markDistribution", default={})
            )
        except ValueError as e:
            issues.append(f"Invalid mark distribution: {e}")
            distribution = MarkDistribution.empty()

        total_marks = as_int(get("total_marks", "totalMarks", default=0), "Total marks")
        time_duration = as_int(get("time_duration", "timeDuration", default=0), "Time duration")

        if issues:
            raise SettingsValidationError(issues)

        topics = get("topics", default=())
        if isinstance(topics, str):
            topics = [topics]

        return cls(
            board=str(get("board", default="")).strip(),
            class_level=str(get("class_level", "classLevel", default="")).strip(),
            subject=str(get("subject", default="")).strip(),
            topics=tuple(str(t).strip() for t in topics),
            total_marks=total_marks,
            time_duration=time_duration,
            mark_distribution=distribution,
            instructions=get("instructions", default=DEFAULT_INSTRUCTIONS),
            header=get("header", default=DEFAULT_HEADER),
            include_pyqs=_as_bool(get("include_pyqs", "includePYQs", default=False)),
            generate_probables=_as_bool(get("generate_probables", "generateProbables", default=True)),
            syllabus_text=get("syllabus_text", "syllabusText"),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def syllabus_content(self) -> str:
        """Syllabus text for the AI source, falling back to the topic list."""
        if self.syllabus_text and self.syllabus_text.strip():
            return self.syllabus_text
        return "\n".join(self.topics)

    @property
    def board_label(self) -> str:
        """Display label for the board."""
        return resolve_board_label(self.board)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "board": self.board,
            "class_level": self.class_level,
            "subject": self.subject,
            "topics": list(self.topics),
            "total_marks": self.total_marks,
            "time_duration": self.time_duration,
            "mark_distribution": self.mark_distribution.to_dict(),
            "instructions": self.instructions,
            "header": self.header,
            "include_pyqs": self.include_pyqs,
            "generate_probables": self.generate_probables,
        }


def _as_bool(value: Any) -> bool:
    """Interpret checkbox-style values ("true", "on", "1", True)."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "on", "1", "yes")
    return bool(value)
