"""
Module: marks

Purpose:
    Provides MarkDistribution - the validated table of how many questions
    a paper needs at each mark value. Replaces an open-ended mapping keyed
    by stringified integers with an ordered tuple of (mark, count) slots.

Key Functions:
    - MarkDistribution.from_mapping(mapping): Build from form-style input
    - MarkDistribution.empty(): No distribution (fill pass only)
    - MarkDistribution.is_declared: Any rows submitted, zero counts included
    - MarkDistribution.total_marks: sum(mark * count)

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.settings.PaperSettings
    - builder.selection.config.SelectionConfig
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping


@dataclass(frozen=True, slots=True)
class MarkSlot:
    """
    One row of a mark distribution.

    Attributes:
        mark: Mark value awarded to each question in this slot (> 0)
        count: Number of questions required at this mark value (>= 0)
    """

    mark: int
    count: int

    def __post_init__(self) -> None:
        """Validate slot on construction."""
        if self.mark <= 0:
            raise ValueError(f"Mark value must be positive: {self.mark}")
        if self.count < 0:
            raise ValueError(f"Question count cannot be negative: {self.count}")

    @property
    def subtotal(self) -> int:
        """Marks contributed by this slot."""
        return self.mark * self.count


@dataclass(frozen=True)
class MarkDistribution:
    """
    Required question counts per mark value (immutable).

    Slots are kept sorted ascending by mark, with at most one slot per
    mark value. Zero-count rows are kept: they ask for no questions but
    still mark the distribution as submitted, so an all-zero table is
    checked against the paper total like any other.

    Invariants:
        - slots sorted ascending by mark
        - mark values unique

    Example:
        >>> dist = MarkDistribution.from_mapping({"1": 5, "2": 5, "5": 2})
        >>> dist.total_marks
        25
        >>> [slot.mark for slot in dist]
        [1, 2, 5]
    """

    slots: tuple[MarkSlot, ...] = ()

    def __post_init__(self) -> None:
        """Validate ordering and uniqueness."""
        marks = [slot.mark for slot in self.slots]
        if len(set(marks)) != len(marks):
            raise ValueError(f"Duplicate mark values in distribution: {marks}")
        if marks != sorted(marks):
            raise ValueError(f"Distribution slots must be sorted by mark: {marks}")

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def empty(cls) -> MarkDistribution:
        """Distribution with no slots."""
        return cls(slots=())

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, Any] | None) -> MarkDistribution:
        """
        Build a distribution from a loose mark -> count mapping.

        Keys and values may be ints or numeric strings, as submitted by a
        form. Rows with a zero count are kept.

        Args:
            mapping: Mapping of mark value to required count (None = empty)

        Returns:
            Validated MarkDistribution

        Raises:
            ValueError: On non-integer, non-positive marks, negative counts,
                or two keys that coerce to the same mark value
        """
        if not mapping:
            return cls.empty()

        counts: dict[int, int] = {}
        for raw_mark, raw_count in mapping.items():
            mark = _coerce_int(raw_mark, "mark value")
            count = _coerce_int(raw_count, f"count for {mark}-mark questions")
            if mark <= 0:
                raise ValueError(f"Mark value must be positive: {mark}")
            if count < 0:
                raise ValueError(f"Question count cannot be negative: {count}")
            if mark in counts:
                raise ValueError(f"Mark value {mark} appears more than once")
            counts[mark] = count

        slots = tuple(
            MarkSlot(mark=mark, count=count)
            for mark, count in sorted(counts.items())
        )
        return cls(slots=slots)

    @classmethod
    def from_pairs(cls, pairs: list[tuple[int, int]]) -> MarkDistribution:
        """Build from (mark, count) pairs in any order."""
        return cls.from_mapping(dict(pairs))

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_declared(self) -> bool:
        """True if any mark value was given, even with a zero count."""
        return bool(self.slots)

    @property
    def is_empty(self) -> bool:
        """True if no questions are required at any mark value."""
        return not any(slot.count for slot in self.slots)

    @property
    def total_marks(self) -> int:
        """Sum of mark * count across all slots."""
        return sum(slot.subtotal for slot in self.slots)

    @property
    def question_count(self) -> int:
        """Total number of questions the distribution asks for."""
        return sum(slot.count for slot in self.slots)

    def count_for(self, mark: int) -> int:
        """Required count at a mark value (0 if absent)."""
        for slot in self.slots:
            if slot.mark == mark:
                return slot.count
        return 0

    def to_dict(self) -> dict[str, int]:
        """Serialize as {"mark": count} for JSON output."""
        return {str(slot.mark): slot.count for slot in self.slots}

    def __iter__(self) -> Iterator[MarkSlot]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        body = ", ".join(f"{s.mark}x{s.count}" for s in self.slots)
        return f"MarkDistribution({body})"


def _coerce_int(value: Any, what: str) -> int:
    """Coerce an int or integral numeric string, rejecting anything else."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid {what}: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError(f"Invalid {what}: {value!r}")
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise ValueError(f"Invalid {what}: {value!r}") from None
        if number.is_integer():
            return int(number)
    raise ValueError(f"Invalid {what}: {value!r}")
