"""
Module: builder.selection.config

Purpose:
    Configuration dataclass for the selection algorithm.
    Immutable configuration with validation on construction.

Key Classes:
    - SelectionConfig: Main configuration for mark assignment

Dependencies:
    - dataclasses (std)
    - core.models: MarkDistribution, PaperSettings

Used By:
    - builder.selection.selector: Main selector
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from paper_toolkit.core.models import MarkDistribution, PaperSettings

# Largest mark value the fill pass hands to a single leftover question
DEFAULT_FILL_CAP = 5


@dataclass(frozen=True)
class SelectionConfig:
    """
    Configuration for the selection algorithm (immutable).

    Attributes:
        target_marks: Total marks the selection must reach without exceeding
        distribution: Required question counts per mark value (may be empty)
        fill_cap: Maximum marks assigned per question in the fill pass
        seed: Shuffle seed; None draws a fresh ordering every run

    Invariants:
        - target_marks > 0
        - fill_cap > 0

    Example:
        >>> config = SelectionConfig(
        ...     target_marks=10,
        ...     distribution=MarkDistribution.from_mapping({"5": 2}),
        ... )
        >>> config.fill_cap
        5
    """

    target_marks: int
    distribution: MarkDistribution = field(default_factory=MarkDistribution.empty)
    fill_cap: int = DEFAULT_FILL_CAP
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.target_marks <= 0:
            raise ValueError(f"target_marks must be positive: {self.target_marks}")
        if self.fill_cap <= 0:
            raise ValueError(f"fill_cap must be positive: {self.fill_cap}")

    @classmethod
    def from_settings(
        cls,
        settings: PaperSettings,
        *,
        seed: Optional[int] = None,
    ) -> SelectionConfig:
        """
        Build a selection config from paper settings.

        Args:
            settings: Validated paper settings
            seed: Optional shuffle seed

        Returns:
            SelectionConfig targeting settings.total_marks
        """
        return cls(
            target_marks=settings.total_marks,
            distribution=settings.mark_distribution,
            seed=seed,
        )

    @property
    def has_distribution(self) -> bool:
        return not self.distribution.is_empty
