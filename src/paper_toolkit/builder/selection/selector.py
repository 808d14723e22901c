"""
Module: builder.selection.selector

Purpose:
    Main mark assignment algorithm. Picks questions from an unmarked
    candidate pool and assigns each a mark value so the total reaches the
    target without exceeding it.

Key Functions:
    - select_questions(): Main entry point for selection

Key Classes:
    - Selector: Orchestrates the selection algorithm

Algorithm:
    1. Shuffle the pool to avoid positional bias
    2. Distribution pass: per mark value (ascending), assign up to the
       required count, skipping picks that would overshoot
    3. Fill pass: longest remaining questions first, min(fill_cap, remaining)
    4. Trim pass: drop lowest-mark (most recent on tie) while over target
    5. Return SelectionResult in assignment order

Dependencies:
    - core.models: Question, SelectionResult
    - builder.selection.config: SelectionConfig
    - builder.selection.trimming: Trim pass

Used By:
    - builder.controller: Main pipeline
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Sequence, Set

from paper_toolkit.core.models import Question, SelectionResult

from .config import SelectionConfig
from .trimming import trim_to_target

logger = logging.getLogger(__name__)


def select_questions(
    questions: Sequence[Question],
    config: SelectionConfig,
) -> SelectionResult:
    """
    Assign marks to questions from the pool to meet the mark target.

    Main entry point for the selection algorithm. Pool questions are not
    modified; the result holds copies carrying the assigned marks.

    Args:
        questions: Candidate pool (marks ignored)
        config: Selection configuration

    Returns:
        SelectionResult; may be short of the target or empty, which callers
        must surface rather than treat as failure

    Invariants:
        - result.total_marks <= config.target_marks
        - No question appears twice

    Example:
        >>> config = SelectionConfig(
        ...     target_marks=10,
        ...     distribution=MarkDistribution.from_mapping({"5": 2}),
        ... )
        >>> result = select_questions(pool, config)
        >>> [q.marks for q in result.questions]
        [5, 5]
    """
    selector = Selector(list(questions), config)
    return selector.run()


@dataclass
class Selector:
    """
    Mark assignment orchestrator.

    Attributes:
        questions: Candidate pool
        config: Selection configuration
    """

    questions: List[Question]
    config: SelectionConfig

    # Internal state
    _rng: random.Random = field(init=False)
    _available: List[Question] = field(init=False, default_factory=list)
    _selected: List[Question] = field(init=False, default_factory=list)
    _used_ids: Set[str] = field(init=False, default_factory=set)
    _current_marks: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        """Initialize internal state."""
        self._rng = random.Random(self.config.seed)
        self._available = []
        self._selected = []
        self._used_ids = set()
        self._current_marks = 0

    @property
    def _target(self) -> int:
        return self.config.target_marks

    def run(self) -> SelectionResult:
        """
        Execute the selection algorithm.

        Returns:
            SelectionResult with assigned questions
        """
        # Step 1: Shuffle
        self._shuffle_pool()

        if not self._available:
            logger.warning("Candidate pool is empty, nothing to select")
            return self._build_result()

        # Step 2: Distribution pass
        if self.config.has_distribution:
            self._assign_distribution()

        # Step 3: Fill pass
        if self._current_marks < self._target and self._has_unused():
            self._fill_remaining()

        # Step 4: Trim pass
        if self._current_marks > self._target:
            self._trim_overshoot()

        # Step 5: Log warnings
        self._check_warnings()

        return self._build_result()

    # ─────────────────────────────────────────────────────────────────────────
    # Step 1: Shuffle
    # ─────────────────────────────────────────────────────────────────────────

    def _shuffle_pool(self) -> None:
        """Copy and shuffle the pool, dropping repeated ids."""
        seen: Set[str] = set()
        pool: List[Question] = []
        for q in self.questions:
            if q.id in seen:
                logger.debug(f"Ignoring repeated question id {q.id}")
                continue
            seen.add(q.id)
            pool.append(q)

        self._rng.shuffle(pool)
        self._available = pool

        logger.debug(f"Shuffled pool of {len(pool)} questions")

    # ─────────────────────────────────────────────────────────────────────────
    # Step 2: Distribution Pass
    # ─────────────────────────────────────────────────────────────────────────

    def _assign_distribution(self) -> None:
        """
        Assign each slot's mark value to up to `count` unused questions.

        Slots are processed in ascending mark order. A candidate is skipped
        (left for later passes) when its mark would push the total over the
        target.
        """
        for slot in self.config.distribution:
            found = 0
            for q in list(self._available):
                if found >= slot.count:
                    break
                if q.id in self._used_ids:
                    continue
                if self._current_marks + slot.mark > self._target:
                    continue
                self._assign(q, slot.mark)
                found += 1

            if found < slot.count:
                logger.info(
                    f"Only {found}/{slot.count} questions assigned at "
                    f"{slot.mark} marks; shortfall carries into the fill pass"
                )

    # ─────────────────────────────────────────────────────────────────────────
    # Step 3: Fill Pass
    # ─────────────────────────────────────────────────────────────────────────

    def _fill_remaining(self) -> None:
        """
        Fill leftover capacity, longest question text first.

        Each question receives min(fill_cap, target - current). Stops as
        soon as the target is reached.
        """
        remaining_pool = sorted(
            (q for q in self._available if q.id not in self._used_ids),
            key=lambda q: q.text_length,
            reverse=True,
        )

        for q in remaining_pool:
            marks = min(self.config.fill_cap, self._target - self._current_marks)
            if marks <= 0:
                break
            self._assign(q, marks)
            if self._current_marks >= self._target:
                break

    # ─────────────────────────────────────────────────────────────────────────
    # Step 4: Trim Pass
    # ─────────────────────────────────────────────────────────────────────────

    def _trim_overshoot(self) -> None:
        """Remove questions until the total is within the target."""
        logger.warning(
            f"Selection overshot target ({self._current_marks}/{self._target}), trimming"
        )
        self._selected = trim_to_target(self._selected, self._target)
        self._used_ids = {q.id for q in self._selected}
        self._current_marks = sum(q.marks for q in self._selected)

    # ─────────────────────────────────────────────────────────────────────────
    # Step 5: Warnings
    # ─────────────────────────────────────────────────────────────────────────

    def _check_warnings(self) -> None:
        """Log best-effort outcomes so callers can surface them."""
        if not self._selected:
            logger.warning("No questions could be selected")
        elif self._current_marks < self._target:
            logger.warning(
                f"Pool exhausted before reaching target: "
                f"{self._current_marks}/{self._target} marks"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _has_unused(self) -> bool:
        return any(q.id not in self._used_ids for q in self._available)

    def _assign(self, question: Question, marks: int) -> None:
        """Add a copy of question carrying marks to the selection."""
        self._selected.append(question.with_marks(marks))
        self._used_ids.add(question.id)
        self._current_marks += marks

        logger.debug(
            f"Selected {question.id}: {marks} marks "
            f"(total: {self._current_marks})"
        )

    def _build_result(self) -> SelectionResult:
        """Build final SelectionResult."""
        return SelectionResult(
            questions=tuple(self._selected),
            target_marks=self._target,
        )
