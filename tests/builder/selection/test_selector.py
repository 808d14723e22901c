"""
Unit tests for the selector: distribution pass, fill pass and the
best-effort outcomes.
"""

import random

import pytest

from conftest import make_question
from paper_toolkit.core.models import MarkDistribution
from paper_toolkit.builder.selection import SelectionConfig, Selector, select_questions


def config_for(target: int, distribution=None, seed: int = 7) -> SelectionConfig:
    return SelectionConfig(
        target_marks=target,
        distribution=MarkDistribution.from_mapping(distribution or {}),
        seed=seed,
    )


class TestDistributionPass:
    """Tests for mark assignment from the distribution table."""

    def test_select_when_distribution_satisfiable_then_exact_counts(self, pool):
        """totalMarks=10, {"5": 2}, 3 questions -> two 5-mark questions."""
        # Arrange
        small_pool = pool[:3]
        config = config_for(10, {"5": 2})

        # Act
        result = select_questions(small_pool, config)

        # Assert
        assert result.question_count == 2
        assert [q.marks for q in result.questions] == [5, 5]
        assert result.total_marks == 10

    def test_select_when_distribution_mixed_then_counts_per_mark(self, pool):
        result = select_questions(pool, config_for(10, {"1": 2, "2": 2, "4": 1}))
        assert result.marks_by_value == {1: 2, 2: 2, 4: 1}
        assert result.total_marks == 10

    def test_select_when_distribution_exceeds_supply_then_fewer_assigned(self):
        """Asking for more than the pool holds is not an error."""
        # Arrange
        three = [make_question(f"q{i}") for i in range(3)]
        config = config_for(12, {"1": 2, "5": 2})

        # Act
        result = select_questions(three, config)

        # Assert
        assert result.marks_by_value == {1: 2, 5: 1}
        assert result.total_marks == 7
        assert result.is_short

    def test_select_when_slot_would_overshoot_then_shortfall_goes_to_fill(self, pool):
        """A skipped distribution slot leaves capacity for the fill pass."""
        # Arrange - four 3-mark questions would exceed 10
        config = config_for(10, {"3": 4})

        # Act
        result = select_questions(pool, config)

        # Assert
        assert sorted(q.marks for q in result.questions) == [1, 3, 3, 3]
        assert result.total_marks == 10

    def test_select_assigns_ascending_mark_slots_first(self, pool):
        """Lower mark slots are filled before higher ones."""
        result = select_questions(pool, config_for(9, {"2": 2, "5": 1}))
        assert [q.marks for q in result.questions] == [2, 2, 5]


class TestFillPass:
    """Tests for filling leftover capacity."""

    def test_select_when_no_distribution_then_longest_questions_first(self, pool):
        """Empty distribution: fill assigns up to 5 marks, longest text first."""
        # Act
        result = select_questions(pool, config_for(10))

        # Assert
        assert [q.id for q in result.questions] == ["q5", "q4"]
        assert [q.marks for q in result.questions] == [5, 5]

    def test_select_when_remainder_below_cap_then_partial_marks(self, pool):
        result = select_questions(pool, config_for(12))
        assert [q.marks for q in result.questions] == [5, 5, 2]
        assert [q.id for q in result.questions] == ["q5", "q4", "q3"]

    def test_select_when_fill_cap_custom_then_respected(self, pool):
        config = SelectionConfig(target_marks=6, fill_cap=2, seed=1)
        result = select_questions(pool, config)
        assert [q.marks for q in result.questions] == [2, 2, 2]

    def test_select_when_pool_exhausted_then_short_result(self):
        result = select_questions([make_question("q1"), make_question("q2")], config_for(50))
        assert result.total_marks == 10
        assert result.is_short
        assert result.shortfall == 40


class TestEdgeCases:
    """Tests for degenerate pools."""

    def test_select_when_pool_empty_then_empty_result(self):
        result = select_questions([], config_for(10, {"5": 2}))
        assert result.is_empty
        assert result.total_marks == 0

    def test_select_when_repeated_ids_then_used_once(self):
        q = make_question("dup")
        result = select_questions([q, q, q], config_for(15))
        assert result.question_count == 1

    def test_select_does_not_modify_pool(self, pool):
        select_questions(pool, config_for(10, {"5": 2}))
        assert all(q.marks == 0 for q in pool)

    def test_select_ignores_existing_marks_on_pool_items(self):
        """Pool marks are overwritten by the assignment."""
        marked = [make_question(f"q{i}", marks=9) for i in range(4)]
        result = select_questions(marked, config_for(4, {"1": 4}))
        assert [q.marks for q in result.questions] == [1, 1, 1, 1]

    def test_selector_same_seed_same_result(self, pool):
        config = config_for(10, {"2": 5}, seed=42)
        first = Selector(pool, config).run()
        second = Selector(pool, config).run()
        assert [q.id for q in first.questions] == [q.id for q in second.questions]


class TestSelectionProperties:
    """Randomized checks over many pools and distributions."""

    @pytest.mark.parametrize("seed", range(25))
    def test_select_never_exceeds_target(self, seed):
        # Arrange
        rng = random.Random(seed)
        marks = rng.sample([1, 2, 3, 4, 5, 10], k=rng.randint(1, 4))
        distribution = {m: rng.randint(0, 4) for m in marks}
        target = sum(m * c for m, c in distribution.items()) or 10
        pool = [
            make_question(f"q{i}", text="x" * rng.randint(1, 200))
            for i in range(rng.randint(0, 15))
        ]

        # Act
        result = select_questions(pool, config_for(target, distribution, seed=seed))

        # Assert
        assert result.total_marks <= target
        assert len({q.id for q in result.questions}) == result.question_count
        assert all(q.marks > 0 for q in result.questions)

    @pytest.mark.parametrize("seed", range(10))
    def test_select_when_supply_suffices_then_target_met_exactly(self, seed):
        # Arrange
        rng = random.Random(seed)
        distribution = {1: rng.randint(0, 5), 2: rng.randint(0, 5), 5: rng.randint(1, 3)}
        target = sum(m * c for m, c in distribution.items())
        pool = [make_question(f"q{i}") for i in range(sum(distribution.values()) + 3)]

        # Act
        result = select_questions(pool, config_for(target, distribution, seed=seed))

        # Assert
        assert result.total_marks == target
        for mark, count in distribution.items():
            assert result.marks_by_value.get(mark, 0) == count or count == 0
