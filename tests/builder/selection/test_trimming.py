"""
Unit tests for the trim pass: lowest mark first, most recent on a tie.
"""

import pytest

from conftest import make_question
from paper_toolkit.builder.selection import pick_trim_victim, trim_to_target


def marked(*marks: int):
    return [make_question(f"q{i}", marks=m) for i, m in enumerate(marks)]


class TestPickTrimVictim:
    """Tests for pick_trim_victim()."""

    def test_pick_when_unique_lowest_then_its_index(self):
        assert pick_trim_victim(marked(5, 1, 3)) == 1

    def test_pick_when_tie_then_most_recent(self):
        """Ties resolve to the latest added question."""
        assert pick_trim_victim(marked(2, 5, 2, 5)) == 2

    def test_pick_when_all_equal_then_last(self):
        assert pick_trim_victim(marked(4, 4, 4)) == 2

    def test_pick_when_empty_then_raises_error(self):
        with pytest.raises(ValueError):
            pick_trim_victim([])


class TestTrimToTarget:
    """Tests for trim_to_target()."""

    def test_trim_when_over_target_then_removes_lowest_repeatedly(self):
        # Arrange
        selected = marked(2, 5, 2, 5)

        # Act
        result = trim_to_target(selected, 10)

        # Assert
        assert [q.id for q in result] == ["q1", "q3"]
        assert sum(q.marks for q in result) == 10

    def test_trim_when_within_target_then_unchanged(self):
        selected = marked(3, 3)
        assert trim_to_target(selected, 6) == selected

    def test_trim_keeps_input_list_intact(self):
        selected = marked(1, 5, 5)
        trim_to_target(selected, 10)
        assert len(selected) == 3

    def test_trim_when_removal_leaves_total_below_target_then_stops(self):
        """Trimming removes whole questions and may undershoot."""
        result = trim_to_target(marked(5, 3, 5), 12)
        assert [q.marks for q in result] == [5, 5]
