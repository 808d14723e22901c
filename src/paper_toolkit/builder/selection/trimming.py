"""
Module: builder.selection.trimming

Purpose:
    Remove selected questions until the total is at or below the target.
    Removes the lowest-mark question first; among equal marks the most
    recently added one goes.

Key Functions:
    - trim_to_target(): Trim an ordered selection
    - pick_trim_victim(): Index of the next question to remove

Dependencies:
    - core.models: Question

Used By:
    - builder.selection.selector: Trim pass
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from paper_toolkit.core.models import Question

logger = logging.getLogger(__name__)


def pick_trim_victim(selected: Sequence[Question]) -> int:
    """
    Index of the question the trim pass removes next.

    Lowest mark value wins; ties resolve to the latest position, i.e. the
    most recently added question.

    Args:
        selected: Non-empty selection in assignment order

    Returns:
        Index into selected

    Example:
        >>> [q.marks for q in selected]
        [2, 5, 2, 5]
        >>> pick_trim_victim(selected)
        2
    """
    if not selected:
        raise ValueError("Cannot pick a trim victim from an empty selection")

    victim = len(selected) - 1
    for index in range(len(selected) - 2, -1, -1):
        if selected[index].marks < selected[victim].marks:
            victim = index
    return victim


def trim_to_target(
    selected: Sequence[Question],
    target_marks: int,
) -> List[Question]:
    """
    Remove questions until the total no longer exceeds target_marks.

    Args:
        selected: Selection in assignment order
        target_marks: Total not to exceed

    Returns:
        New list in the original relative order (input unchanged)

    Example:
        >>> [q.marks for q in trim_to_target(selected, 10)]
        [5, 5]
    """
    result = list(selected)
    current = sum(q.marks for q in result)

    while current > target_marks and result:
        victim = result.pop(pick_trim_victim(result))
        current -= victim.marks
        logger.debug(
            f"Trimmed {victim.id} ({victim.marks} marks), now {current} marks"
        )

    return result
