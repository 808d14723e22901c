"""
Module: builder.selection

Purpose:
    Mark assignment for question papers. Picks questions from an unmarked
    pool and assigns mark values so the paper total meets the target.

Key Functions:
    - select_questions(): Main entry point for selection
    - trim_to_target(): Remove questions while over target

Key Classes:
    - SelectionConfig: Configuration for selection algorithm
    - Selector: Main selection orchestrator

Used By:
    - builder.controller: Main pipeline
"""

from .config import SelectionConfig, DEFAULT_FILL_CAP
from .selector import select_questions, Selector
from .trimming import trim_to_target, pick_trim_victim

__all__ = [
    "SelectionConfig",
    "DEFAULT_FILL_CAP",
    "select_questions",
    "Selector",
    "trim_to_target",
    "pick_trim_victim",
]
