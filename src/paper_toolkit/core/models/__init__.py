"""
Core Models Package

Data models shared by every stage of the paper pipeline.

All models are frozen dataclasses: a stage that changes a value (the
selector assigning marks) produces a new instance instead of mutating the
one it was given.
"""

from .questions import Question, AI_GENERATED_TOPIC, SOURCE_AI, SOURCE_PYQ
from .marks import MarkDistribution, MarkSlot
from .settings import PaperSettings, SettingsValidationError
from .selection import SelectionResult

__all__ = [
    "Question",
    "AI_GENERATED_TOPIC",
    "SOURCE_AI",
    "SOURCE_PYQ",
    "MarkDistribution",
    "MarkSlot",
    "PaperSettings",
    "SettingsValidationError",
    "SelectionResult",
]
