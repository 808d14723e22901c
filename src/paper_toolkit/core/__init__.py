"""
Question Paper Toolkit Core Package

Shared data models for the paper pipeline:

    Question           candidate text with provenance and (once assigned) marks
    MarkDistribution   required question counts per mark value
    PaperSettings      validated configuration for one paper
    SelectionResult    questions with assigned marks, in assignment order
"""

from .models import (
    Question,
    MarkDistribution,
    MarkSlot,
    PaperSettings,
    SettingsValidationError,
    SelectionResult,
)

__all__ = [
    "Question",
    "MarkDistribution",
    "MarkSlot",
    "PaperSettings",
    "SettingsValidationError",
    "SelectionResult",
]
