"""
Module: builder.layout

Purpose:
    Paper assembly: group assigned questions into lettered sections by
    mark value and serialize the paper document.

Key Functions:
    - prepare_sections(): Group questions by mark value
    - format_paper(): HTML document for a selection
    - assemble_paper(): Sections + document

Key Classes:
    - FormattedSection: One section of the paper
    - AssembledPaper: Complete paper ready for export
"""

from .models import FormattedSection, AssembledPaper, section_title
from .sections import prepare_sections, section_letter
from .document import (
    format_paper,
    assemble_paper,
    format_no_selection_message,
    escape_text,
)

__all__ = [
    "FormattedSection",
    "AssembledPaper",
    "section_title",
    "prepare_sections",
    "section_letter",
    "format_paper",
    "assemble_paper",
    "format_no_selection_message",
    "escape_text",
]
