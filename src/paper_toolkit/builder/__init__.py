"""
Module: builder

Purpose:
    Paper pipeline: gather candidate questions from the AI and PYQ sources,
    assign marks to meet the target, assemble lettered sections and export
    the paper to PDF.

Key Functions:
    - generate_paper(): Main entry point for paper generation
    - export_paper(): PDF export with math rasterization
    - select_questions(): Mark assignment

Key Classes:
    - ExportConfig: Configuration for PDF export
    - SelectionConfig: Configuration for selection algorithm
    - GenerationResult / ExportResult: Pipeline outcomes

Dependencies:
    - openai, pydantic: Question sources
    - matplotlib, PIL, reportlab: PDF export

Used By:
    - Front ends (form submission and download)
"""

from .config import ExportConfig
from .selection import SelectionConfig, select_questions
from .controller import (
    generate_paper,
    generate_paper_sync,
    export_paper,
    export_paper_sync,
    GenerationResult,
    ExportResult,
    BuildError,
    GenerationError,
    ExportError,
)

__all__ = [
    # Config
    "ExportConfig",
    "SelectionConfig",
    # Selection
    "select_questions",
    # Controller
    "generate_paper",
    "generate_paper_sync",
    "export_paper",
    "export_paper_sync",
    "GenerationResult",
    "ExportResult",
    "BuildError",
    "GenerationError",
    "ExportError",
]
