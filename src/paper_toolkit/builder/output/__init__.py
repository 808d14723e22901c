"""
Module: builder.output

Purpose:
    PDF export for assembled papers: concurrent math rasterization and
    A4 rendering with ReportLab.

Key Functions:
    - collect_math_elements(): Math spans of a paper
    - rasterize_math_elements(): Concurrent, failure-tolerant rendering
    - render_to_pdf(): Render paper to PDF

Dependencies:
    - reportlab: PDF generation
    - matplotlib: Math rendering
    - PIL: Image handling

Used By:
    - builder.controller: export_paper
"""

from .math import (
    MathElement,
    MathFailure,
    MathImage,
    RasterizationReport,
    Segment,
    collect_math_elements,
    extract_math_spans,
    has_math,
    rasterize_math_elements,
    render_latex_to_png,
)
from .renderer import render_to_pdf

__all__ = [
    "MathElement",
    "MathFailure",
    "MathImage",
    "RasterizationReport",
    "Segment",
    "collect_math_elements",
    "extract_math_spans",
    "has_math",
    "rasterize_math_elements",
    "render_latex_to_png",
    "render_to_pdf",
]
