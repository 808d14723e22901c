"""
Module: builder.output.math

Purpose:
    Locate $...$ / $$...$$ math markup in question text and rasterize each
    expression to a PNG image for the PDF. Rasterization runs concurrently
    in worker threads; an element that fails to render is reported and left
    as its raw markup, the rest of the export continues.

Key Functions:
    - extract_math_spans(): Split text into text / inline / display segments
    - render_latex_to_png(): One expression -> MathImage (matplotlib mathtext)
    - collect_math_elements(): Every math span of a paper, keyed by position
    - rasterize_math_elements(): Concurrent rendering with failure tolerance

Key Classes:
    - Segment: Piece of question text
    - MathImage: Rendered expression with its size in points
    - MathElement: One math span of one numbered question
    - RasterizationReport: Rendered images plus failures

Dependencies:
    - matplotlib: LaTeX subset rendering (Agg, no pyplot)
    - PIL: Image handling

Used By:
    - builder.output.renderer: Inline images
    - builder.controller.export_paper
"""

from __future__ import annotations

import asyncio
import io
import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Tuple

import matplotlib

matplotlib.use("Agg")

from matplotlib.font_manager import FontProperties  # noqa: E402
from matplotlib.mathtext import math_to_image  # noqa: E402
from PIL import Image  # noqa: E402

from paper_toolkit.builder.layout.models import AssembledPaper  # noqa: E402

logger = logging.getLogger(__name__)

# Constants
DEFAULT_MATH_DPI = 200
DEFAULT_MATH_FONTSIZE = 12

TEXT = "text"
INLINE = "inline"
DISPLAY = "display"

# matplotlib's mathtext parser keeps shared state between calls
_RENDER_LOCK = threading.Lock()

# Commands outside matplotlib's mathtext subset with a close equivalent
_MATHTEXT_SUBSTITUTIONS = (
    (re.compile(r"\\[dt]frac(?![a-zA-Z])"), r"\\frac"),
    (re.compile(r"\\text\{"), r"\\mathrm{"),
    (re.compile(r"\\(?:left|right)(?![a-zA-Z])"), ""),
)

MathKey = Tuple[int, int]


@dataclass(frozen=True)
class Segment:
    """A piece of question text: plain text, inline math or display math."""

    kind: str
    content: str

    @property
    def is_math(self) -> bool:
        return self.kind != TEXT

    @property
    def markup(self) -> str:
        """Source form of the segment, with delimiters for math."""
        if self.kind == INLINE:
            return f"${self.content}$"
        if self.kind == DISPLAY:
            return f"$${self.content}$$"
        return self.content


@dataclass(frozen=True)
class MathImage:
    """Rendered expression. Width/height are in PDF points."""

    image: Image.Image
    width_pt: float
    height_pt: float
    display: bool = False


@dataclass(frozen=True)
class MathElement:
    """
    One math span inside one numbered question.

    Attributes:
        question_number: Paper-wide question number (from 1)
        span_index: Index of the segment within extract_math_spans(text)
        expression: LaTeX without delimiters
        display: True for $$...$$
    """

    question_number: int
    span_index: int
    expression: str
    display: bool = False

    @property
    def key(self) -> MathKey:
        return (self.question_number, self.span_index)

    @property
    def markup(self) -> str:
        return Segment(DISPLAY if self.display else INLINE, self.expression).markup


@dataclass(frozen=True)
class MathFailure:
    """An element that could not be rendered."""

    element: MathElement
    error: BaseException

    @property
    def message(self) -> str:
        return (
            f"Could not render math in question {self.element.question_number}: "
            f"{self.element.markup} ({self.error})"
        )


@dataclass
class RasterizationReport:
    """Outcome of rasterizing every math element of a paper."""

    images: Dict[MathKey, MathImage] = field(default_factory=dict)
    failures: List[MathFailure] = field(default_factory=list)
    total: int = 0

    @property
    def rendered(self) -> int:
        return len(self.images)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def warnings(self) -> List[str]:
        return [f.message for f in self.failures]


# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────


def extract_math_spans(text: str) -> List[Segment]:
    """
    Split text into plain text and math segments.

    $$...$$ is display math, $...$ inline math; \\$ is a literal dollar
    sign. An opening delimiter with no closing partner is kept as text.

    Example:
        >>> [s.kind for s in extract_math_spans("Solve $x^2=4$.")]
        ['text', 'inline', 'text']
    """
    segments: List[Segment] = []
    buffer: List[str] = []
    i = 0
    n = len(text or "")

    def flush_text() -> None:
        if buffer:
            segments.append(Segment(TEXT, "".join(buffer)))
            buffer.clear()

    while i < n:
        ch = text[i]
        if ch == "\\" and i + 1 < n and text[i + 1] == "$":
            buffer.append("$")
            i += 2
            continue
        if ch != "$":
            buffer.append(ch)
            i += 1
            continue

        delimiter = "$$" if text.startswith("$$", i) else "$"
        end = _find_closing(text, i + len(delimiter), delimiter)
        if end == -1:
            buffer.append(text[i:i + len(delimiter)])
            i += len(delimiter)
            continue

        flush_text()
        kind = DISPLAY if delimiter == "$$" else INLINE
        segments.append(Segment(kind, text[i + len(delimiter):end].strip()))
        i = end + len(delimiter)

    flush_text()
    return segments


def _find_closing(text: str, start: int, delimiter: str) -> int:
    """Index of the next unescaped delimiter at or after start, or -1."""
    i = start
    while True:
        i = text.find(delimiter, i)
        if i == -1:
            return -1
        if i > 0 and text[i - 1] == "\\":
            i += 1
            continue
        return i


def has_math(text: str) -> bool:
    """True if text contains at least one complete math span."""
    return any(s.is_math for s in extract_math_spans(text))


# ─────────────────────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────────────────────


def render_latex_to_png(
    expression: str,
    display: bool = False,
    fontsize: float = DEFAULT_MATH_FONTSIZE,
    dpi: int = DEFAULT_MATH_DPI,
) -> MathImage:
    """
    Render one LaTeX expression to an image.

    Args:
        expression: LaTeX without $ delimiters
        display: Display math renders 20% larger
        fontsize: Base font size in points
        dpi: Raster resolution

    Returns:
        MathImage with the PNG decoded into a PIL image

    Raises:
        ValueError: If the expression is empty or cannot be parsed
    """
    expression = (expression or "").strip()
    if not expression:
        raise ValueError("Empty math expression")

    size = fontsize * 1.2 if display else fontsize
    buf = io.BytesIO()
    with _RENDER_LOCK:
        math_to_image(
            f"${_to_mathtext(expression)}$",
            buf,
            prop=FontProperties(size=size),
            dpi=dpi,
            format="png",
        )
    buf.seek(0)
    image = Image.open(buf)
    image.load()

    width_px, height_px = image.size
    return MathImage(
        image=image,
        width_pt=_px_to_pt(width_px, dpi),
        height_pt=_px_to_pt(height_px, dpi),
        display=display,
    )


def _to_mathtext(expression: str) -> str:
    # Mathtext has no display mode and rejects newlines
    result = expression.replace("\n", " ")
    for pattern, replacement in _MATHTEXT_SUBSTITUTIONS:
        result = pattern.sub(replacement, result)
    return result


def _px_to_pt(px: int, dpi: int) -> float:
    """Convert pixels to PDF points (1/72 inch)."""
    return px * 72.0 / dpi


# ─────────────────────────────────────────────────────────────────────────────
# Paper-level rasterization
# ─────────────────────────────────────────────────────────────────────────────


def collect_math_elements(paper: AssembledPaper) -> List[MathElement]:
    """Every math span of the paper in printed order."""
    elements: List[MathElement] = []
    for number, question in paper.numbered_questions():
        for index, segment in enumerate(extract_math_spans(question.text)):
            if segment.is_math:
                elements.append(MathElement(
                    question_number=number,
                    span_index=index,
                    expression=segment.content,
                    display=segment.kind == DISPLAY,
                ))
    return elements


RenderFn = Callable[[str, bool, float, int], MathImage]


async def rasterize_math_elements(
    elements: Sequence[MathElement],
    *,
    fontsize: float = DEFAULT_MATH_FONTSIZE,
    dpi: int = DEFAULT_MATH_DPI,
    render: RenderFn = render_latex_to_png,
) -> RasterizationReport:
    """
    Rasterize all elements concurrently; failures never abort the batch.

    Args:
        elements: From collect_math_elements()
        fontsize: Base math font size
        dpi: Raster resolution
        render: Renderer called in a worker thread per element

    Returns:
        RasterizationReport with one image per success and one
        MathFailure per failed element
    """
    report = RasterizationReport(total=len(elements))
    if not elements:
        return report

    logger.debug(f"Rasterizing {len(elements)} math element(s)")
    outcomes = await asyncio.gather(
        *(
            asyncio.to_thread(render, e.expression, e.display, fontsize, dpi)
            for e in elements
        ),
        return_exceptions=True,
    )

    for element, outcome in zip(elements, outcomes):
        if isinstance(outcome, BaseException):
            failure = MathFailure(element, outcome)
            logger.warning(failure.message)
            report.failures.append(failure)
        else:
            report.images[element.key] = outcome

    logger.info(
        f"Math rasterization: {report.rendered}/{report.total} rendered, "
        f"{report.failed} failed"
    )
    return report
