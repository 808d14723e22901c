"""
Module: builder.output.renderer

Purpose:
    Render an AssembledPaper to an A4 portrait PDF using ReportLab.
    Text is wrapped onto lines by measured width; rasterized math is
    placed inline (or centred on its own line for display math). Math
    without an image is printed as its raw markup.

Key Functions:
    - render_to_pdf(): Main rendering function, returns the page count

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - builder.layout.models: AssembledPaper
    - builder.output.math: Segments and MathImages

Used By:
    - builder.controller: export_paper
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Union

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from paper_toolkit import __version__
from paper_toolkit.builder.config import ExportConfig
from paper_toolkit.builder.layout.models import AssembledPaper, FormattedSection
from paper_toolkit.core.models import Question

from .math import DISPLAY, MathImage, MathKey, extract_math_spans

logger = logging.getLogger(__name__)

# Constants
A4_WIDTH_PT, A4_HEIGHT_PT = A4
BODY_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
LINE_SPACING = 1.35

# Question layout
NUMBER_INDENT_PT = 24
MARKS_GUTTER_PT = 36
QUESTION_GAP_PT = 8
SECTION_GAP_PT = 14

# Answer lines
ANSWER_LINE_SPACING_PT = 22
MAX_ANSWER_LINES = 6

# Footer configuration
FOOTER_FONT_SIZE = 7


def _get_footer_text(page_number: int) -> str:
    """Footer text with version number and page number."""
    return f"Generated with Paper Toolkit v{__version__} | Page {page_number}"


# ─────────────────────────────────────────────────────────────────────────────
# Line model
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class _Word:
    text: str
    width: float


@dataclass(frozen=True)
class _Picture:
    image: MathImage
    width: float
    height: float


Run = Union[_Word, _Picture, None]  # None is a forced line break


@dataclass
class _Line:
    items: List[Union[_Word, _Picture]] = field(default_factory=list)
    width: float = 0.0
    centered: bool = False

    def height(self, text_height: float) -> float:
        pictures = [i.height for i in self.items if isinstance(i, _Picture)]
        return max([text_height] + [h + 4 for h in pictures])


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────


def render_to_pdf(
    paper: AssembledPaper,
    images: Mapping[MathKey, MathImage],
    output_path: Path,
    config: Optional[ExportConfig] = None,
) -> int:
    """
    Render an assembled paper to a PDF file.

    Args:
        paper: Paper with at least one section
        images: Rasterized math keyed by (question number, span index)
        output_path: Path to write PDF
        config: Page geometry and options (defaults to ExportConfig())

    Returns:
        Number of pages written

    Raises:
        ValueError: If the paper has no questions
        IOError: If PDF cannot be written

    Example:
        >>> render_to_pdf(paper, report.images, Path("out/paper.pdf"))
        2
    """
    config = config or ExportConfig()
    if paper.is_empty:
        raise ValueError("Cannot render a paper with no questions")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        writer = _PageWriter(canvas.Canvas(str(output_path), pagesize=A4), config)
        writer.draw_header(paper)
        writer.draw_instructions(paper.settings.instructions)

        number = 1
        for section in paper.sections:
            number = writer.draw_section(section, number, images)

        page_count = writer.finish()
    except Exception:
        # Never leave a half-written PDF behind
        if output_path.exists():
            output_path.unlink()
        raise

    logger.info(f"Rendered {page_count} page(s) to {output_path}")
    return page_count


# ─────────────────────────────────────────────────────────────────────────────
# Page writer
# ─────────────────────────────────────────────────────────────────────────────


class _PageWriter:
    """Top-down cursor over A4 pages of a ReportLab canvas."""

    def __init__(self, c: canvas.Canvas, config: ExportConfig) -> None:
        self.c = c
        self.config = config
        self.margin = config.margin_mm * mm
        self.left = self.margin
        self.right = A4_WIDTH_PT - self.margin
        self.top = A4_HEIGHT_PT - self.margin
        # Footer sits inside the bottom margin; keep content clear of it
        self.bottom = max(self.margin, 28.0)
        self.font_size = config.font_size
        self.text_height = config.font_size * LINE_SPACING
        self.page_number = 1
        self.y = self.top

    @property
    def content_width(self) -> float:
        return self.right - self.left

    # ─────────────────────────────────────────────────────────────────────
    # Pages
    # ─────────────────────────────────────────────────────────────────────

    def new_page(self) -> None:
        self._draw_footer()
        self.c.showPage()
        self.page_number += 1
        self.y = self.top

    def ensure_space(self, height: float) -> None:
        if self.y - height < self.bottom and self.y < self.top:
            self.new_page()

    def finish(self) -> int:
        self._draw_footer()
        self.c.showPage()
        self.c.save()
        return self.page_number

    def _draw_footer(self) -> None:
        if not self.config.show_footer:
            return
        text = _get_footer_text(self.page_number)
        self.c.saveState()
        self.c.setFont(BODY_FONT, FOOTER_FONT_SIZE)
        self.c.setFillColorRGB(0.4, 0.4, 0.4)
        text_width = self.c.stringWidth(text, BODY_FONT, FOOTER_FONT_SIZE)
        self.c.drawString((A4_WIDTH_PT - text_width) / 2, 15, text)
        self.c.restoreState()

    # ─────────────────────────────────────────────────────────────────────
    # Blocks
    # ─────────────────────────────────────────────────────────────────────

    def draw_header(self, paper: AssembledPaper) -> None:
        settings = paper.settings
        if settings.header and settings.header.strip():
            for line in settings.header.strip().splitlines():
                self._centered(line, BOLD_FONT, self.font_size + 4)
        self._centered(f"Board: {settings.board_label}", BODY_FONT, self.font_size)
        self._centered(
            f"Class: {settings.class_level} | Subject: {settings.subject}",
            BODY_FONT,
            self.font_size,
        )

        self.y -= 4
        height = self.text_height
        self.ensure_space(height)
        baseline = self.y - height + (height - self.font_size) / 2 + 0.2 * self.font_size
        self.c.setFont(BOLD_FONT, self.font_size)
        self.c.drawString(
            self.left, baseline, f"Time Allowed: {int(settings.time_duration)} minutes"
        )
        self.c.drawRightString(
            self.right, baseline, f"Maximum Marks: {int(settings.total_marks)}"
        )
        self.y -= height + 2
        self.c.setLineWidth(0.8)
        self.c.line(self.left, self.y, self.right, self.y)
        self.y -= SECTION_GAP_PT

    def draw_instructions(self, instructions: str) -> None:
        if not instructions or not instructions.strip():
            return
        self._flow_block("Instructions:", BOLD_FONT)
        self._flow_block(instructions.strip(), BODY_FONT)
        self.y -= SECTION_GAP_PT

    def draw_section(
        self,
        section: FormattedSection,
        start_number: int,
        images: Mapping[MathKey, MathImage],
    ) -> int:
        """Draw a section heading and its questions; returns the next number."""
        # Keep the heading with at least the first line of its first question
        self.ensure_space(self.text_height * 3)
        self._flow_block(section.title, BOLD_FONT, size=self.font_size + 1)
        self.y -= QUESTION_GAP_PT / 2

        number = start_number
        for question in section.questions:
            self._draw_question(number, question, images)
            number += 1
        self.y -= SECTION_GAP_PT
        return number

    def _draw_question(
        self,
        number: int,
        question: Question,
        images: Mapping[MathKey, MathImage],
    ) -> None:
        text_left = self.left + NUMBER_INDENT_PT
        max_width = self.content_width - NUMBER_INDENT_PT - MARKS_GUTTER_PT
        runs = _question_runs(number, question, images, self.font_size, max_width)
        lines = _wrap(runs, max_width, self.font_size)

        for index, line in enumerate(lines):
            height = line.height(self.text_height)
            self.ensure_space(height)
            baseline = self._draw_line(line, text_left, max_width, height)
            if index == 0:
                self.c.setFont(BOLD_FONT, self.font_size)
                self.c.drawString(self.left, baseline, f"{number}.")
                self.c.drawRightString(self.right, baseline, f"[{int(question.marks)}]")
            self.y -= height

        if self.config.show_answer_lines:
            self._draw_answer_lines(question.marks, text_left)
        self.y -= QUESTION_GAP_PT

    def _draw_answer_lines(self, marks: int, left: float) -> None:
        count = min(max(marks, 1), MAX_ANSWER_LINES)
        for _ in range(count):
            # showPage() clears the graphics state stack, so break pages first
            self.ensure_space(ANSWER_LINE_SPACING_PT)
            self.y -= ANSWER_LINE_SPACING_PT
            self.c.saveState()
            self.c.setDash(2, 3)
            self.c.setLineWidth(0.5)
            self.c.setStrokeColorRGB(0.55, 0.55, 0.55)
            self.c.line(left, self.y, self.right, self.y)
            self.c.restoreState()

    # ─────────────────────────────────────────────────────────────────────
    # Text
    # ─────────────────────────────────────────────────────────────────────

    def _centered(self, text: str, font: str, size: float) -> None:
        height = size * LINE_SPACING
        self.ensure_space(height)
        baseline = self.y - height + (height - size) / 2 + 0.2 * size
        self.c.setFont(font, size)
        self.c.drawCentredString(A4_WIDTH_PT / 2, baseline, text)
        self.y -= height

    def _flow_block(self, text: str, font: str, size: Optional[float] = None) -> None:
        size = size or self.font_size
        height = size * LINE_SPACING
        for line in _wrap(_text_runs(text, size, font), self.content_width, size, font):
            self.ensure_space(height)
            self._draw_line(line, self.left, self.content_width, height, font, size)
            self.y -= height

    def _draw_line(
        self,
        line: _Line,
        left: float,
        max_width: float,
        height: float,
        font: str = BODY_FONT,
        size: Optional[float] = None,
    ) -> float:
        """Draw one wrapped line below the cursor; returns the text baseline."""
        size = size or self.font_size
        bottom = self.y - height
        baseline = bottom + (height - size) / 2 + 0.2 * size
        space = stringWidth(" ", font, size)

        x = left + (max_width - line.width) / 2 if line.centered else left
        self.c.setFont(font, size)
        words: List[str] = []
        words_x = x

        def flush_words() -> None:
            if words:
                self.c.drawString(words_x, baseline, " ".join(words))
                words.clear()

        for i, item in enumerate(line.items):
            if i > 0:
                x += space
            if isinstance(item, _Word):
                # Consecutive words share one text run
                if not words:
                    words_x = x
                words.append(item.text)
            else:
                flush_words()
                self.c.drawImage(
                    _pil_to_reader(item.image.image),
                    x,
                    bottom + (height - item.height) / 2,
                    width=item.width,
                    height=item.height,
                    mask="auto",
                )
            x += item.width
        flush_words()
        return baseline


# ─────────────────────────────────────────────────────────────────────────────
# Runs and wrapping
# ─────────────────────────────────────────────────────────────────────────────


def _text_runs(text: str, size: float, font: str = BODY_FONT) -> List[Run]:
    """Words of text with explicit newlines kept as forced breaks."""
    runs: List[Run] = []
    for i, paragraph in enumerate(text.replace("\t", " ").split("\n")):
        if i > 0:
            runs.append(None)
        for word in paragraph.split(" "):
            if word:
                runs.append(_Word(word, stringWidth(word, font, size)))
    return runs


def _question_runs(
    number: int,
    question: Question,
    images: Mapping[MathKey, MathImage],
    size: float,
    max_width: float,
) -> List[Run]:
    runs: List[Run] = []
    for index, segment in enumerate(extract_math_spans(question.text)):
        image = images.get((number, index)) if segment.is_math else None
        if image is None:
            # Plain text, or math that failed to rasterize
            runs.extend(_text_runs(segment.markup, size))
            continue

        width, height = _fit(image, max_width)
        picture = _Picture(image, width, height)
        if segment.kind == DISPLAY:
            runs.extend([None, picture, None])
        else:
            runs.append(picture)
    return runs


def _wrap(
    runs: List[Run],
    max_width: float,
    size: float,
    font: str = BODY_FONT,
) -> List[_Line]:
    """Greedy line breaking; display pictures get a centred line of their own."""
    space = stringWidth(" ", font, size)
    lines: List[_Line] = []
    line = _Line()
    pending_break = False

    for run in runs:
        if run is None:
            if line.items or pending_break:
                lines.append(line)
                line = _Line()
            pending_break = True
            continue
        pending_break = False

        if isinstance(run, _Picture) and run.image.display:
            if line.items:
                lines.append(line)
            lines.append(_Line([run], run.width, centered=True))
            line = _Line()
            continue

        gap = space if line.items else 0.0
        if line.items and line.width + gap + run.width > max_width:
            lines.append(line)
            line = _Line()
            gap = 0.0
        line.items.append(run)
        line.width += gap + run.width

    if line.items or not lines:
        lines.append(line)
    return lines


def _fit(image: MathImage, max_width: float) -> tuple[float, float]:
    """Image size in points, scaled down to max_width when wider."""
    if image.width_pt <= max_width:
        return image.width_pt, image.height_pt
    scale = max_width / image.width_pt
    return max_width, image.height_pt * scale


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)
