"""
Module: builder.layout.document

Purpose:
    Serialize an assigned selection into the paper's HTML document:
    header block, instructions block and lettered sections with
    paper-wide question numbering.

    Every free-text field (header, instructions, board label, class,
    subject, section titles) is escaped. Question text is inserted raw
    because it carries $...$ / $$...$$ math markup consumed downstream;
    callers holding untrusted question text must sanitize it with a
    math-aware sanitizer before assembly.

Key Functions:
    - format_paper(): Build the HTML document
    - assemble_paper(): Sections + document as an AssembledPaper
    - format_no_selection_message(): Terminal message for empty selections

Dependencies:
    - html (std): Escaping
    - builder.layout.sections: Section grouping

Used By:
    - builder.controller: Paper assembly
"""

from __future__ import annotations

import html
import logging
from typing import List, Sequence

from paper_toolkit.core.models import PaperSettings, Question, SelectionResult

from .models import AssembledPaper, FormattedSection
from .sections import prepare_sections

logger = logging.getLogger(__name__)

PAPER_CLASS = "paper-light-theme"


def escape_text(text: str) -> str:
    """Escape markup characters and turn newlines into <br /> tags."""
    return html.escape(text or "", quote=True).replace("\n", "<br />")


def format_paper(
    questions: Sequence[Question],
    settings: PaperSettings,
) -> str:
    """
    Format assigned questions into the paper's HTML document.

    Args:
        questions: Questions with assigned marks, in selection order
        settings: Paper settings (header, instructions, labels)

    Returns:
        HTML string rooted at a single <div class="paper-light-theme">
    """
    return _render_document(prepare_sections(questions), settings)


def assemble_paper(
    selection: SelectionResult,
    settings: PaperSettings,
) -> AssembledPaper:
    """
    Assemble a selection into sections and an HTML document.

    Args:
        selection: Selector output (must not be empty)
        settings: Paper settings

    Returns:
        AssembledPaper ready for preview or export

    Raises:
        ValueError: If the selection is empty; render
            format_no_selection_message() instead
    """
    if selection.is_empty:
        raise ValueError("Cannot assemble a paper from an empty selection")

    sections = prepare_sections(selection.questions)
    document = _render_document(sections, settings)

    logger.info(
        f"Assembled paper: {selection.question_count} questions in "
        f"{len(sections)} sections, {selection.total_marks} marks"
    )
    return AssembledPaper(
        settings=settings,
        sections=tuple(sections),
        html=document,
    )


def format_no_selection_message() -> str:
    """HTML shown instead of a paper when no questions could be selected."""
    return (
        '<div class="paper-message paper-message-error">'
        "<strong>No questions could be selected.</strong>"
        "<p>This might be due to a very specific mark distribution, too few "
        "questions generated, or a mismatch between total marks and the "
        "available questions.</p>"
        "<p>Tips: Try adjusting total marks or the mark distribution, or "
        "broaden your topics.</p>"
        "</div>"
    )


# ─────────────────────────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────────────────────────


def _render_document(
    sections: Sequence[FormattedSection],
    settings: PaperSettings,
) -> str:
    parts: List[str] = [f'<div class="{PAPER_CLASS}">']
    parts.extend(_render_header(settings))
    parts.extend(_render_instructions(settings.instructions))

    parts.append("<main>")
    number = 1
    for section in sections:
        section_html, number = _render_section(section, number)
        parts.extend(section_html)
    parts.append("</main>")

    parts.append("</div>")
    return "".join(parts)


def _render_header(settings: PaperSettings) -> List[str]:
    parts = ['<header class="paper-header">']
    if settings.header and settings.header.strip():
        parts.append(f"<h1>{escape_text(settings.header)}</h1>")
    parts.append(f'<p class="paper-board">Board: {escape_text(settings.board_label)}</p>')
    parts.append(
        f'<p class="paper-meta">Class: {escape_text(settings.class_level)} | '
        f"Subject: {escape_text(settings.subject)}</p>"
    )
    parts.append('<div class="paper-limits">')
    parts.append(f"<span>Time Allowed: {int(settings.time_duration)} minutes</span>")
    parts.append(f"<span>Maximum Marks: {int(settings.total_marks)}</span>")
    parts.append("</div>")
    parts.append("</header>")
    return parts


def _render_instructions(instructions: str) -> List[str]:
    if not instructions or not instructions.strip():
        return []
    return [
        '<div class="paper-instructions">',
        "<h2>Instructions:</h2>",
        f'<div style="white-space: pre-line;">{escape_text(instructions)}</div>',
        "</div>",
    ]


def _render_section(
    section: FormattedSection,
    start_number: int,
) -> tuple[List[str], int]:
    """Render one section; returns its HTML parts and the next number."""
    parts = ['<section class="paper-section">']
    parts.append(f"<h2>{escape_text(section.title)}</h2>")
    parts.append(f'<ol start="{start_number}" class="paper-questions">')

    number = start_number
    for question in section.questions:
        parts.append(f'<li class="paper-question" data-number="{number}">')
        parts.append(f'<span class="question-number">{number}.</span>')
        # Raw: question text carries math markup
        parts.append(f'<span class="question-text">{question.text}</span>')
        parts.append(f'<span class="question-marks">[{int(question.marks)}]</span>')
        parts.append("</li>")
        parts.append('<div class="answer-space" aria-label="Space for answer"></div>')
        number += 1

    parts.append("</ol>")
    parts.append("</section>")
    return parts, number
