"""
Module: builder.controller

Purpose:
    Orchestrate the complete paper pipeline.
    Generate: Sources → Pool → Select → Assemble
    Export:   Collect math → Rasterize → Render PDF → Metadata

Key Functions:
    - generate_paper(): Build a paper from settings (async)
    - export_paper(): Write an assembled paper to PDF (async)
    - generate_paper_sync() / export_paper_sync(): Blocking wrappers

Key Classes:
    - GenerationResult: Pool, selection and assembled paper
    - ExportResult: PDF path, page count and math statistics
    - BuildError: Base exception for pipeline failures

Dependencies:
    - builder.sources: Question pool
    - builder.selection: Mark assignment
    - builder.layout: Paper assembly
    - builder.output: Math rasterization and PDF rendering
    - utils.notifications: User-facing notices

Used By:
    - Front ends (form submission and download actions)
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from paper_toolkit import __version__
from paper_toolkit.core.models import (
    SOURCE_AI,
    PaperSettings,
    SelectionResult,
    SettingsValidationError,
)
from paper_toolkit.utils.notifications import NotificationQueue

from .config import ExportConfig
from .layout import AssembledPaper, assemble_paper, format_no_selection_message
from .output import collect_math_elements, rasterize_math_elements, render_to_pdf
from .output.math import RasterizationReport
from .selection import SelectionConfig, select_questions
from .sources import (
    PoolResult,
    build_question_pool,
    find_past_year_questions,
    generate_probable_questions,
)
from .sources.pool import GenerateFn, SearchFn

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Error during the paper pipeline."""
    pass


class GenerationError(BuildError):
    """Paper generation failed after settings were accepted."""
    pass


class ExportError(BuildError):
    """No PDF could be produced for the paper."""
    pass


@dataclass(frozen=True)
class GenerationResult:
    """
    Complete generation result (immutable).

    Attributes:
        settings: Settings the paper was generated for
        pool: Candidate pool with per-source failures
        selection: Questions with assigned marks
        paper: Assembled paper, or None when nothing could be selected
        html: Paper document, or the no-selection message
        warnings: Degradations surfaced to the user

    Example:
        >>> result = generate_paper_sync(settings)
        >>> result.selection.total_marks, result.is_short
        (50, False)
    """

    settings: PaperSettings
    pool: PoolResult
    selection: SelectionResult
    paper: Optional[AssembledPaper]
    html: str
    warnings: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.paper is None

    @property
    def is_short(self) -> bool:
        return self.selection.is_short


@dataclass(frozen=True)
class ExportResult:
    """
    Export outcome (immutable).

    Attributes:
        pdf_path: Written PDF
        page_count: Pages in the PDF
        math_total: Math elements found in the paper
        math_failed: Elements printed as raw markup instead of images
        warnings: Per-element rendering warnings
        metadata: Paper metadata (also written to disk when enabled)
        metadata_path: Metadata sidecar path, if written
    """

    pdf_path: Path
    page_count: int
    math_total: int
    math_failed: int
    warnings: tuple[str, ...] = ()
    metadata: dict = field(default_factory=dict)
    metadata_path: Optional[Path] = None


# ─────────────────────────────────────────────────────────────────────────────
# Generation
# ─────────────────────────────────────────────────────────────────────────────


async def generate_paper(
    settings: Union[PaperSettings, Mapping[str, Any]],
    *,
    generate: Optional[GenerateFn] = None,
    search: Optional[SearchFn] = None,
    notifier: Optional[NotificationQueue] = None,
    seed: Optional[int] = None,
) -> GenerationResult:
    """
    Generate a question paper.

    Pipeline:
    1. Validate settings
    2. Build the candidate pool (sources run concurrently)
    3. Select questions and assign marks
    4. Assemble sections and the HTML document

    Args:
        settings: PaperSettings, or raw form data to validate
        generate: AI source override (defaults to the OpenAI-backed source)
        search: PYQ source override (defaults to the OpenAI-backed source)
        notifier: Receives user-facing notices
        seed: Selector seed, for tests

    Returns:
        GenerationResult; paper is None when no question could be selected

    Raises:
        SettingsValidationError: If settings are invalid (before any source call)
        GenerationError: If selection or assembly fails
    """
    notifier = notifier if notifier is not None else NotificationQueue()
    warnings: list[str] = []
    start_time = time.perf_counter()

    # 1. Validate settings
    if not isinstance(settings, PaperSettings):
        try:
            settings = PaperSettings.from_form(settings)
        except SettingsValidationError as e:
            notifier.error("Validation Error", "; ".join(e.issues))
            raise

    logger.info(
        f"Generating {settings.subject} paper for class {settings.class_level} "
        f"({settings.board_label}), target {settings.total_marks} marks"
    )

    # 2. Build pool
    pool = await build_question_pool(
        settings,
        generate=generate or generate_probable_questions,
        search=search or find_past_year_questions,
    )
    for failure in pool.failures:
        title = "AI Error" if failure.source == SOURCE_AI else "PYQ Search Error"
        notifier.warning(title, failure.message)
        warnings.append(failure.message)

    # 3. Select questions
    try:
        selection = select_questions(
            pool.questions,
            SelectionConfig.from_settings(settings, seed=seed),
        )
    except Exception as e:
        notifier.error("Generation Error", f"Failed to generate paper: {e}")
        raise GenerationError(f"Selection failed: {e}") from e

    logger.info(
        f"Selected {selection.question_count} questions, "
        f"achieved {selection.total_marks}/{settings.total_marks} marks"
    )

    if selection.is_empty:
        notifier.error(
            "No Questions Selected",
            "Could not select any questions based on the criteria. "
            "Please check your settings or try broader topics.",
        )
        return GenerationResult(
            settings=settings,
            pool=pool,
            selection=selection,
            paper=None,
            html=format_no_selection_message(),
            warnings=tuple(warnings),
        )

    if selection.is_short:
        message = (
            f"Only {selection.total_marks} of {settings.total_marks} marks could be "
            "filled from the available questions. Try broader topics or enable "
            "past year questions."
        )
        notifier.warning("Best Effort Paper", message)
        warnings.append(message)

    # 4. Assemble
    try:
        paper = assemble_paper(selection, settings)
    except Exception as e:
        notifier.error("Generation Error", f"Failed to generate paper: {e}")
        raise GenerationError(f"Assembly failed: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Paper generated in {elapsed:.2f}s")
    notifier.info(
        "Paper Generated",
        "Preview is ready. You can review it before downloading.",
    )

    return GenerationResult(
        settings=settings,
        pool=pool,
        selection=selection,
        paper=paper,
        html=paper.html,
        warnings=tuple(warnings),
    )


def generate_paper_sync(
    settings: Union[PaperSettings, Mapping[str, Any]],
    **kwargs: Any,
) -> GenerationResult:
    """Blocking wrapper around generate_paper() for non-async callers."""
    return asyncio.run(generate_paper(settings, **kwargs))


# ─────────────────────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────────────────────


async def export_paper(
    result_or_paper: Union[GenerationResult, AssembledPaper, None],
    config: Optional[ExportConfig] = None,
    *,
    notifier: Optional[NotificationQueue] = None,
) -> ExportResult:
    """
    Export an assembled paper to an A4 PDF.

    Math elements are rasterized concurrently; an element that fails is
    printed as raw markup and reported as a warning.

    Args:
        result_or_paper: GenerationResult or AssembledPaper
        config: Export configuration (defaults to ExportConfig())
        notifier: Receives user-facing notices

    Returns:
        ExportResult with the PDF path and statistics

    Raises:
        ExportError: If there is no paper to export, the PDF cannot be
            written, or the requested metadata sidecar cannot be written;
            no PDF is left behind in any of these cases
    """
    config = config or ExportConfig()
    notifier = notifier if notifier is not None else NotificationQueue()

    paper = _resolve_paper(result_or_paper)
    if paper is None or paper.is_empty:
        notifier.error("Error", "No paper available to export. Please generate the paper first.")
        raise ExportError("No paper available to export")

    output_path = config.resolve_output_path(paper.settings)
    notifier.info("PDF Generation Started", "Preparing your paper for download...")

    # 1. Rasterize math
    elements = collect_math_elements(paper)
    if elements:
        notifier.info(
            "Processing Math",
            f"Converting {len(elements)} math expressions to images...",
        )
    report = await rasterize_math_elements(
        elements,
        fontsize=config.effective_math_fontsize,
        dpi=config.math_dpi,
    )
    for failure in report.failures:
        notifier.warning(
            "Math Rendering Issue",
            f"A math formula in question {failure.element.question_number} "
            "might not appear correctly in the PDF.",
        )

    # 2. Render PDF
    try:
        page_count = await asyncio.to_thread(
            render_to_pdf, paper, report.images, output_path, config
        )
    except Exception as e:
        notifier.error("PDF Generation Error", f"Failed to create PDF. {e}")
        raise ExportError(f"Failed to render PDF: {e}") from e

    # 3. Metadata
    metadata = _build_metadata(paper, report, output_path, page_count)
    metadata_path = None
    if config.write_metadata:
        metadata_path = config.metadata_path(output_path)
        try:
            _write_metadata(metadata_path, metadata)
        except ExportError as e:
            # The export is all-or-nothing
            output_path.unlink(missing_ok=True)
            notifier.error("PDF Generation Error", f"Failed to save paper details. {e}")
            raise
        logger.info(f"Wrote paper metadata to {metadata_path}")

    notifier.info("Download Complete", f"{output_path.name} has been saved.")

    return ExportResult(
        pdf_path=output_path,
        page_count=page_count,
        math_total=report.total,
        math_failed=report.failed,
        warnings=tuple(report.warnings),
        metadata=metadata,
        metadata_path=metadata_path,
    )


def export_paper_sync(
    result_or_paper: Union[GenerationResult, AssembledPaper, None],
    config: Optional[ExportConfig] = None,
    **kwargs: Any,
) -> ExportResult:
    """Blocking wrapper around export_paper() for non-async callers."""
    return asyncio.run(export_paper(result_or_paper, config, **kwargs))


def _resolve_paper(
    result_or_paper: Union[GenerationResult, AssembledPaper, None],
) -> Optional[AssembledPaper]:
    if isinstance(result_or_paper, GenerationResult):
        return result_or_paper.paper
    return result_or_paper


def _build_metadata(
    paper: AssembledPaper,
    report: RasterizationReport,
    pdf_path: Path,
    page_count: int,
) -> dict:
    """
    Build metadata dictionary for an exported paper.

    Example:
        >>> metadata = _build_metadata(paper, report, path, 2)
        >>> metadata["actual_marks"]
        50
    """
    settings = paper.settings
    questions = [
        {
            "number": number,
            "id": q.id,
            "marks": q.marks,
            "topic": q.topic,
            "source": q.source,
        }
        for number, q in paper.numbered_questions()
    ]
    return {
        "generated_at": datetime.now().isoformat(),
        "toolkit_version": __version__,
        "pdf": pdf_path.name,
        "page_count": page_count,
        "board": settings.board,
        "board_label": settings.board_label,
        "class_level": settings.class_level,
        "subject": settings.subject,
        "topics": list(settings.topics),
        "time_duration": settings.time_duration,
        "target_marks": settings.total_marks,
        "actual_marks": paper.total_marks,
        "question_count": len(questions),
        "mark_distribution": settings.mark_distribution.to_dict(),
        "sections": [
            {
                "letter": s.letter,
                "title": s.title,
                "mark_value": s.mark_value,
                "question_count": len(s.questions),
            }
            for s in paper.sections
        ],
        "math": {
            "total": report.total,
            "rendered": report.rendered,
            "failed": report.failed,
        },
        "questions": questions,
    }


def _write_metadata(metadata_path: Path, metadata: dict) -> None:
    """
    Write metadata JSON file.

    Raises:
        ExportError: If writing fails
    """
    try:
        metadata_path.parent.mkdir(parents=True, exist_ok=True)
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2)
        logger.debug(f"Wrote metadata to {metadata_path}")
    except OSError as e:
        raise ExportError(f"Failed to write metadata: {e}") from e
