"""
Module: builder.config

Purpose:
    Configuration dataclass for exporting an assembled paper to PDF.
    Immutable configuration with validation on construction.

Key Classes:
    - ExportConfig: Output location, page geometry and rendering options

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: export_paper
    - builder.output.renderer: Page geometry and fonts
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from paper_toolkit.common.path_utils import paper_filename, safe_filename
from paper_toolkit.core.models.settings import PaperSettings

METADATA_SUFFIX = "_metadata.json"


@dataclass(frozen=True)
class ExportConfig:
    """
    Configuration for exporting a paper (immutable).

    Attributes:
        output_dir: Directory the PDF (and metadata) is written to
        filename: Override for the PDF name; derived from settings when None
        margin_mm: Page margin on every side, in millimetres
        font_size: Base body font size in points
        math_dpi: Raster resolution for math images
        math_fontsize: Math font size in points; follows font_size when None
        show_answer_lines: Draw dashed answer lines after each question
        show_footer: Draw the page footer
        write_metadata: Also write a <pdf stem>_metadata.json sidecar (opt-in)

    Example:
        >>> config = ExportConfig(output_dir=Path("out"))
        >>> config.resolve_output_path(settings).name
        'math_Class10_Board_cbse_Paper.pdf'
    """

    output_dir: Path = Path(".")

    filename: Optional[str] = None

    # Page
    margin_mm: float = 15.0
    font_size: float = 12.0

    # Math
    math_dpi: int = 200
    math_fontsize: Optional[float] = None

    # Content
    show_answer_lines: bool = True
    show_footer: bool = True
    write_metadata: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not isinstance(self.output_dir, Path):
            object.__setattr__(self, "output_dir", Path(self.output_dir))
        if self.margin_mm < 0:
            raise ValueError(f"margin_mm must be non-negative: {self.margin_mm}")
        if self.margin_mm > 60:
            raise ValueError(f"margin_mm leaves no room for content: {self.margin_mm}")
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive: {self.font_size}")
        if self.math_dpi <= 0:
            raise ValueError(f"math_dpi must be positive: {self.math_dpi}")
        if self.math_fontsize is not None and self.math_fontsize <= 0:
            raise ValueError(f"math_fontsize must be positive: {self.math_fontsize}")
        if self.filename is not None and not self.filename.strip():
            raise ValueError("filename cannot be blank")

    @property
    def effective_math_fontsize(self) -> float:
        return self.math_fontsize if self.math_fontsize is not None else self.font_size

    def resolve_output_path(self, settings: PaperSettings) -> Path:
        """PDF path for a paper: the override name if set, else the default."""
        if self.filename:
            name = safe_filename(self.filename)
            if not name.lower().endswith(".pdf"):
                name += ".pdf"
        else:
            name = paper_filename(settings)
        return self.output_dir / name

    def metadata_path(self, pdf_path: Path) -> Path:
        """Sidecar path for a PDF, named after it so exports never collide."""
        return pdf_path.with_name(pdf_path.stem + METADATA_SUFFIX)
