"""
Unit tests for ExportConfig and output file naming.
"""

from pathlib import Path

import pytest

from conftest import make_settings
from paper_toolkit.builder.config import ExportConfig
from paper_toolkit.common.path_utils import paper_filename, safe_filename, slugify


class TestExportConfig:
    """Tests for ExportConfig dataclass."""

    def test_init_when_defaults_then_a4_defaults(self):
        config = ExportConfig()
        assert config.margin_mm == 15.0
        assert config.font_size == 12.0
        assert config.math_dpi == 200
        assert config.effective_math_fontsize == 12.0
        assert config.show_answer_lines
        assert not config.write_metadata

    def test_init_when_output_dir_string_then_path(self):
        assert ExportConfig(output_dir="out").output_dir == Path("out")

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"margin_mm": -1}, "margin_mm"),
            ({"font_size": 0}, "font_size"),
            ({"math_dpi": 0}, "math_dpi"),
            ({"math_fontsize": -2}, "math_fontsize"),
            ({"filename": "  "}, "filename"),
        ],
    )
    def test_init_when_invalid_then_raises_error(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            ExportConfig(**kwargs)

    def test_resolve_output_path_when_no_override_then_default_name(self, tmp_path):
        config = ExportConfig(output_dir=tmp_path)
        path = config.resolve_output_path(make_settings())
        assert path == tmp_path / "math_Class10_Board_cbse_Paper.pdf"

    def test_resolve_output_path_when_override_then_sanitized_pdf(self, tmp_path):
        config = ExportConfig(output_dir=tmp_path, filename="Term 1 / final")
        assert config.resolve_output_path(make_settings()).name == "Term_1___final.pdf"

    def test_metadata_path_when_pdf_given_then_named_after_pdf(self, tmp_path):
        config = ExportConfig(output_dir=tmp_path)
        pdf_path = config.resolve_output_path(make_settings())
        assert config.metadata_path(pdf_path) == tmp_path / "math_Class10_Board_cbse_Paper_metadata.json"


class TestPaperFilename:
    """Tests for file naming helpers."""

    def test_paper_filename_replaces_unsafe_characters(self):
        settings = make_settings(subject="Social Studies", board="west bengal", class_level="9")
        assert paper_filename(settings) == "Social_Studies_Class9_Board_west_bengal_Paper.pdf"

    def test_safe_filename_keeps_allowed_characters(self):
        assert safe_filename("a-b_c.d") == "a-b_c.d"
        assert safe_filename("x&y?z") == "x_y_z"

    @pytest.mark.parametrize(
        "text, expected",
        [("Linear Equations", "linear-equations"), ("  Trig: Ratios!", "trig-ratios"), ("???", "topic")],
    )
    def test_slugify(self, text, expected):
        assert slugify(text) == expected
