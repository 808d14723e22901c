"""
Unit tests for the paper document: header, instructions, numbering and
escaping rules.
"""

import re

import pytest

from conftest import make_question, make_settings
from paper_toolkit.core.models import SelectionResult
from paper_toolkit.builder.layout import (
    assemble_paper,
    escape_text,
    format_no_selection_message,
    format_paper,
)


@pytest.fixture
def selected():
    return [
        make_question("q1", text="State Newton's first law.", marks=5),
        make_question("q2", text="Solve $x^2 = 4$.", marks=1),
        make_question("q3", text="Define inertia.", marks=1),
        make_question("q4", text="Derive $$v = u + at$$", marks=3),
    ]


class TestEscapeText:
    """Tests for escape_text()."""

    def test_escape_when_markup_then_entities(self):
        assert escape_text('<b>"A" & B</b>') == "&lt;b&gt;&quot;A&quot; &amp; B&lt;/b&gt;"

    def test_escape_when_newlines_then_line_breaks(self):
        assert escape_text("one\ntwo") == "one<br />two"

    def test_escape_when_none_then_empty(self):
        assert escape_text(None) == ""


class TestFormatPaper:
    """Tests for format_paper()."""

    def test_format_contains_header_block(self, selected):
        html = format_paper(selected, make_settings(total_marks=10, time_duration=90))
        assert "Board: CBSE" in html
        assert "Class: 10 | Subject: math" in html
        assert "Time Allowed: 90 minutes" in html
        assert "Maximum Marks: 10" in html

    def test_format_numbering_is_sequential_across_sections(self, selected):
        """Numbers run 1..N over all sections without resets."""
        # Act
        html = format_paper(selected, make_settings())

        # Assert
        numbers = [int(n) for n in re.findall(r'data-number="(\d+)"', html)]
        assert numbers == [1, 2, 3, 4]
        assert re.findall(r'<ol start="(\d+)"', html) == ["1", "3", "4"]

    def test_format_sections_in_ascending_mark_order(self, selected):
        html = format_paper(selected, make_settings())
        a = html.index("Section A (1 Mark Questions)")
        b = html.index("Section B (3 Mark Questions)")
        c = html.index("Section C (5 Mark Questions)")
        assert a < b < c

    def test_format_escapes_free_text_fields(self, selected):
        """Header and instructions are escaped."""
        settings = make_settings(
            header="<script>alert(1)</script>",
            instructions="Use <pen> & paper\nNo calculators",
        )
        html = format_paper(selected, settings)
        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "Use &lt;pen&gt; &amp; paper<br />No calculators" in html
        assert "white-space: pre-line" in html

    def test_format_when_board_class_subject_have_markup_then_escaped(self, selected):
        # Arrange - an unknown board code falls back to the raw code as label
        settings = make_settings(board="<x>", class_level="<i>", subject="<b>x</b>")

        # Act
        html = format_paper(selected, settings)

        # Assert
        assert "Board: &lt;x&gt;" in html
        assert "Class: &lt;i&gt; | Subject: &lt;b&gt;x&lt;/b&gt;" in html
        assert "<x>" not in html
        assert "<i>" not in html
        assert "<b>x</b>" not in html

    def test_format_keeps_question_text_raw(self):
        """Question text carries math markup and is inserted verbatim."""
        question = make_question("q1", text="Simplify <em>$\\frac{a}{b} < 1$</em>", marks=2)
        html = format_paper([question], make_settings())
        assert "Simplify <em>$\\frac{a}{b} < 1$</em>" in html

    def test_format_shows_marks_per_question(self, selected):
        html = format_paper(selected, make_settings())
        assert html.count('class="question-marks">[1]') == 2
        assert '[5]</span>' in html

    def test_format_when_no_instructions_then_block_omitted(self, selected):
        html = format_paper(selected, make_settings(instructions="  "))
        assert "Instructions:" not in html

    def test_format_does_not_change_marks(self, selected):
        """Formatting repeatedly leaves assigned marks untouched."""
        before = [q.marks for q in selected]
        format_paper(selected, make_settings())
        format_paper(selected, make_settings())
        assert [q.marks for q in selected] == before


class TestAssemblePaper:
    """Tests for assemble_paper()."""

    def test_assemble_when_selection_then_sections_and_html(self, selected):
        # Arrange
        selection = SelectionResult(questions=tuple(selected), target_marks=10)

        # Act
        paper = assemble_paper(selection, make_settings())

        # Assert
        assert [s.letter for s in paper.sections] == ["A", "B", "C"]
        assert paper.total_marks == 10
        assert [n for n, _ in paper.numbered_questions()] == [1, 2, 3, 4]
        assert [q.id for q in paper.questions] == ["q2", "q3", "q4", "q1"]
        assert paper.html.startswith('<div class="paper-light-theme">')

    def test_assemble_when_empty_selection_then_raises_error(self):
        with pytest.raises(ValueError, match="empty selection"):
            assemble_paper(SelectionResult(questions=(), target_marks=10), make_settings())

    def test_no_selection_message_is_not_a_paper(self):
        message = format_no_selection_message()
        assert "No questions could be selected" in message
        assert "Tips:" in message
        assert "Section" not in message
