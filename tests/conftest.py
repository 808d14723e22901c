import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import paper_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from paper_toolkit.core.models import MarkDistribution, PaperSettings, Question  # noqa: E402


def make_question(
    qid: str,
    text: str = "Explain the term.",
    marks: int = 0,
    topic: str = "Algebra",
    source: str = "PYQ",
) -> Question:
    """Helper to create test questions."""
    return Question(id=qid, text=text, marks=marks, topic=topic, source=source)


def make_settings(**overrides) -> PaperSettings:
    """Helper to create valid settings with overridable fields."""
    values = dict(
        board="cbse",
        class_level="10",
        subject="math",
        topics=("Quadratic Equations", "Triangles"),
        total_marks=10,
        time_duration=60,
    )
    values.update(overrides)
    if isinstance(values.get("mark_distribution"), dict):
        values["mark_distribution"] = MarkDistribution.from_mapping(
            values["mark_distribution"]
        )
    return PaperSettings(**values)


# Common test fixtures
@pytest.fixture
def settings() -> PaperSettings:
    """Return valid paper settings targeting 10 marks."""
    return make_settings()


@pytest.fixture
def pool() -> list[Question]:
    """Five unmarked questions of increasing text length."""
    return [
        make_question(f"q{i}", text="x" * (10 * i), topic=f"Topic {i}")
        for i in range(1, 6)
    ]
