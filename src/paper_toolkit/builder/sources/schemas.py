"""
Request/response schemas for the two question sources.

Both sources answer with the same shape: {"questions": [str, ...]}.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator


class GenerateProbableQuestionsInput(BaseModel):
    """Request for AI-curated probable questions from a syllabus."""
    syllabus: str = Field(..., description="Syllabus text (or topic list) to generate from")
    board: str = Field(..., description="Education board, e.g. CBSE, ICSE")
    class_level: str = Field(..., description="Class level, e.g. 10")
    subject: str = Field(..., description="Subject, e.g. Mathematics")


class FindPastYearQuestionsInput(BaseModel):
    """Request for past-year questions on one topic."""
    topic: str = Field(..., description="Topic to find past year questions for")
    board: str = Field(..., description="Education board the questions were set by")


class QuestionListOutput(BaseModel):
    """List of question texts returned by either source."""
    questions: List[str] = Field(default_factory=list)

    @field_validator("questions", mode="before")
    @classmethod
    def _drop_blank(cls, value):
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("questions must be a list of strings")
        return [str(q).strip() for q in value if q is not None and str(q).strip()]
