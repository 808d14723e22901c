"""
Module: builder.sources

Purpose:
    External question sources (AI generation, past-year search) and the
    concurrent pool builder that merges them.

Key Functions:
    - build_question_pool(): Concurrent, failure-tolerant pool building
    - generate_probable_questions(): AI source
    - find_past_year_questions(): PYQ source
"""

from .client import LLMConfigurationError, SourceResponseError, call_llm, extract_json_object
from .flows import find_past_year_questions, generate_probable_questions
from .pool import PoolResult, SourceFailure, build_question_pool
from .schemas import (
    FindPastYearQuestionsInput,
    GenerateProbableQuestionsInput,
    QuestionListOutput,
)

__all__ = [
    "build_question_pool",
    "PoolResult",
    "SourceFailure",
    "generate_probable_questions",
    "find_past_year_questions",
    "GenerateProbableQuestionsInput",
    "FindPastYearQuestionsInput",
    "QuestionListOutput",
    "call_llm",
    "extract_json_object",
    "LLMConfigurationError",
    "SourceResponseError",
]
