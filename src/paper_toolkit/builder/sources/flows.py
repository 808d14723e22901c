"""
Module: builder.sources.flows

Purpose:
    The two external question sources, each one prompt + one model call:
    AI-curated probable questions from a syllabus, and past-year questions
    per topic. Both return a QuestionListOutput of raw question texts.

Key Functions:
    - generate_probable_questions(): AI generation source
    - find_past_year_questions(): PYQ search source

Dependencies:
    - pydantic: Request/response validation
    - builder.sources.client: Model access

Used By:
    - builder.sources.pool: Pool building
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from .client import SourceResponseError, call_llm, extract_json_object
from .prompts import (
    PAST_YEAR_QUESTIONS_PROMPT,
    PROBABLE_QUESTIONS_PROMPT,
    SYSTEM_PROMPT,
)
from .schemas import (
    FindPastYearQuestionsInput,
    GenerateProbableQuestionsInput,
    QuestionListOutput,
)

logger = logging.getLogger(__name__)


async def generate_probable_questions(
    request: GenerateProbableQuestionsInput,
) -> QuestionListOutput:
    """
    Ask the model for probable questions covering a syllabus.

    Args:
        request: Syllabus, board, class level and subject

    Returns:
        QuestionListOutput (may be empty)

    Raises:
        SourceResponseError: If the model output cannot be parsed
        LLMConfigurationError: If no API key is configured
    """
    prompt = PROBABLE_QUESTIONS_PROMPT.format(
        syllabus=request.syllabus,
        board=request.board,
        class_level=request.class_level,
        subject=request.subject,
    )
    raw = await call_llm(prompt, system=SYSTEM_PROMPT, temperature=0.6)
    output = _parse_question_list(raw)
    logger.info(f"AI source returned {len(output.questions)} probable questions")
    return output


async def find_past_year_questions(
    request: FindPastYearQuestionsInput,
) -> QuestionListOutput:
    """
    Ask the model for past-year questions on one topic.

    Args:
        request: Topic and board

    Returns:
        QuestionListOutput (may be empty)

    Raises:
        SourceResponseError: If the model output cannot be parsed
        LLMConfigurationError: If no API key is configured
    """
    prompt = PAST_YEAR_QUESTIONS_PROMPT.format(
        topic=request.topic,
        board=request.board,
    )
    raw = await call_llm(prompt, system=SYSTEM_PROMPT, temperature=0.3)
    output = _parse_question_list(raw)
    logger.info(
        f"PYQ source returned {len(output.questions)} questions for {request.topic!r}"
    )
    return output


def _parse_question_list(raw: str) -> QuestionListOutput:
    data = extract_json_object(raw)
    try:
        return QuestionListOutput.model_validate(data)
    except ValidationError as e:
        raise SourceResponseError(f"Unexpected response shape: {e}") from e
