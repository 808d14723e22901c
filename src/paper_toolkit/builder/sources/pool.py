"""
Module: builder.sources.pool

Purpose:
    Build the candidate question pool for one generation request. The AI
    source and one PYQ search per topic run concurrently; every task returns
    its own list and the lists are merged once, in launch order, after all
    tasks have settled. A failing task is recorded and skipped so the rest
    of the pool survives.

Key Functions:
    - build_question_pool(): Run the sources and merge their questions

Key Classes:
    - SourceFailure: One source task that raised
    - PoolResult: Merged candidates plus failures

Dependencies:
    - asyncio (std): Concurrent source calls
    - builder.sources.flows: Default source callables

Used By:
    - builder.controller.generate_paper
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, Sequence, Union

from paper_toolkit.common.path_utils import slugify
from paper_toolkit.core.models.questions import (
    AI_GENERATED_TOPIC,
    SOURCE_AI,
    SOURCE_PYQ,
    Question,
)
from paper_toolkit.core.models.settings import PaperSettings

from .flows import find_past_year_questions, generate_probable_questions
from .schemas import (
    FindPastYearQuestionsInput,
    GenerateProbableQuestionsInput,
    QuestionListOutput,
)

logger = logging.getLogger(__name__)

SourceOutput = Union[QuestionListOutput, Sequence[str]]
GenerateFn = Callable[[GenerateProbableQuestionsInput], Awaitable[SourceOutput]]
SearchFn = Callable[[FindPastYearQuestionsInput], Awaitable[SourceOutput]]


@dataclass(frozen=True)
class SourceFailure:
    """A source task that raised; its questions are missing from the pool."""

    source: str
    topic: str
    error: BaseException

    @property
    def message(self) -> str:
        if self.source == SOURCE_PYQ:
            return f"Failed to fetch PYQs for {self.topic}: {self.error}"
        return f"Failed to generate probable questions: {self.error}"


@dataclass(frozen=True)
class PoolResult:
    """Merged candidate pool (launch order) and any per-source failures."""

    questions: tuple[Question, ...] = ()
    failures: tuple[SourceFailure, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.questions

    def count_by_source(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for q in self.questions:
            counts[q.source] = counts.get(q.source, 0) + 1
        return counts


@dataclass(frozen=True)
class _SourceTask:
    source: str
    topic: str


async def build_question_pool(
    settings: PaperSettings,
    *,
    generate: GenerateFn = generate_probable_questions,
    search: SearchFn = find_past_year_questions,
) -> PoolResult:
    """
    Gather candidate questions from every enabled source.

    Args:
        settings: Validated paper settings
        generate: AI generation source (async)
        search: Past-year question search (async), called once per topic

    Returns:
        PoolResult with all successful questions, unmarked

    Example:
        >>> pool = asyncio.run(build_question_pool(settings))
        >>> len(pool.questions), len(pool.failures)
        (24, 0)
    """
    tasks: list[_SourceTask] = []
    calls: list[Awaitable[SourceOutput]] = []

    if settings.generate_probables:
        tasks.append(_SourceTask(SOURCE_AI, AI_GENERATED_TOPIC))
        calls.append(generate(GenerateProbableQuestionsInput(
            syllabus=settings.syllabus_content,
            board=settings.board,
            class_level=settings.class_level,
            subject=settings.subject,
        )))

    if settings.include_pyqs:
        for topic in settings.topics:
            if not topic.strip():
                continue
            tasks.append(_SourceTask(SOURCE_PYQ, topic))
            calls.append(search(FindPastYearQuestionsInput(
                topic=topic,
                board=settings.board,
            )))

    if not calls:
        logger.warning("No question sources enabled; pool is empty")
        return PoolResult()

    logger.info(f"Querying {len(calls)} question source(s)")
    outcomes = await asyncio.gather(*calls, return_exceptions=True)

    questions: list[Question] = []
    failures: list[SourceFailure] = []
    for task, outcome in zip(tasks, outcomes):
        if isinstance(outcome, BaseException):
            failure = SourceFailure(task.source, task.topic, outcome)
            logger.warning(failure.message)
            failures.append(failure)
            continue
        texts = _texts(outcome)
        questions.extend(_to_questions(task, texts))
        logger.debug(f"{task.source} ({task.topic}): {len(texts)} question(s)")

    logger.info(
        f"Pool built: {len(questions)} question(s), {len(failures)} failed source(s)"
    )
    return PoolResult(tuple(questions), tuple(failures))


def _texts(output: SourceOutput) -> list[str]:
    if isinstance(output, QuestionListOutput):
        return list(output.questions)
    return [t for t in output if t and t.strip()]


def _to_questions(task: _SourceTask, texts: Iterable[str]) -> list[Question]:
    # Token is fresh per source call so ids never collide across calls
    token = secrets.token_hex(4)
    if task.source == SOURCE_AI:
        prefix = "probable"
    else:
        prefix = f"pyq-{slugify(task.topic)}"
    return [
        Question(
            id=f"{prefix}-{i}-{token}",
            text=text,
            marks=0,
            topic=task.topic,
            source=task.source,
        )
        for i, text in enumerate(texts)
    ]
