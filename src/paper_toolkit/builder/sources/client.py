"""
Shared OpenAI chat helper for the question sources.

Used by:
  - sources.flows.generate_probable_questions
  - sources.flows.find_past_year_questions

Model: gpt-4o-mini (override with PAPER_TOOLKIT_MODEL, e.g. "gpt-4o").
The API key is read from OPENAI_API_KEY; a .env file in the working
directory is loaded first when present.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Optional

from dotenv import load_dotenv
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

# Lazy singleton
_client: Optional[AsyncOpenAI] = None


class LLMConfigurationError(RuntimeError):
    """The language model client cannot be configured (e.g. missing key)."""


class SourceResponseError(ValueError):
    """A source answered with something that is not the expected JSON."""


def get_model() -> str:
    """Model name from the environment, or the default."""
    load_dotenv()
    return os.getenv("PAPER_TOOLKIT_MODEL", DEFAULT_MODEL)


def _get_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        load_dotenv()
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise LLMConfigurationError(
                "OPENAI_API_KEY is not set. Add it to your environment or .env file."
            )
        _client = AsyncOpenAI(api_key=api_key)
    return _client


def reset_client() -> None:
    """Drop the cached client so the next call re-reads the environment."""
    global _client
    _client = None


async def call_llm(
    prompt: str,
    system: str,
    temperature: float = 0.5,
    max_tokens: int = 4096,
) -> str:
    """
    Call OpenAI Chat Completions in JSON mode and return the message text.

    Args:
        prompt:      User-turn message
        system:      System prompt
        temperature: Sampling temperature
        max_tokens:  Max response tokens

    Returns:
        Raw string content of the model response
    """
    client = _get_client()
    model = get_model()
    logger.debug(f"Calling {model} ({len(prompt)} prompt chars)")
    response = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        temperature=temperature,
        max_tokens=max_tokens,
        response_format={"type": "json_object"},
    )
    return response.choices[0].message.content or ""


def extract_json_object(raw: str) -> dict:
    """
    Pull the first JSON object out of a model response.

    Tolerates markdown code fences and chatter around the object.

    Raises:
        SourceResponseError: If no JSON object can be decoded
    """
    text = (raw or "").strip()
    text = re.sub(r"^```(?:json)?\s*", "", text, flags=re.MULTILINE)
    text = re.sub(r"\s*```$", "", text, flags=re.MULTILINE)
    start = text.find("{")
    end = text.rfind("}") + 1
    if start == -1 or end == 0:
        raise SourceResponseError(f"No JSON object found: {text[:200]!r}")
    try:
        data = json.loads(text[start:end])
    except json.JSONDecodeError as e:
        raise SourceResponseError(f"Malformed JSON in response: {e}") from e
    if not isinstance(data, dict):
        raise SourceResponseError("Response JSON is not an object")
    return data
