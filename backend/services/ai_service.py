import json
import logging
from typing import Sequence

import httpx
from google import genai
from google.genai import errors

from models.schemas import BookRecommendation

logger = logging.getLogger(__name__)


class CandidateError(Exception):
    """A single model candidate failed; the next one may still succeed."""


class RecommendationError(Exception):
    """Every model candidate failed."""


PROMPT_TEMPLATE = """
You are The Archivist, a sophisticated and deeply knowledgeable literary expert.

Your goal is to recommend ONE specific book based on the user's input. You must analyze the nature of the input to decide your action:

LOGIC MAP:
1. If Input is a SYNOPSIS or DESCRIPTION -> Identify the specific book they are describing.
2. If Input is a SPECIFIC QUOTE -> Identify the book that contains this quote.
3. If Input is a VIBE, MOOD, or FEELING -> Recommend the single best matching literary work (novel, poetry, or non-fiction).

INSTRUCTIONS FOR THE 'REASON' FIELD:
- Use sophisticated, evocative, and "ink-and-paper" style language.
- Limit the length to between 25 and 40 words.
- Do not just summarize the plot; explain the atmospheric or thematic connection to the user's inquiry.
- Maintain a mysterious yet helpful persona.

Strictly Output JSON ONLY with this format:
{{
    "title": "Exact Book Title",
    "author": "Author Name",
    "reason": "A sophisticated and evocative Archivist's note, precisely 25-40 words long."
}}

User Input: "{query}"
"""


def build_prompt(query: str) -> str:
    return PROMPT_TEMPLATE.format(query=query)


def strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def parse_recommendation(text: str) -> BookRecommendation:
    """
    Parses model output into a BookRecommendation.
    Raises ValueError (json or pydantic) when the text is not the expected object.
    """
    return BookRecommendation.model_validate(json.loads(strip_code_fences(text)))


def attempt_model(client: genai.Client, model: str, query: str) -> BookRecommendation:
    try:
        response = client.models.generate_content(
            model=model,
            contents=build_prompt(query),
        )
    except errors.APIError as e:
        raise CandidateError(f"Model {model} returned {e.code}") from e
    except httpx.HTTPError as e:
        raise CandidateError(f"Model {model} request failed: {e}") from e

    if not response.candidates:
        raise CandidateError(f"Model {model} returned empty candidates")

    raw_text = response.text
    if not raw_text:
        raise CandidateError(f"Model {model} returned no text")

    try:
        return parse_recommendation(raw_text)
    except ValueError as e:
        raise CandidateError(f"Model {model} returned unparseable output: {e}") from e


def recommend_book(client: genai.Client, query: str, models: Sequence[str]) -> BookRecommendation:
    """
    Asks each model in priority order for one book, strictly one at a time.
    The first candidate with a parseable answer wins; if all fail, the last
    failure is reported in a RecommendationError.
    """
    last_error = None

    for model in models:
        logger.info("Attempting model %s", model)
        try:
            book = attempt_model(client, model, query)
        except CandidateError as e:
            logger.warning("Model %s failed: %s", model, e)
            last_error = e
            continue
        logger.info("Model %s recommended %r by %s", model, book.title, book.author)
        return book

    last_message = str(last_error) if last_error else "no models configured"
    raise RecommendationError(f"All Archivist models failed. Last error: {last_message}")
