"""
Generated fallback quote for days when the collection is empty.

One prompt, one response, no retries. Any failure (no SDK, no credentials,
blocked or empty reply, API error) is logged and reported as None so the
daily-quote path degrades to "no quote" instead of a server error.
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from typing import Any

from quotely.config import GEMINI_MODEL, GENERATED_QUOTE_AUTHOR, LLM_MAX_OUTPUT_TOKENS, LLM_TEMPERATURE
from quotely.llm.gemini import get_gemini_model
from quotely.observability.logging import get_logger
from quotely.observability.telemetry import counter, log_event, time_block
from quotely.quotes.catalog import quote_image_url
from quotely.quotes.models import Quote

logger = get_logger(__name__)

# "Quote text here." - Author Name
_QUOTE_PATTERN = re.compile(r'"([^"]+)"\s*-\s*(.+)')


def build_prompt(category: str) -> str:
    return (
        f"Generate a {category.lower()} quote. Provide the quote text and the author. "
        "Format the response as plain text like this:\n"
        '"Quote text here." - Author Name'
    )


def parse_generated_quote(raw: str) -> tuple[str, str] | None:
    """
    Split a model reply into (text, author).

    Falls back to the whole reply as the text with GENERATED_QUOTE_AUTHOR
    when the reply does not follow the quoted-text-dash-author pattern.

    Returns:
        (text, author), or None for an empty reply
    """
    raw = (raw or "").strip()
    if not raw:
        return None

    match = _QUOTE_PATTERN.search(raw)
    if match:
        text = match.group(1).strip()
        author = match.group(2).strip()
        if text and author:
            return text, author

    return raw, GENERATED_QUOTE_AUTHOR


def generate_quote(
    category: str,
    model_getter: Callable[[], Any] = get_gemini_model,
    clock: Callable[[], float] = time.time,
) -> Quote | None:
    """
    Ask Gemini for one quote in the given category.

    Args:
        category: quote category, used in the prompt and the image seed
        model_getter: returns an object with generate_content(prompt, generation_config=...)
        clock: epoch seconds, used for the generated id

    Returns:
        Quote with id gemini-<epoch ms> and zero likes, or None on any failure
    """
    counter("llm.quote_generation.requested")
    try:
        model = model_getter()
        with time_block("llm.quote_generation"):
            response = model.generate_content(
                build_prompt(category),
                generation_config={
                    "temperature": LLM_TEMPERATURE,
                    "max_output_tokens": LLM_MAX_OUTPUT_TOKENS,
                },
            )
        parsed = parse_generated_quote(response.text)
    except Exception as e:
        counter("llm.quote_generation.error")
        logger.error("Quote generation failed: %s (model=%s)", e, GEMINI_MODEL)
        log_event("llm.quote_generation.error", error=str(e)[:200], category=category)
        return None

    if parsed is None:
        counter("llm.quote_generation.empty")
        logger.warning("Gemini returned an empty reply for category %s", category)
        return None

    text, author = parsed
    quote = Quote(
        id=f"gemini-{int(clock() * 1000)}",
        text=text,
        author=author,
        category=category,
        image_url=quote_image_url(category),
        likes=0,
    )

    counter("llm.quote_generation.success")
    log_event("llm.quote_generation.success", quote_id=quote.id, category=category)
    return quote
