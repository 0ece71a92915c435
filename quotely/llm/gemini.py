"""
Gemini Model Manager - one shared model instance per process.

Supports two backends:
  1. Vertex AI SDK (deployed) - uses GOOGLE_CLOUD_PROJECT + service account
  2. google-generativeai (local dev) - uses GOOGLE_API_KEY

Vertex AI is used whenever a project is configured and the SDK imports;
otherwise the API-key SDK is tried.
"""

from __future__ import annotations

import os
from functools import lru_cache

from quotely.config import GEMINI_LOCATION, GEMINI_MODEL, GOOGLE_CLOUD_PROJECT, LLM_SYSTEM_INSTRUCTION
from quotely.observability.logging import get_logger

logger = get_logger(__name__)


class GeminiInitializationError(RuntimeError):
    """Raised when Gemini model cannot be initialized."""


def _vertex_model(project: str):
    import vertexai
    from vertexai.generative_models import GenerativeModel

    location = GEMINI_LOCATION or "us-central1"
    vertexai.init(project=project, location=location)
    model = GenerativeModel(GEMINI_MODEL, system_instruction=LLM_SYSTEM_INSTRUCTION)

    logger.info(
        "Initialized Gemini model (Vertex AI): project=%s, location=%s, model=%s",
        project,
        location,
        GEMINI_MODEL,
    )
    return model


def _api_key_model(api_key: str):
    import google.generativeai as genai

    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(GEMINI_MODEL, system_instruction=LLM_SYSTEM_INSTRUCTION)

    logger.info("Initialized Gemini model (google-generativeai): model=%s", GEMINI_MODEL)
    return model


@lru_cache(maxsize=1)
def get_gemini_model():
    """
    Get or create shared Gemini model instance.

    Returns:
        GenerativeModel configured with the quote-writer system instruction

    Raises:
        GeminiInitializationError: If no SDK/credential combination works
    """
    project = GOOGLE_CLOUD_PROJECT or os.getenv("GOOGLE_CLOUD_PROJECT")

    if project:
        try:
            return _vertex_model(project)
        except ImportError:
            logger.info("Vertex AI SDK not installed, trying google-generativeai fallback")
        except Exception as e:
            logger.error("Failed to initialize Vertex AI Gemini model: %s", e)
            raise GeminiInitializationError(f"Failed to initialize Gemini: {e}") from e

    api_key = os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise GeminiInitializationError(
            "Neither GOOGLE_CLOUD_PROJECT (with google-cloud-aiplatform) nor GOOGLE_API_KEY is set."
        )

    try:
        return _api_key_model(api_key)
    except ImportError as e:
        raise GeminiInitializationError(
            "No Gemini SDK available. Install google-cloud-aiplatform or google-generativeai."
        ) from e
    except Exception as e:
        logger.error("Failed to initialize Gemini model: %s", e)
        raise GeminiInitializationError(f"Failed to initialize Gemini: {e}") from e


def clear_model_cache() -> None:
    """
    Clear the cached model instance.

    Useful for testing or when reconfiguration is needed.
    """
    get_gemini_model.cache_clear()
    logger.info("Cleared Gemini model cache")
