"""Generative model clients."""

from forexa.core.ai.base import GenerativeModel
from forexa.core.ai.gemini import DEFAULT_MODEL_ID, GeminiClient

__all__ = ["GenerativeModel", "GeminiClient", "DEFAULT_MODEL_ID"]
