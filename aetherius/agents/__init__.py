"""AI Agents package."""

from aetherius.agents.advice import (
    AdviceGateway,
    GenerationError,
    build_advice_prompt,
)
from aetherius.agents.gemini import GeminiTextGenerator, TextGenerator

__all__ = [
    "AdviceGateway",
    "GeminiTextGenerator",
    "GenerationError",
    "TextGenerator",
    "build_advice_prompt",
]
