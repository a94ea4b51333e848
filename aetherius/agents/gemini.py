"""
Gemini Text Generation

Thin wrapper over google-generativeai. One call in, one string out.

DESIGN DECISION: The advice gateway talks to a TextGenerator, not to
the Gemini SDK directly. Tests swap in a fake generator, so no test
needs network access or an API key.
"""

from abc import ABC, abstractmethod
from typing import Optional

import google.generativeai as genai

from aetherius.config import GeminiSettings, get_settings


class TextGenerator(ABC):
    """A text-generation provider."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        system_instruction: str,
        model_name: str,
        json_output: bool = False,
    ) -> str:
        """
        Run one generation request.

        Args:
            prompt: The user-facing prompt
            system_instruction: Fixed role and rules for the model
            model_name: Provider model identifier
            json_output: Ask the provider for a JSON document

        Returns:
            The raw response text (possibly empty)
        """
        pass


class GeminiTextGenerator(TextGenerator):
    """
    Google Gemini implementation of TextGenerator.

    A GenerativeModel is built per request because the system
    instruction and response type vary between operations.
    """

    def __init__(self, settings: Optional[GeminiSettings] = None):
        self._settings = settings or get_settings().gemini
        self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)

    def _build_model(
        self,
        model_name: str,
        system_instruction: str,
        json_output: bool,
    ) -> genai.GenerativeModel:
        generation_config = {
            "temperature": self._settings.temperature,
            "max_output_tokens": self._settings.max_output_tokens,
        }
        if json_output:
            generation_config["response_mime_type"] = "application/json"

        return genai.GenerativeModel(
            model_name=model_name,
            system_instruction=system_instruction,
            generation_config=generation_config,
        )

    async def generate(
        self,
        prompt: str,
        *,
        system_instruction: str,
        model_name: str,
        json_output: bool = False,
    ) -> str:
        model = self._build_model(model_name, system_instruction, json_output)
        response = await model.generate_content_async(prompt)
        return response.text
