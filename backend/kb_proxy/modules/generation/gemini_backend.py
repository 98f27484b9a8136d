"""Gemini backend for answer generation."""

import structlog
from google import genai
from google.genai import errors as genai_errors

from kb_proxy.modules.errors import GenerationError

logger = structlog.get_logger()

DEFAULT_MODEL = "gemini-2.5-flash"


class GeminiGenerator:
    """
    Single-shot text generation with Google Gemini.

    A client session is opened per call and keyed by the configured API key.
    No streaming, no conversation state, no retries.
    """

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        self.api_key = api_key
        self.model = model

    async def generate(self, prompt: str, model: str | None = None) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Fully composed prompt
            model: Model identifier, defaults to the configured model

        Returns:
            Generated text
        """
        model = model or self.model
        logger.info("Generating with Gemini", model=model, prompt_length=len(prompt))

        client = genai.Client(api_key=self.api_key)
        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=prompt,
            )
        except genai_errors.APIError as e:
            logger.error("Gemini generation failed", model=model, error=str(e))
            raise GenerationError(f"Gemini generation failed: {e}") from e

        text = response.text
        if not text:
            logger.error("Gemini returned no text", model=model)
            raise GenerationError("Gemini returned an empty response")

        logger.info("Gemini response received", model=model, answer_length=len(text))
        return text
