"""
Language model client for the Opportunity Scanner service.

Wraps the Google Gemini SDK (``google-generativeai``). Every model call made by
the topic suggester and the opportunity analyzer goes through
``GeminiClient.generate``, which raises ``LLMCallError`` for any provider-side
failure so no SDK exception type escapes this module.
"""
import logging
from typing import Optional

import google.generativeai as genai

from opportunity_scanner.config.settings import settings
from opportunity_scanner.core.exceptions import LLMCallError

logger = logging.getLogger(__name__)


class GeminiClient:
    """
    Thin async wrapper around ``genai.GenerativeModel``.

    A missing API key does not fail construction; the first call raises
    ``LLMCallError`` instead, so the service can start without credentials.
    """

    def __init__(
        self,
        api_key: Optional[str] = settings.GOOGLE_API_KEY,
        model_name: str = settings.GEMINI_MODEL_NAME,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self._model = None
        if api_key:
            genai.configure(api_key=api_key)
            self._model = genai.GenerativeModel(model_name)
            logger.info(f"Gemini client initialized with model '{model_name}'")
        else:
            logger.warning("GOOGLE_API_KEY is not set; language model calls will fail at request time.")

    async def generate(self, prompt: str) -> str:
        """
        Send ``prompt`` to the model and return the response text.

        Raises:
            LLMCallError: If the key is missing, the call fails, or the
                response carries no text (e.g. blocked by safety filters).
        """
        if self._model is None:
            raise LLMCallError("GOOGLE_API_KEY is not configured")

        logger.debug(f"Sending prompt to {self.model_name} ({len(prompt)} chars)")
        try:
            response = await self._model.generate_content_async(prompt)
            text = response.text
        except Exception as e:
            logger.error(f"Gemini call to '{self.model_name}' failed: {e}")
            raise LLMCallError(f"Gemini call failed: {e}", original_error=e) from e

        logger.debug(f"Received {len(text)} chars from {self.model_name}")
        return text
