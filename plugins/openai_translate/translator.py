# plugins/openai_translate/translator.py
"""
Translation of content with OpenAI chat completions.
"""

import logging
from typing import List, Optional

from openai import AsyncOpenAI, OpenAIError

from plugins.openai_translate.config import OpenAITranslateConfiguration, get_openai_translate_settings
from runtime.errors import ExternalServiceError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a translator for technical documentation. Translate the text the "
    "user sends into {target_language}{source}. Keep Markdown formatting, code, "
    "links and placeholders unchanged. Reply with the translation only."
)

class OpenAITranslator:
    """
    Translates texts one chat completion at a time.

    Attributes:
        model (str): The model used for completions
    """

    def __init__(self, configuration: OpenAITranslateConfiguration, client: Optional[AsyncOpenAI] = None):
        api_key = configuration.require_api_key()
        self.model = configuration.model or get_openai_translate_settings().DEFAULT_MODEL
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=configuration.api_url or None)

    async def translate_text(self, text: str, target_language: str, source_language: Optional[str] = None) -> str:
        """
        Translate a single text.

        Raises:
            ExternalServiceError: If the OpenAI API call fails
        """
        if not text.strip():
            return text

        source = f" from {source_language}" if source_language else ""
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT.format(target_language=target_language, source=source)},
                    {"role": "user", "content": text},
                ],
            )
        except OpenAIError as e:
            logger.error(f"Error using OpenAI API: {str(e)}")
            raise ExternalServiceError("Translation request to OpenAI failed")

        translation = completion.choices[0].message.content
        logger.debug(f"Received translation from OpenAI API, length: {len(translation or '')}")
        return translation or ""

    async def translate(self, texts: List[str], target_language: str, source_language: Optional[str] = None) -> List[str]:
        """Translate texts in order."""
        return [
            await self.translate_text(text, target_language, source_language)
            for text in texts
        ]
