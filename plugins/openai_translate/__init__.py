# plugins/openai_translate/__init__.py
"""
OpenAI Translate Plugin Package
===============================

Translates content with OpenAI models, using the API key configured on the
installation.
"""

from typing import List, Optional

from openai import AsyncOpenAI

from plugins import IntegrationPlugin, register_integration_plugin, register_route_plugin
from runtime.context import RuntimeContext
from .config import OpenAITranslateConfiguration
from .routes import OpenAITranslateRoutes
from .translator import OpenAITranslator

class OpenAITranslateIntegration(IntegrationPlugin):
    service_name = "openai-translate"

    DESCRIPTION = "Translate content with OpenAI"

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client

    def get_event_handlers(self):
        return {}

    async def translate(
        self,
        texts: List[str],
        target_language: str,
        source_language: Optional[str],
        context: RuntimeContext
    ) -> List[str]:
        installation = context.environment.installation
        configuration = OpenAITranslateConfiguration.model_validate(
            installation.configuration if installation else {}
        )
        translator = OpenAITranslator(configuration, client=self._client)
        context.logger.info(f"Translating {len(texts)} texts to {target_language} with {translator.model}")
        return await translator.translate(texts, target_language, source_language)

register_integration_plugin(OpenAITranslateIntegration)
register_route_plugin(OpenAITranslateRoutes)
