# plugins/openai_translate/routes.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from plugins import RoutePlugin
from runtime.context import RuntimeContext, get_runtime_context

logger = logging.getLogger(__name__)

class TranslateRequest(BaseModel):
    texts: List[str]
    target_language: str
    source_language: Optional[str] = None

class TranslateResponse(BaseModel):
    translations: List[str]

class OpenAITranslateRoutes(RoutePlugin):
    """
    Routes for content translation.

    Endpoints:
        POST /translate - Translate a list of texts
    """

    service_name = "openai-translate"

    def get_router(self) -> APIRouter:
        router = APIRouter(tags=["openai-translate"])

        @router.post("/translate", response_model=TranslateResponse)
        async def translate(
            body: TranslateRequest,
            context: RuntimeContext = Depends(get_runtime_context)
        ):
            from plugin_manager import plugin_manager
            translate_plugin = plugin_manager.create_integration_plugin("openai-translate")
            if not translate_plugin:
                raise HTTPException(status_code=500, detail="Translation integration not available")

            translations = await translate_plugin.translate(
                body.texts,
                body.target_language,
                body.source_language,
                context
            )
            return TranslateResponse(translations=translations)

        return router
