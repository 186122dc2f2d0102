# plugins/openai_translate/config.py
"""
Configuration for the OpenAI translation plugin
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings
from functools import lru_cache

from runtime.errors import ConfigurationMissing

class OpenAITranslateSettings(BaseSettings):
    """
    Translation settings

    These settings can be configured via environment variables
    prefixed with OPENAI_TRANSLATE_, e.g., OPENAI_TRANSLATE_DEFAULT_MODEL
    """
    DEFAULT_MODEL: str = "gpt-4o-mini"

    class Config:
        env_prefix = "OPENAI_TRANSLATE_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_openai_translate_settings():
    """
    Get the translation settings, cached to avoid reloading
    """
    return OpenAITranslateSettings()

class OpenAITranslateConfiguration(BaseModel):
    """
    Installation configuration, stored with camelCase keys.

    Attributes:
        api_key: API key for OpenAI
        api_url: URL of an OpenAI-compatible API, the SDK default when unset
        model: Model used for translation
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    api_key: Optional[str] = None
    api_url: Optional[str] = None
    model: Optional[str] = None

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationMissing("OpenAI API key is missing")
        return self.api_key
