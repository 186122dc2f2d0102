# plugins/smartcat/config.py
"""
Configuration for the Smartcat plugin
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings
from functools import lru_cache

class SmartcatSettings(BaseSettings):
    """
    Smartcat-specific settings

    These settings can be configured via environment variables
    prefixed with SMARTCAT_, e.g., SMARTCAT_SCRIPT_MAX_AGE
    """
    # Cache lifetime of the published script, in seconds
    SCRIPT_MAX_AGE: int = 604800

    # Website translation loader injected by the published script
    LOADER_URL: str = "https://smartcat.com/web-translation/loader.js"

    class Config:
        env_prefix = "SMARTCAT_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_smartcat_settings():
    """
    Get the Smartcat settings, cached to avoid reloading
    """
    return SmartcatSettings()

class SmartcatSiteInstallationConfiguration(BaseModel):
    model_config = ConfigDict(extra="allow")

    site_tag: Optional[str] = None
