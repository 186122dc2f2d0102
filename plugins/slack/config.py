# plugins/slack/config.py
"""
Configuration for the Slack plugin
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings
from functools import lru_cache

class SlackSettings(BaseSettings):
    """
    Slack-specific settings

    These settings can be configured via environment variables
    prefixed with SLACK_, e.g., SLACK_SIGNING_SECRET
    """
    # Signing secret of the Slack app, used to verify incoming requests
    SIGNING_SECRET: str = ""

    # Slack Web API
    API_URL: str = "https://slack.com/api"

    # Requests older than this are rejected to prevent replays
    MAX_REQUEST_AGE_SECONDS: int = 300

    class Config:
        env_prefix = "SLACK_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_slack_settings():
    """
    Get the Slack settings, cached to avoid reloading
    """
    return SlackSettings()

class SlackOAuthCredentials(BaseModel):
    model_config = ConfigDict(extra="allow")

    access_token: Optional[str] = None

class SlackInstallationConfiguration(BaseModel):
    """Configuration stored on the platform installation of a Slack workspace."""

    model_config = ConfigDict(extra="allow")

    oauth_credentials: SlackOAuthCredentials = Field(default_factory=SlackOAuthCredentials)
