# plugins/gitlab/config.py
"""
Configuration for the GitLab plugin
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

from runtime.errors import ConfigurationMissing

class GitLabSettings(BaseSettings):
    """
    GitLab-specific settings

    These settings can be configured via environment variables
    prefixed with GITLAB_, e.g., GITLAB_DEFAULT_HOST
    """
    # Used when an installation does not set its own host
    DEFAULT_HOST: str = "https://gitlab.com"
    API_PATH: str = "/api/v4"

    # Name shown on commit statuses
    COMMIT_STATUS_CONTEXT: str = "Docs"

    class Config:
        env_prefix = "GITLAB_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_gitlab_settings():
    """
    Get the GitLab settings, cached to avoid reloading
    """
    return GitLabSettings()

class GitLabProjectConfig(BaseModel):
    """A space installation configuration with its project and token present."""

    model_config = ConfigDict(frozen=True)

    project: str
    auth_token: str
    gitlab_host: Optional[str] = None
    ref: Optional[str] = None

class GitLabSpaceInstallationConfiguration(BaseModel):
    """
    Configuration stored by the platform on a GitLab space installation.

    ``hook_id`` is the id GitLab assigned to the webhook installed for this
    configuration; it is written back after every (re)installation.
    """

    model_config = ConfigDict(extra="allow")

    project: Optional[str] = None
    project_name: Optional[str] = None
    auth_token: Optional[str] = None
    gitlab_host: Optional[str] = None
    ref: Optional[str] = None
    hook_id: Optional[int] = None

    @field_validator("project", mode="before")
    @classmethod
    def project_as_string(cls, value: Any) -> Any:
        # GitLab project ids are numeric; paths are strings
        if isinstance(value, int):
            return str(value)
        return value

    def require_project(self) -> GitLabProjectConfig:
        if not self.project or not self.auth_token:
            raise ConfigurationMissing("No GitLab project or auth token provided")
        return GitLabProjectConfig(
            project=self.project,
            auth_token=self.auth_token,
            gitlab_host=self.gitlab_host,
            ref=self.ref
        )
