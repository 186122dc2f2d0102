# plugins/okta/config.py
"""
Configuration for the Okta plugin
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings
from functools import lru_cache

from runtime.errors import ConfigurationMissing

class OktaSettings(BaseSettings):
    """
    Okta-specific settings

    These settings can be configured via environment variables
    prefixed with OKTA_, e.g., OKTA_SCOPE
    """
    # Okta org authorization server endpoints
    AUTHORIZE_PATH: str = "/oauth2/v1/authorize"
    TOKEN_PATH: str = "/oauth2/v1/token/"

    # Scope requested from Okta
    SCOPE: str = "openid"

    # Path of the visitor-auth callback under the installation's public endpoint
    CALLBACK_PATH: str = "/visitor-auth/response"

    class Config:
        env_prefix = "OKTA_"
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_okta_settings():
    """
    Get the Okta settings, cached to avoid reloading
    """
    return OktaSettings()

class OktaAuthorizeConfig(BaseModel):
    """Settings needed to send a visitor to Okta's authorize endpoint."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    okta_domain: str

class OktaCredentials(BaseModel):
    """Settings needed to exchange an authorization code for a token."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str
    okta_domain: str

class OktaSiteInstallationConfiguration(BaseModel):
    """
    Configuration stored by the platform on an Okta site installation.

    Every field is optional until the site owner saves the configuration
    form; handlers turn it into a complete value with one of the require_*
    methods before using it.
    """

    model_config = ConfigDict(extra="allow")

    client_id: Optional[str] = None
    okta_domain: Optional[str] = None
    client_secret: Optional[str] = None

    def require_authorize_config(self) -> OktaAuthorizeConfig:
        if not self.client_id or not self.okta_domain:
            raise ConfigurationMissing("OIDC configuration is missing")
        return OktaAuthorizeConfig(client_id=self.client_id, okta_domain=self.okta_domain)

    def require_credentials(self) -> OktaCredentials:
        if not self.client_id or not self.client_secret or not self.okta_domain:
            raise ConfigurationMissing(
                "Error: Either client id, client secret or okta domain is missing"
            )
        return OktaCredentials(
            client_id=self.client_id,
            client_secret=self.client_secret,
            okta_domain=self.okta_domain
        )
