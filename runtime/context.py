"""
Runtime Context
===============

The host runtime delivers a description of the integration and its
installations with every invocation. This module models that environment and
builds the request-scoped RuntimeContext that is passed explicitly to every
handler: the parsed environment, a host API client authenticated as the
installation, and a logger tagged with the integration name.

Fetch requests forwarded by the host carry the environment as JSON in the
header named by RUNTIME_ENVIRONMENT_HEADER. Lifecycle events carry it in the
request body next to the event.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from fastapi import Depends, Request
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from config import get_settings
from runtime.api import PlatformAPIClient
from runtime.errors import InstallationMissing, InvalidRequest

logger = logging.getLogger(__name__)


class RuntimeModel(BaseModel):
    """Base for host payloads, which use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class InstallationStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    PAUSED = "paused"


class InstallationUrls(RuntimeModel):
    public_endpoint: str = ""


class InstallationTarget(RuntimeModel):
    organization: Optional[str] = None


class IntegrationInfo(RuntimeModel):
    name: str = ""


class IntegrationInstallation(RuntimeModel):
    id: str = ""
    target: InstallationTarget = Field(default_factory=InstallationTarget)
    configuration: Dict[str, Any] = Field(default_factory=dict)
    urls: InstallationUrls = Field(default_factory=InstallationUrls)


class SiteInstallation(RuntimeModel):
    installation: str
    site: str
    integration: str = ""
    status: InstallationStatus = InstallationStatus.ACTIVE
    configuration: Dict[str, Any] = Field(default_factory=dict)
    urls: InstallationUrls = Field(default_factory=InstallationUrls)


class SpaceInstallation(RuntimeModel):
    installation: str
    space: str
    integration: str = ""
    status: InstallationStatus = InstallationStatus.ACTIVE
    configuration: Dict[str, Any] = Field(default_factory=dict)
    urls: InstallationUrls = Field(default_factory=InstallationUrls)


class SigningSecrets(RuntimeModel):
    integration: Optional[str] = None
    installation: Optional[str] = None
    site_installation: Optional[str] = None
    space_installation: Optional[str] = None


class ApiTokens(RuntimeModel):
    integration: Optional[str] = None
    installation: Optional[str] = None


class RuntimeEnvironment(RuntimeModel):
    integration: IntegrationInfo = Field(default_factory=IntegrationInfo)
    installation: Optional[IntegrationInstallation] = None
    site_installation: Optional[SiteInstallation] = None
    space_installation: Optional[SpaceInstallation] = None
    signing_secrets: SigningSecrets = Field(default_factory=SigningSecrets)
    api_tokens: ApiTokens = Field(default_factory=ApiTokens)


@dataclass(frozen=True)
class RuntimeContext:
    """
    Everything a handler needs for one invocation.

    Attributes:
        environment (RuntimeEnvironment): The environment delivered by the host
        api (PlatformAPIClient): Host API client authenticated as the installation
        logger (logging.LoggerAdapter): Logger tagged with the integration name
    """

    environment: RuntimeEnvironment
    api: PlatformAPIClient
    logger: logging.LoggerAdapter


def build_runtime_context(
    environment: Any,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RuntimeContext:
    """
    Build a RuntimeContext from a raw or parsed environment.

    Args:
        environment: A RuntimeEnvironment or its JSON-decoded payload
        transport: Optional httpx transport for the host API client

    Returns:
        RuntimeContext: The request-scoped context

    Raises:
        InvalidRequest: If the environment payload does not parse
    """
    if not isinstance(environment, RuntimeEnvironment):
        try:
            environment = RuntimeEnvironment.model_validate(environment or {})
        except ValidationError as e:
            logger.error(f"Invalid runtime environment: {e}")
            raise InvalidRequest("Invalid runtime environment")

    settings = get_settings()
    api = PlatformAPIClient(
        base_url=settings.PLATFORM_API_URL,
        token=environment.api_tokens.installation or environment.api_tokens.integration,
        integration=environment.integration.name,
        transport=transport,
    )
    name = environment.integration.name or "unknown"
    context_logger = logging.LoggerAdapter(
        logging.getLogger(f"integrations.{name}"), {"integration": name}
    )
    return RuntimeContext(environment=environment, api=api, logger=context_logger)


def get_context_factory():
    """
    FastAPI dependency returning the callable that builds runtime contexts.

    Tests override this dependency to inject fake transports.
    """
    return build_runtime_context


def get_runtime_context(
    request: Request,
    context_factory=Depends(get_context_factory),
) -> RuntimeContext:
    """
    FastAPI dependency building the context of a forwarded fetch request.

    Raises:
        InstallationMissing: If the host did not forward an environment
        InvalidRequest: If the forwarded environment does not parse
    """
    settings = get_settings()
    raw = request.headers.get(settings.RUNTIME_ENVIRONMENT_HEADER)
    if not raw:
        raise InstallationMissing("No runtime environment found")
    try:
        environment = RuntimeEnvironment.model_validate_json(raw)
    except ValidationError as e:
        logger.error(f"Invalid runtime environment header: {e}")
        raise InvalidRequest("Invalid runtime environment")
    return context_factory(environment)


def assert_site_installation(environment: RuntimeEnvironment) -> SiteInstallation:
    site_installation = environment.site_installation
    if not site_installation:
        raise InstallationMissing("No site installation found")
    return site_installation


def assert_space_installation(environment: RuntimeEnvironment) -> SpaceInstallation:
    space_installation = environment.space_installation
    if not space_installation:
        raise InstallationMissing("No space installation found")
    return space_installation


def assert_org_id(environment: RuntimeEnvironment) -> str:
    org_id = environment.installation.target.organization if environment.installation else None
    if not org_id:
        raise InstallationMissing("No org ID found")
    return org_id
