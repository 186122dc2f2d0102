"""
Runtime support shared by all integrations.

This package provides:
- The runtime environment and request-scoped context models
- The host platform API client
- Lifecycle event models
- The integration error taxonomy
"""

from .errors import (
    IntegrationError,
    ConfigurationMissing,
    InvalidRequest,
    MissingSigningKey,
    UpstreamAuthFailure,
    InvalidSignature,
    DownstreamDataMissing,
    SigningFailure,
    InstallationMissing,
    ExternalServiceError,
)

from .api import PlatformAPIClient

from .context import (
    RuntimeContext,
    RuntimeEnvironment,
    InstallationStatus,
    build_runtime_context,
    get_context_factory,
    get_runtime_context,
    assert_site_installation,
    assert_space_installation,
    assert_org_id,
)

__all__ = [
    # Errors
    "IntegrationError",
    "ConfigurationMissing",
    "InvalidRequest",
    "MissingSigningKey",
    "UpstreamAuthFailure",
    "InvalidSignature",
    "DownstreamDataMissing",
    "SigningFailure",
    "InstallationMissing",
    "ExternalServiceError",

    # Host API
    "PlatformAPIClient",

    # Context
    "RuntimeContext",
    "RuntimeEnvironment",
    "InstallationStatus",
    "build_runtime_context",
    "get_context_factory",
    "get_runtime_context",
    "assert_site_installation",
    "assert_space_installation",
    "assert_org_id",
]
