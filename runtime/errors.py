"""
Integration Errors
==================

Every failure an integration can resolve locally is raised as a subclass of
IntegrationError. The application turns these into plain-text responses with
the error's status code, so a handler only has to raise the right error.
"""


class IntegrationError(Exception):
    """
    Base class for errors that map to an HTTP response.

    Attributes:
        message (str): Text returned to the caller
        status_code (int): HTTP status returned to the caller
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationMissing(IntegrationError):
    """Required installation configuration is absent."""

    status_code = 400


class InvalidRequest(IntegrationError):
    """The inbound request is missing a required parameter or is malformed."""

    status_code = 400


class MissingSigningKey(IntegrationError):
    """The host did not supply a signing secret for the installation."""

    status_code = 400


class UpstreamAuthFailure(IntegrationError):
    """The identity provider refused the token exchange or returned no token."""

    status_code = 401


class InvalidSignature(IntegrationError):
    """An inbound callback failed signature or shared-token verification."""

    status_code = 401


class DownstreamDataMissing(IntegrationError):
    """The host platform did not return data the handler depends on."""

    status_code = 500


class SigningFailure(IntegrationError):
    status_code = 500


class InstallationMissing(IntegrationError):
    """No site or space installation (or organization) in the runtime context."""

    status_code = 500


class ExternalServiceError(IntegrationError):
    """An external API (host, GitLab, Slack, OpenAI) answered with an error."""

    status_code = 502
