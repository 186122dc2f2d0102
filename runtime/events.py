"""
Lifecycle event models delivered by the host runtime.

Events are discriminated on their ``type`` field; parse_event turns a raw
payload into the matching model.
"""

import logging
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError

from runtime.context import InstallationStatus, RuntimeModel
from runtime.errors import InvalidRequest

logger = logging.getLogger(__name__)


class FetchVisitorAuthenticationEvent(RuntimeModel):
    type: Literal["fetch_visitor_authentication"]
    location: Optional[str] = None


class FetchPublishedScriptEvent(RuntimeModel):
    type: Literal["fetch_published_script"]
    site_id: Optional[str] = None


class InstallationSnapshot(RuntimeModel):
    """State of an installation before the change that triggered an event."""

    status: InstallationStatus
    configuration: Optional[Dict[str, Any]] = None


class SpaceInstallationSetupEvent(RuntimeModel):
    type: Literal["space_installation_setup"]
    status: InstallationStatus
    installation_id: str
    space_id: str
    previous: Optional[InstallationSnapshot] = None


class RevisionUrls(RuntimeModel):
    app: str
    public: Optional[str] = None


class SpaceGitSyncStartedEvent(RuntimeModel):
    type: Literal["space_gitsync_started"]
    space_id: Optional[str] = None
    commit_id: str
    revision_urls: RevisionUrls


class SpaceGitSyncCompletedEvent(RuntimeModel):
    type: Literal["space_gitsync_completed"]
    space_id: Optional[str] = None
    commit_id: str
    state: Literal["success", "failure"]
    revision_urls: RevisionUrls


class UIRenderEvent(RuntimeModel):
    type: Literal["ui_render"]
    component_id: str
    props: Dict[str, Any] = Field(default_factory=dict)
    state: Optional[Dict[str, Any]] = None
    action: Optional[Dict[str, Any]] = None


IntegrationEvent = Annotated[
    Union[
        FetchVisitorAuthenticationEvent,
        FetchPublishedScriptEvent,
        SpaceInstallationSetupEvent,
        SpaceGitSyncStartedEvent,
        SpaceGitSyncCompletedEvent,
        UIRenderEvent,
    ],
    Field(discriminator="type"),
]

_event_adapter = TypeAdapter(IntegrationEvent)


def parse_event(payload: Dict[str, Any]):
    """
    Parse a raw event payload into its typed model.

    Raises:
        InvalidRequest: If the event type is unknown or the payload is invalid
    """
    try:
        return _event_adapter.validate_python(payload)
    except ValidationError as e:
        logger.warning(f"Rejected event payload: {e}")
        raise InvalidRequest(f"Unsupported or invalid event: {payload.get('type', '')}")
