# plugins/gitlab/events.py
"""
GitLab Integration
==================

This module implements the GitLab side of git synchronisation for spaces:

- Webhook reconciliation when a space installation is set up or reconfigured.
  A webhook is tied to the project, token and host it was created with; when
  any of those change the old hook is removed and a new one installed, and
  the new hook id is written back to the installation configuration.
- Commit statuses reporting the progress of a git sync on the synced commit.
- Push deliveries from the installed webhook, which start an import of the
  configured branch.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from plugins import IntegrationPlugin
from plugins.gitlab.client import GitLabClient
from plugins.gitlab.config import (
    GitLabSpaceInstallationConfiguration,
    get_gitlab_settings
)
from plugins.gitlab.webhooks import get_webhook_token, install_webhook, uninstall_webhook
from runtime.context import InstallationStatus, RuntimeContext, assert_space_installation
from runtime.events import InstallationSnapshot

logger = logging.getLogger(__name__)

settings = get_gitlab_settings()

COMMIT_STATUS_DESCRIPTIONS = {
    "running": "Updating content...",
    "success": "Content is live",
    "failure": "Error while updating content, contact support",
}

PUSH_EVENT = "Push Hook"

def should_update_webhook(
    new_config: GitLabSpaceInstallationConfiguration,
    previous: InstallationSnapshot
) -> bool:
    """
    Decide whether the webhook of an installation must be recreated.

    True when the project, the auth token or the host changed, or when an
    installation leaves the pending state by acquiring its first ref.
    """
    old_config = GitLabSpaceInstallationConfiguration.model_validate(previous.configuration or {})

    if new_config.project != old_config.project:
        return True
    if new_config.auth_token != old_config.auth_token:
        return True
    if new_config.gitlab_host != old_config.gitlab_host:
        return True

    return (
        previous.status == InstallationStatus.PENDING
        and not old_config.ref
        and bool(new_config.ref)
    )

async def handle_space_installation_setup(
    event,
    context: RuntimeContext,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> None:
    """
    Reconcile the project webhook of a space installation.

    Raises:
        ConfigurationMissing: If an active installation has no project or token
        InstallationMissing: If the context has no space installation
    """
    if event.status == InstallationStatus.PENDING:
        context.logger.info(f"Space installation {event.space_id} is still pending, skipping webhook setup")
        return

    if event.status != InstallationStatus.ACTIVE:
        context.logger.info(f"Space installation {event.space_id} is {event.status.value}, skipping webhook setup")
        return

    space_installation = assert_space_installation(context.environment)
    configuration = GitLabSpaceInstallationConfiguration.model_validate(space_installation.configuration)
    project_config = configuration.require_project()

    previous = event.previous
    if previous is not None and previous.configuration is not None:
        if not should_update_webhook(configuration, previous):
            context.logger.info(f"Webhook configuration of space {event.space_id} unchanged")
            return

        previous_config = GitLabSpaceInstallationConfiguration.model_validate(previous.configuration)
        if previous_config.hook_id and not (previous_config.project and previous_config.auth_token):
            context.logger.warning(
                f"Cannot remove webhook {previous_config.hook_id}: previous configuration has no project or token"
            )
        elif previous_config.hook_id:
            context.logger.info(f"Removing webhook {previous_config.hook_id} before reinstalling")
            await uninstall_webhook(previous_config.require_project(), previous_config.hook_id, transport=transport)

    hook_id = await install_webhook(
        project_config,
        f"{space_installation.urls.public_endpoint}/webhook",
        get_webhook_token(space_installation.installation, space_installation.space),
        transport=transport
    )

    await context.api.update_space_installation(
        space_installation.installation,
        space_installation.space,
        {**space_installation.configuration, "hook_id": hook_id}
    )

async def update_commit_status(
    event,
    state: str,
    context: RuntimeContext,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> None:
    """
    Report the state of a git sync as commit statuses on the synced commit.

    A status linking to the published content is posted first when the
    revision has a public URL; the main status links to the app.
    """
    space_installation = context.environment.space_installation
    if space_installation is None:
        context.logger.info("No space installation, skipping commit status")
        return

    project_config = GitLabSpaceInstallationConfiguration.model_validate(
        space_installation.configuration
    ).require_project()
    client = GitLabClient(project_config.auth_token, project_config.gitlab_host, transport=transport)
    description = COMMIT_STATUS_DESCRIPTIONS[state]

    public_url = event.revision_urls.public
    if public_url:
        await client.update_commit_status(
            project_config.project,
            event.commit_id,
            state,
            context=f"{settings.COMMIT_STATUS_CONTEXT} - {urlparse(public_url).hostname}",
            description=description,
            target_url=public_url
        )

    await client.update_commit_status(
        project_config.project,
        event.commit_id,
        state,
        context=settings.COMMIT_STATUS_CONTEXT,
        description=description,
        target_url=event.revision_urls.app
    )

def get_repository_auth_url(repository_url: str, auth_token: str) -> str:
    """The HTTP clone URL of a repository with the access token as credentials."""
    return str(httpx.URL(repository_url).copy_with(username="oauth2", password=auth_token))

async def handle_push_event(payload: Dict[str, Any], context: RuntimeContext) -> Dict[str, str]:
    """
    Start an import when the configured branch receives a push.

    Returns:
        Dict[str, str]: ``{"status": "accepted"}`` when an import was started,
        ``{"status": "ignored"}`` otherwise
    """
    space_installation = assert_space_installation(context.environment)
    configuration = GitLabSpaceInstallationConfiguration.model_validate(space_installation.configuration)
    project_config = configuration.require_project()

    ref = payload.get("ref")
    if not project_config.ref or ref != f"refs/heads/{project_config.ref}":
        context.logger.debug(f"Ignoring push to {ref}")
        return {"status": "ignored"}

    repository_url = (payload.get("project") or {}).get("git_http_url")
    if not repository_url:
        context.logger.warning("Push delivery without a repository URL")
        return {"status": "ignored"}

    commits = payload.get("commits") or []
    commit_message = commits[-1].get("message") if commits else None

    await context.api.import_git_repository(
        space_installation.space,
        url=get_repository_auth_url(repository_url, project_config.auth_token),
        ref=ref,
        commit_message=commit_message
    )
    context.logger.info(f"Started import of {ref} into space {space_installation.space}")
    return {"status": "accepted"}

class GitLabIntegration(IntegrationPlugin):
    """
    Plugin for GitLab git synchronisation.

    Class Attributes:
        service_name (str): The unique identifier for this plugin
    """

    service_name = "gitlab"

    DESCRIPTION = "Synchronise spaces with GitLab repositories"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    def get_event_handlers(self):
        return {
            "space_installation_setup": self.handle_space_installation_setup,
            "space_gitsync_started": self.handle_git_sync_started,
            "space_gitsync_completed": self.handle_git_sync_completed,
        }

    async def handle_space_installation_setup(self, event, context: RuntimeContext):
        await handle_space_installation_setup(event, context, transport=self._transport)

    async def handle_git_sync_started(self, event, context: RuntimeContext):
        await update_commit_status(event, "running", context, transport=self._transport)

    async def handle_git_sync_completed(self, event, context: RuntimeContext):
        await update_commit_status(event, event.state, context, transport=self._transport)

    async def handle_webhook(self, event_name: Optional[str], payload: Dict[str, Any], context: RuntimeContext):
        if event_name != PUSH_EVENT:
            context.logger.debug(f"Ignoring GitLab event {event_name}")
            return {"status": "ignored"}
        return await handle_push_event(payload, context)
