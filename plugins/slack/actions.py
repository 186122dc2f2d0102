# plugins/slack/actions.py
"""
Relay of Slack questions to the platform's AI search.

A question asked in Slack is answered by the search of the organization the
Slack workspace is installed on. The answer is posted back to the channel
with links to the pages it was built from and follow-up questions.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from plugins.slack.blocks import pages_block, query_display_block
from plugins.slack.client import SlackClient
from plugins.slack.config import SlackInstallationConfiguration
from runtime.api import PlatformAPIClient
from runtime.context import IntegrationInstallation, RuntimeContext, RuntimeEnvironment
from runtime.errors import InstallationMissing

logger = logging.getLogger(__name__)

NO_ANSWER_TEXT = "I couldn't find anything related to your question. Perhaps try rephrasing it."

async def get_installation_api_client(
    api: PlatformAPIClient,
    external_id: str
) -> Tuple[PlatformAPIClient, IntegrationInstallation]:
    """
    Find the installation linked to a Slack workspace and authenticate as it.

    Raises:
        InstallationMissing: If no installation has the external id
    """
    installations = await api.list_installations(external_id=external_id)
    if not installations:
        raise InstallationMissing("Installation not found")

    installation = IntegrationInstallation.model_validate(installations[0])
    token = await api.create_installation_token(installation.id)
    return api.with_token(token), installation

def iter_revision_pages(pages: Iterable[Dict[str, Any]]) -> Iterable[Dict[str, Any]]:
    """Walk the page tree of a revision, parents before children."""
    for page in pages:
        yield page
        yield from iter_revision_pages(page.get("pages") or [])

async def get_related_pages(
    answer: Dict[str, Any],
    client: PlatformAPIClient,
    environment: RuntimeEnvironment
) -> Tuple[Optional[str], List[Dict[str, Any]]]:
    """
    Resolve the pages an answer was built from in the current revision.

    Returns:
        Tuple of the revision's public (or app) URL and the related pages
    """
    answer_pages = answer.get("pages") or []
    space_id = None
    if environment.space_installation:
        space_id = environment.space_installation.space
    elif answer_pages:
        space_id = answer_pages[0].get("space")

    if not space_id:
        return None, []

    revision = await client.get_current_revision(space_id)
    urls = revision.get("urls") or {}
    public_url = urls.get("public") or urls.get("app")

    page_ids = {page.get("page") for page in answer_pages}
    related_pages = [
        page for page in iter_revision_pages(revision.get("pages") or [])
        if page.get("id") in page_ids
    ]
    return public_url, related_pages

def get_answer_text(answer: Dict[str, Any]) -> str:
    text = answer.get("text")
    if not text:
        return NO_ANSWER_TEXT
    return text[:1].upper() + text[1:]

async def query_lens(
    channel_id: str,
    team_id: str,
    text: str,
    context: RuntimeContext,
    user_id: Optional[str] = None,
    thread_id: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> None:
    """
    Answer a question asked in Slack.

    Args:
        channel_id (str): The channel the question was asked in
        team_id (str): The Slack workspace, the external id of the installation
        text (str): The question
        context (RuntimeContext): The request context
        user_id (Optional[str]): The asking user; the acknowledgement is
                                 ephemeral to them when set
        thread_id (Optional[str]): Thread to reply in
        transport: Optional httpx transport for calls to Slack
    """
    client, installation = await get_installation_api_client(context.api, team_id)

    configuration = SlackInstallationConfiguration.model_validate(installation.configuration)
    slack = SlackClient(configuration.oauth_credentials.access_token, transport=transport)

    await slack.post_message(
        channel_id,
        thread_ts=thread_id,
        user=user_id,
        text=f"_Asking: {text}_"
    )

    result = await client.ask_query(text)
    answer = result.get("answer")

    if not answer:
        context.logger.info(f"No answer for query in channel {channel_id}")
        await slack.call("chat.postMessage", {
            "channel": channel_id,
            "thread_ts": thread_id,
            "text": NO_ANSWER_TEXT,
        })
        return

    public_url, related_pages = await get_related_pages(answer, client, context.environment)

    await slack.call("chat.postMessage", {
        "channel": channel_id,
        "thread_ts": thread_id,
        "blocks": [
            {"type": "divider"},
            {
                "type": "header",
                "text": {"type": "plain_text", "text": text},
            },
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": get_answer_text(answer)},
            },
            *pages_block("More information", related_pages, public_url),
            *query_display_block(answer.get("followupQuestions")),
            {"type": "divider"},
        ],
        "unfurl_links": False,
        "unfurl_media": False,
    })
