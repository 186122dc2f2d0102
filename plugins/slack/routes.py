# plugins/slack/routes.py
import logging
from typing import Optional
from urllib.parse import parse_qs

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Request

from plugins import RoutePlugin
from plugins.slack.client import verify_slack_request
from plugins.slack.config import get_slack_settings
from runtime.context import RuntimeContext, get_runtime_context
from runtime.errors import InvalidRequest, InvalidSignature

logger = logging.getLogger(__name__)

class SlackRoutes(RoutePlugin):
    """
    Routes for the Slack app.

    Endpoints:
        POST /commands - Slash command asking a question
    """

    service_name = "slack"

    def get_router(self) -> APIRouter:
        router = APIRouter(tags=["slack"])

        @router.post("/commands")
        async def slack_command(
            request: Request,
            background_tasks: BackgroundTasks,
            x_slack_request_timestamp: Optional[str] = Header(None),
            x_slack_signature: Optional[str] = Header(None),
            context: RuntimeContext = Depends(get_runtime_context)
        ):
            """
            Acknowledge a slash command and answer it in the background.

            Slack expects an answer within three seconds, so the question is
            relayed after the acknowledgement has been sent.
            """
            body = await request.body()
            if not verify_slack_request(
                body,
                x_slack_request_timestamp,
                x_slack_signature,
                get_slack_settings().SIGNING_SECRET
            ):
                raise InvalidSignature("Invalid Slack signature")

            form = {key: values[0] for key, values in parse_qs(body.decode()).items()}
            text = form.get("text", "").strip()
            if not text or not form.get("team_id") or not form.get("channel_id"):
                raise InvalidRequest("Missing command text, team or channel")

            from plugin_manager import plugin_manager
            slack = plugin_manager.create_integration_plugin("slack")
            if not slack:
                raise HTTPException(status_code=500, detail="Slack integration not available")

            background_tasks.add_task(
                slack.query_lens,
                channel_id=form["channel_id"],
                team_id=form["team_id"],
                text=text,
                context=context,
                user_id=form.get("user_id"),
                thread_id=form.get("thread_ts")
            )
            logger.info(f"Accepted Slack command from team {form['team_id']}")

            return {
                "response_type": "ephemeral",
                "text": f"Looking for an answer to: {text}",
            }

        return router
