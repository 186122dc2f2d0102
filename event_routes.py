"""
Event Routes
============

HTTP entry point for lifecycle events delivered by the host runtime. Each
event is posted to ``/{service_name}/events`` together with the runtime
environment of the invocation and is dispatched to the integration plugin
registered under that service name.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from runtime.context import get_context_factory
from runtime.events import parse_event

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


class EventEnvelope(BaseModel):
    """Body of an event delivery: the event and the environment it runs in."""

    event: Dict[str, Any]
    environment: Dict[str, Any] = Field(default_factory=dict)


@router.get("/integrations")
async def list_integrations():
    """List the integrations served by this process."""
    from plugin_manager import plugin_manager
    return plugin_manager.get_plugin_info()


@router.post("/{service_name}/events")
async def handle_integration_event(
    service_name: str,
    envelope: EventEnvelope,
    context_factory=Depends(get_context_factory)
):
    """
    Dispatch a host event to an integration.

    Handlers that produce an HTTP answer for the host (redirects, scripts)
    return a Response, which is passed through unchanged. Other results are
    returned as JSON.
    """
    from plugin_manager import plugin_manager

    event = parse_event(envelope.event)
    context = context_factory(envelope.environment)

    try:
        result = await plugin_manager.dispatch_event(service_name, event, context)
    except LookupError:
        raise HTTPException(status_code=404, detail=f"Unknown integration: {service_name}")

    if isinstance(result, Response):
        return result
    return JSONResponse(result if result is not None else {})
