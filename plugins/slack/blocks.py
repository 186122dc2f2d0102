# plugins/slack/blocks.py
"""Block Kit builders for answers posted to Slack."""

from typing import Any, Dict, List, Optional

def pages_block(title: str, items: List[Dict[str, Any]], public_url: Optional[str]) -> List[Dict[str, Any]]:
    """A titled list of links to pages of the published content."""
    if not items:
        return []

    base_url = (public_url or "").rstrip("/")
    links = []
    for page in items:
        path = page.get("path") or ""
        links.append(f"• <{base_url}/{path}|{page.get('title', path)}>")

    return [
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"*{title}*"},
        },
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": "\n".join(links)},
        },
    ]

def query_display_block(queries: Optional[List[str]]) -> List[Dict[str, Any]]:
    """Follow-up questions as buttons that ask them in turn."""
    if not queries:
        return []

    return [
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": "*Related questions*"},
        },
        {
            "type": "actions",
            "elements": [
                {
                    "type": "button",
                    "action_id": "queryLens",
                    "text": {"type": "plain_text", "text": query},
                    "value": query,
                }
                for query in queries
            ],
        },
    ]
