"""Webhook payloads for each notification platform."""

from datetime import datetime
from typing import Any

from distiller.domain.models import ChannelKind, TeamsIcon

SLACK_PREAMBLE = "A summarization job just completed:\n\n"
DEFAULT_CARD_TITLE = "A meeting from today..."


def slack_payload(text: str) -> dict[str, Any]:
    """Generic text envelope understood by Slack workflow webhooks."""
    return {"content": f"{SLACK_PREAMBLE}{text}"}


def card_date_header(now: datetime | None = None) -> str:
    """Formats e.g. ``Date: 03-14-2025 02:30:00 PM PDT`` in local time."""
    now = now or datetime.now().astimezone()
    stamp = now.strftime("%m-%d-%Y %I:%M:%S %p")
    zone = now.strftime("%Z")
    return f"Date: {stamp} {zone}".rstrip()


def teams_payload(
    text: str,
    title: str = DEFAULT_CARD_TITLE,
    icon: TeamsIcon | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Adaptive Card message with an icon, a title, a date line and the text."""
    icon = icon or TeamsIcon()
    header = {
        "type": "ColumnSet",
        "columns": [
            {
                "type": "Column",
                "items": [
                    {
                        "type": "Icon",
                        "name": icon.name,
                        "size": icon.size,
                        "style": icon.style,
                        "color": icon.color,
                    }
                ],
                "width": "auto",
            },
            {
                "type": "Column",
                "spacing": "medium",
                "verticalContentAlignment": "center",
                "items": [
                    {
                        "type": "TextBlock",
                        "wrap": True,
                        "style": "heading",
                        "weight": "Bolder",
                        "size": "Large",
                        "text": title,
                    }
                ],
                "width": "auto",
            },
        ],
    }
    card = {
        "$schema": "http://adaptivecards.io/schemas/adaptive-card.json",
        "type": "AdaptiveCard",
        "version": "1.5",
        "msteams": {"width": "Full"},
        "body": [
            header,
            {
                "type": "TextBlock",
                "wrap": True,
                "style": "heading",
                "weight": "Bolder",
                "size": "Medium",
                "text": card_date_header(now),
            },
            {
                "type": "Container",
                "showBorder": True,
                "roundedCorners": True,
                "maxHeight": "400px",
                "items": [
                    {"type": "TextBlock", "maxLines": 100, "wrap": True, "text": text}
                ],
            },
        ],
    }
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": "application/vnd.microsoft.card.adaptive",
                "contentUrl": None,
                "content": card,
            }
        ],
    }


def build_payload(
    kind: ChannelKind,
    text: str,
    title: str | None = None,
    icon: TeamsIcon | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    if kind is ChannelKind.TEAMS:
        return teams_payload(text, title or DEFAULT_CARD_TITLE, icon, now)
    return slack_payload(text)
