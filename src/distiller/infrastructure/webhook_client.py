"""httpx implementation of the WebhookClient interface."""

import logging
from typing import Any

import httpx

from distiller.exceptions import WebhookDeliveryError
from distiller.infrastructure.interfaces import WebhookClient

logger = logging.getLogger(__name__)


def _host(endpoint: str) -> str:
    # Webhook URLs embed their secret in the path.
    try:
        return httpx.URL(endpoint).host or "unknown"
    except (httpx.InvalidURL, ValueError):
        return "unknown"


class HttpxWebhookClient(WebhookClient):
    """Posts JSON payloads to webhook endpoints."""

    def __init__(self, client: httpx.Client):
        self._client = client

    def post_json(self, endpoint: str, payload: dict[str, Any]) -> int:
        try:
            response = self._client.post(
                endpoint,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.warning(
                "Webhook request failed", extra={"host": _host(endpoint), "error": str(e)}
            )
            raise WebhookDeliveryError(endpoint, str(e) or type(e).__name__, cause=e) from e
        except (httpx.InvalidURL, ValueError) as e:
            logger.warning("Webhook endpoint is not a valid URL", extra={"error": str(e)})
            raise WebhookDeliveryError(endpoint, f"invalid webhook URL ({e})", cause=e) from e

        if not response.is_success:
            logger.warning(
                "Webhook rejected payload",
                extra={"host": _host(endpoint), "status_code": response.status_code},
            )
            raise WebhookDeliveryError(
                endpoint,
                f"{response.status_code} {response.reason_phrase}".strip(),
                status_code=response.status_code,
            )

        logger.info(
            "Webhook delivered",
            extra={"host": _host(endpoint), "status_code": response.status_code},
        )
        return response.status_code
