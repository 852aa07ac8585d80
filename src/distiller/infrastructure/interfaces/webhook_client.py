"""Abstract interface for webhook delivery."""

from abc import ABC, abstractmethod
from typing import Any


class WebhookClient(ABC):
    """Abstract base class for posting JSON payloads to webhooks."""

    @abstractmethod
    def post_json(self, endpoint: str, payload: dict[str, Any]) -> int:
        """
        Posts a JSON payload.

        Returns:
            The HTTP status code of a 2xx response.

        Raises:
            WebhookDeliveryError: On transport errors and non-2xx responses.
        """
