"""Delivery of a finished summary to webhook channels."""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from distiller.domain.models import (
    ChannelConfig,
    ChannelKind,
    ChannelResult,
    DeliveryOutcome,
    DispatchResult,
    DispatchStatus,
    TeamsIcon,
)
from distiller.domain.payloads import build_payload
from distiller.domain.progress import FinalState, ProgressReporter
from distiller.exceptions import WebhookDeliveryError
from distiller.infrastructure.interfaces.webhook_client import WebhookClient

logger = logging.getLogger(__name__)

ChannelChooser = Callable[[list[str]], Sequence[int]]


def select_channels(
    channels: Sequence[ChannelConfig], chooser: ChannelChooser | None = None
) -> list[int]:
    """
    Picks which configured channels receive the summary.

    A single channel is always selected without asking. With several
    channels the chooser decides; without a chooser all of them are used.
    """
    if not channels:
        return []
    if len(channels) == 1:
        return [0]
    if chooser is None:
        return list(range(len(channels)))
    return sorted(set(chooser([channel.name for channel in channels])))


class NotificationDispatcher:
    """Sends one summary to many webhooks and reports the aggregate outcome."""

    def __init__(
        self,
        client: WebhookClient,
        reporter: ProgressReporter,
        teams_icon: TeamsIcon | None = None,
        parallel: bool = False,
        max_workers: int = 4,
    ):
        self._client = client
        self._reporter = reporter
        self._teams_icon = teams_icon or TeamsIcon()
        self._parallel = parallel
        self._max_workers = max_workers

    def dispatch(
        self,
        kind: ChannelKind,
        channels: Sequence[ChannelConfig],
        selected_indices: Sequence[int],
        text: str,
        title: str | None = None,
        success_message: str | None = None,
        now: datetime | None = None,
    ) -> DispatchResult:
        """
        Delivers ``text`` to each selected channel in configured order.

        Per-channel failures are recorded, never raised. The reporter is
        finalized once, after every channel has been attempted.

        Args:
            kind: Platform of the channels, which decides the payload shape.
            channels: Configured channels for that platform.
            selected_indices: Positions in ``channels`` to deliver to.
            text: The summary.
            title: Card title for platforms that show one.
            success_message: Replaces the default all-sent message.
            now: Timestamp shown on cards; defaults to the current local time.

        Returns:
            DispatchResult with one entry per attempted channel, in order.
        """
        label = kind.label
        targets = []
        for index in selected_indices:
            if 0 <= index < len(channels):
                targets.append(channels[index])
            else:
                logger.warning(
                    "Ignoring out-of-range channel selection",
                    extra={"kind": kind.value, "index": index},
                )

        if not targets:
            self._reporter.finalize(
                f"No {label} webhooks selected. Skipping {label} notification.",
                FinalState.WARN,
            )
            return DispatchResult(kind=kind, text=text, skipped=True)

        payload = build_payload(kind, text, title=title, icon=self._teams_icon, now=now)
        self._reporter.update(f"Processing {len(targets)} {label} webhooks...")

        if self._parallel and len(targets) > 1:
            workers = min(self._max_workers, len(targets))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(
                    pool.map(lambda channel: self._send(kind, channel, payload), targets)
                )
        else:
            results = [self._send(kind, channel, payload) for channel in targets]

        result = DispatchResult(kind=kind, text=text, results=tuple(results))
        self._report(result, success_message)
        logger.info(
            "Dispatch finished",
            extra={
                "kind": kind.value,
                "status": result.status.value,
                "sent": result.sent_count,
                "failed": result.failed_count,
            },
        )
        return result

    def _send(self, kind: ChannelKind, channel: ChannelConfig, payload: dict) -> ChannelResult:
        label = kind.label
        self._reporter.update(f"Sending to {label} ({channel.name})")
        try:
            self._client.post_json(channel.endpoint, payload)
        except WebhookDeliveryError as e:
            self._reporter.update(f"Error sending to {label} ({channel.name}): {e.reason}")
            return ChannelResult(
                channel_name=channel.name,
                outcome=DeliveryOutcome.FAILED,
                reason=e.reason,
            )
        self._reporter.update(f"Successfully sent to {label} ({channel.name})")
        return ChannelResult(channel_name=channel.name, outcome=DeliveryOutcome.SENT)

    def _report(self, result: DispatchResult, success_message: str | None) -> None:
        label = result.kind.label
        status = result.status
        if status is DispatchStatus.SUCCESS:
            if success_message:
                message = f"{success_message} (Sent to {result.sent_count} webhooks)"
            else:
                message = f"Summary sent to {result.sent_count} {label} webhooks"
            self._reporter.finalize(message, FinalState.SUCCESS)
        elif status is DispatchStatus.PARTIAL:
            self._reporter.finalize(
                f"Sent to {result.sent_count} {label} webhooks, "
                f"failed to send to {result.failed_count} webhooks",
                FinalState.WARN,
            )
        else:
            self._reporter.finalize(
                f"Failed to send summary to any {label} webhooks!", FinalState.FAIL
            )
