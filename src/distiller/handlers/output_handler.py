"""Handler for delivering a finished summary."""

import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from distiller.domain import (
    ChannelConfig,
    ChannelKind,
    DispatchResult,
    NotificationDispatcher,
    OutputType,
    PipelineRequest,
    ProgressReporter,
    select_channels,
)
from distiller.infrastructure import writers

logger = logging.getLogger(__name__)

_FILE_WRITERS: dict[OutputType, Callable[[str, str], Path]] = {
    OutputType.TEXT: writers.write_text_file,
    OutputType.MARKDOWN: writers.write_markdown_file,
    OutputType.WORD: writers.write_word_file,
}


class OutputHandler:
    """Writes the summary to the terminal, a file and/or webhook channels."""

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        reporter: ProgressReporter,
        channels: Mapping[ChannelKind, Sequence[ChannelConfig]],
        echo: Callable[[str], None] = print,
    ):
        self._dispatcher = dispatcher
        self._reporter = reporter
        self._channels = channels
        self._echo = echo

    def deliver(
        self, request: PipelineRequest, summary: str
    ) -> tuple[DispatchResult | None, tuple[str, ...]]:
        """
        Delivers the summary according to the requested output type.

        Returns:
            The dispatch result (None when no channel kind is involved) and
            the paths of any files written.

        Raises:
            OutputWriteError: If a summary file cannot be written.
        """
        output = request.output_type
        kind = output.channel_kind

        if kind is None:
            return None, self._deliver_local(output, request.summary_file_name, summary)

        written: tuple[str, ...] = ()
        if output.is_split:
            path = writers.write_text_file(request.summary_file_name, summary)
            self._echo(f"\n💾 Summary written to {path}")
            written = (str(path),)

        channels = self._channels.get(kind, [])
        selection = request.channel_selection
        if selection is None:
            selection = select_channels(channels)

        result = self._dispatcher.dispatch(
            kind,
            channels,
            selection,
            summary,
            title=request.card_title,
            success_message=self._success_message(kind, output.is_split),
        )

        if result.skipped:
            if output.is_split:
                self._echo(f"⚠️ No {kind.label} webhooks selected. Summary was only written to file.")
            else:
                self._echo(
                    f"⚠️ No {kind.label} webhooks selected. Displaying summary in terminal instead."
                )
                self._echo(f"Summary:\n{result.text}\n")
        elif result.failed_count:
            for channel in result.results:
                if channel.reason:
                    self._echo(
                        f"❌ Error sending summary to {kind.label} ({channel.channel_name}): {channel.reason}"
                    )
        logger.info(
            "Summary delivered",
            extra={"output_type": output.value, "status": result.status.value},
        )
        return result, written

    def _deliver_local(self, output: OutputType, base_name: str, summary: str) -> tuple[str, ...]:
        if output is OutputType.TERMINAL:
            self._reporter.finalize("Done!")
            self._echo(f"\nSummary:\n{summary}\n")
            return ()

        path = _FILE_WRITERS[output](base_name, summary)
        self._reporter.finalize("Done!")
        self._echo(f"💾 Summary written to {path}")
        return (str(path),)

    @staticmethod
    def _success_message(kind: ChannelKind, split: bool) -> str:
        if split:
            return f"Summary sent to {kind.label} and written to output file!"
        return f"Summary sent to {kind.label}!"
