"""Shared progress indicator for a pipeline run."""

import sys
import threading
from enum import Enum
from typing import TextIO


class FinalState(str, Enum):
    SUCCESS = "success"
    WARN = "warn"
    FAIL = "fail"


_SYMBOLS = {
    FinalState.SUCCESS: "✔",
    FinalState.WARN: "⚠️",
    FinalState.FAIL: "❌",
}

_CLEAR_LINE = "\r\x1b[K"


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ProgressReporter:
    """
    Reports what the pipeline is currently doing and how it ended.

    Any stage may be the last one to run, so several code paths can try to
    print the terminal status line. Only the first ``finalize`` call wins;
    later calls and updates are ignored until ``reset`` starts a new run.
    The check and the state change happen under one lock, which keeps this
    correct when notification channels are sent from worker threads.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream
        self._lock = threading.Lock()
        self._message = ""
        self._finalized = False
        self._final_message: str | None = None
        self._final_state: FinalState | None = None

    @property
    def message(self) -> str:
        return self._message

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def final_message(self) -> str | None:
        return self._final_message

    @property
    def final_state(self) -> FinalState | None:
        return self._final_state

    def reset(self) -> None:
        """Clears the finalized flag at the start of a run."""
        with self._lock:
            self._message = ""
            self._finalized = False
            self._final_message = None
            self._final_state = None

    def update(self, message: str) -> None:
        """
        Shows a new in-progress message. Never finalizes.

        On a terminal the spinner line is rewritten in place; elsewhere a
        message identical to the current one is not repeated.
        """
        with self._lock:
            if self._finalized or message == self._message:
                return
            self._message = message
            self._write(f"⠋ {message}", final=False)

    def finalize(self, message: str, state: FinalState = FinalState.SUCCESS) -> bool:
        """
        Records the terminal status of the run.

        Returns:
            True if this call finalized the reporter, False if it was
            already finalized.
        """
        with self._lock:
            if self._finalized:
                return False
            self._finalized = True
            self._message = message
            self._final_message = message
            self._final_state = state
            self._write(f"{_SYMBOLS[state]} {message}", final=True)
            return True

    def _write(self, line: str, final: bool) -> None:
        stream = self._stream if self._stream is not None else sys.stderr
        if _is_tty(stream):
            stream.write(_CLEAR_LINE + line + ("\n" if final else ""))
        else:
            stream.write(line + "\n")
        stream.flush()
