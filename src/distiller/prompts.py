"""Interactive terminal prompts used by the CLI."""

from collections.abc import Callable

from distiller.domain import ChannelKind
from distiller.domain.payloads import DEFAULT_CARD_TITLE

InputFn = Callable[[str], str]
EchoFn = Callable[[str], None]


def choose_bucket(
    buckets: list[str], input_fn: InputFn = input, echo: EchoFn = print
) -> str:
    """Asks the user to pick one bucket by number. Blank picks the first."""
    echo("📦 Available S3 buckets:")
    for number, name in enumerate(buckets, start=1):
        echo(f"  {number}. {name}")
    while True:
        answer = input_fn("Select an S3 bucket [1]: ").strip()
        if not answer:
            return buckets[0]
        if answer.isdigit() and 1 <= int(answer) <= len(buckets):
            return buckets[int(answer) - 1]
        echo(f"Please enter a number between 1 and {len(buckets)}.")


def channel_chooser(
    kind: ChannelKind, input_fn: InputFn = input, echo: EchoFn = print
) -> Callable[[list[str]], list[int]]:
    """
    Returns a chooser that lets the user tick several channels.

    Answers are comma-separated numbers or ``all``. A blank answer selects
    nothing, which skips the notification.
    """

    def choose(names: list[str]) -> list[int]:
        echo(f"📝 Select {kind.label} channels to send the summary to:")
        for number, name in enumerate(names, start=1):
            echo(f"  {number}. {name}")
        while True:
            answer = input_fn("Channels (e.g. 1,3 or all): ").strip().lower()
            if not answer:
                return []
            if answer == "all":
                return list(range(len(names)))
            picks = [part.strip() for part in answer.split(",") if part.strip()]
            if all(p.isdigit() and 1 <= int(p) <= len(names) for p in picks):
                return [int(p) - 1 for p in picks]
            echo(f"Please enter numbers between 1 and {len(names)}, or 'all'.")

    return choose


def ask_card_title(input_fn: InputFn = input) -> str:
    """Asks for the Teams card title."""
    answer = input_fn(f"Title for the Teams card [{DEFAULT_CARD_TITLE}]: ").strip()
    return answer or DEFAULT_CARD_TITLE
