"""Entry point for the distill CLI."""

import argparse
import logging
import os
import sys
from pathlib import Path

from ddtrace import patch_all

from distiller import prompts
from distiller.config import DEFAULT_CONFIG_PATH, load_config
from distiller.dependencies import pipeline_session
from distiller.domain import (
    ChannelKind,
    FinalState,
    OutputType,
    PipelineRequest,
    ProgressReporter,
    select_channels,
)
from distiller.domain.payloads import DEFAULT_CARD_TITLE
from distiller.exceptions import ConfigurationError, PipelineError
from distiller.logging import setup_logging

logger = logging.getLogger(__name__)

_OUTPUT_ALIASES = {
    "slacksplit": OutputType.SLACK_SPLIT,
    "teamssplit": OutputType.TEAMS_SPLIT,
}


def parse_output_type(value: str) -> OutputType:
    """Parses an output type case-insensitively, accepting ``_`` for ``-``."""
    normalized = value.strip().lower().replace("_", "-")
    if normalized in _OUTPUT_ALIASES:
        return _OUTPUT_ALIASES[normalized]
    try:
        return OutputType(normalized)
    except ValueError:
        choices = ", ".join(output.value for output in OutputType)
        raise argparse.ArgumentTypeError(
            f"invalid output type '{value}' (choose from {choices})"
        ) from None


def parse_yes_no(value: str) -> bool:
    normalized = value.strip().upper()
    if normalized in ("Y", "YES"):
        return True
    if normalized in ("N", "NO"):
        return False
    raise argparse.ArgumentTypeError(f"expected Y or N, got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="distill",
        description="Upload an audio file, transcribe it and summarize the transcript.",
    )
    parser.add_argument("-i", "--input-audio-file", required=True, help="Audio file to process")
    parser.add_argument(
        "-o",
        "--output-type",
        type=parse_output_type,
        default=OutputType.TERMINAL,
        help="terminal, text, word, markdown, slack, slack-split, teams or teams-split",
    )
    parser.add_argument(
        "-s", "--summary-file-name", default="summarized_output", help="Base name of output files"
    )
    parser.add_argument("-l", "--language-code", default="en-US", help="Transcription language")
    parser.add_argument(
        "-d",
        "--delete-s3-object",
        type=parse_yes_no,
        default=True,
        metavar="Y|N",
        help="Delete the uploaded object when done (default Y)",
    )
    parser.add_argument(
        "-t", "--save-transcript", action="store_true", help="Also save the full transcript"
    )
    parser.add_argument(
        "-c", "--config", default=str(DEFAULT_CONFIG_PATH), help="Path to config.toml"
    )
    parser.add_argument("-b", "--bucket", help="S3 bucket to use instead of the configured one")
    parser.add_argument(
        "--parallel", action="store_true", help="Send webhook notifications concurrently"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline events")
    return parser


def _tracing_enabled() -> bool:
    return os.getenv("DD_TRACE_ENABLED", "false").lower() in ("1", "true")


def main(argv: list[str] | None = None) -> int:
    """Runs the CLI and returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging("INFO" if args.verbose else None)
    if _tracing_enabled():
        patch_all()

    output_type: OutputType = args.output_type
    print("🧙 Welcome to Distill CLI")
    print(f"📄 Processing file: {Path(args.input_audio_file).name}")
    print(f"🔄 Output type: {output_type.value}")

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}", file=sys.stderr)
        return 1
    print(f"📦 Using model: {config.model.model_id}")

    interactive = sys.stdin.isatty()
    kind = output_type.channel_kind
    selection: tuple[int, ...] = ()
    title = DEFAULT_CARD_TITLE
    if kind is None:
        if output_type is not OutputType.TERMINAL:
            print(f"📦 Current output file name: {args.summary_file_name}")
    else:
        chooser = prompts.channel_chooser(kind) if interactive else None
        selection = tuple(select_channels(config.channels_for(kind), chooser))
        if kind is ChannelKind.TEAMS and interactive:
            title = prompts.ask_card_title()

    request = PipelineRequest(
        input_path=args.input_audio_file,
        language_code=args.language_code,
        bucket_name=args.bucket,
        delete_after=args.delete_s3_object,
        output_type=output_type,
        summary_file_name=args.summary_file_name,
        save_transcript=args.save_transcript,
        card_title=title,
        channel_selection=selection,
    )

    reporter = ProgressReporter()
    try:
        with pipeline_session(
            config,
            reporter,
            parallel=args.parallel,
            choose_bucket=prompts.choose_bucket if interactive else None,
        ) as pipeline:
            pipeline.run(request)
    except PipelineError as e:
        reporter.finalize(f"{e.stage.capitalize()} failed: {e}", FinalState.FAIL)
        return 1
    except KeyboardInterrupt:
        logger.warning("Run interrupted", extra={"input": args.input_audio_file})
        reporter.finalize("Interrupted", FinalState.FAIL)
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
