from __future__ import annotations

import argparse

from .. import __version__
from ..domain.models import ChatModel


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="cligpt",
        description="Chat with an OpenAI model from the command line; the message is read from stdin",
    )
    ap.add_argument(
        "context",
        nargs="*",
        help="Free-form context words placed before the message read from stdin",
    )
    ap.add_argument(
        "-k",
        "--api-key",
        default=None,
        help="OpenAI API key; defaults to $OPENAI_API_KEY (environment or .env)",
    )
    # Not argparse choices: unknown models go through validate_settings like every other field
    ap.add_argument(
        "-m",
        "--model",
        default=None,
        help="Completion model, one of: " + ", ".join(ChatModel.choices()) + " (default $CLIGPT_MODEL or gpt-3.5-turbo)",
    )
    ap.add_argument(
        "-t",
        "--temperature",
        default=None,
        help="Sampling temperature between 0.0 and 1.0 (default $CLIGPT_TEMPERATURE or 0.0)",
    )
    ap.add_argument("--name", default=None, help="Display name attached to your message")
    ap.add_argument(
        "--chat-file",
        default=None,
        help="Transcript JSON path; defaults to $CLIGPT_CHAT_FILE or chat.json in the data directory",
    )
    ap.add_argument(
        "--clear",
        action="store_true",
        help="Start from an empty conversation; the stored one is replaced once the turn succeeds",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap
