from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence, TextIO

from ..application.dto import ChatTurnRequest
from ..application.use_cases.chat_turn import ChatTurnUseCase
from ..domain.errors import CligptError, InputError, ValidationError
from ..domain.validation import validate_settings
from ..infrastructure.config import chat_file, default_model, default_temperature
from ..infrastructure.logging import get_logger
from ..infrastructure.openai.client import OpenAICompletionService, OpenAIEmbeddingService
from ..infrastructure.storage.json_store import JsonTranscriptStore
from .parsers import build_parser

logger = get_logger("cligpt.cli")

EXIT_USAGE = 2
EXIT_FAILURE = 3
API_KEY_VAR = "OPENAI_API_KEY"


def _dotenv_value(dotenv_path: Path, key: str) -> Optional[str]:
    """Value of ``key`` in a KEY=VALUE .env file (quotes and ``export`` stripped); None when absent or blank."""
    if not dotenv_path.is_file():
        return None
    try:
        lines = dotenv_path.read_text(encoding="utf-8", errors="ignore").splitlines()
    except OSError:
        return None
    for raw in lines:
        s = raw.strip()
        if s.startswith("#"):
            continue
        if s.startswith("export "):
            s = s[len("export "):]
        name, sep, value = s.partition("=")
        if sep and name.strip() == key:
            value = value.strip().strip('"').strip("'")
            return value or None
    return None


def resolve_api_key(explicit: Optional[str]) -> Optional[str]:
    """--api-key, then $OPENAI_API_KEY, then OPENAI_API_KEY from ./.env."""
    for candidate in (explicit, os.getenv(API_KEY_VAR)):
        if candidate and candidate.strip():
            return candidate.strip()
    return _dotenv_value(Path(".env"), API_KEY_VAR)


def read_input(stdin: TextIO) -> str:
    """Read all of ``stdin``; undecodable or unreadable input is an input error."""
    try:
        return stdin.read()
    except UnicodeDecodeError as ex:
        raise InputError(f"Standard input is not valid UTF-8 text: {ex}") from ex
    except OSError as ex:
        raise InputError(f"Cannot read standard input: {ex}") from ex


def compose_message(context: Sequence[str], body: str) -> str:
    """
    Build the user message from context words and the text read from stdin.

    Context words are joined by single spaces and placed before the body,
    separated by a blank line. Leading and trailing newlines of the body are dropped.

    Raises:
        InputError: Neither context nor body carries any non-whitespace text.
    """
    prefix = " ".join(context).strip()
    text = body.strip("\r\n")
    parts = [p for p in (prefix, text) if p.strip()]
    if not parts:
        raise InputError("Message is empty; pass text on standard input or as arguments")
    return "\n\n".join(parts)


class _TerminalSink:
    """Writes reply fragments as they arrive and remembers how the output ended."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self.ended_with_newline = True

    def write(self, fragment: str) -> None:
        self._stream.write(fragment)
        if fragment:
            self.ended_with_newline = fragment.endswith("\n")

    def flush(self) -> None:
        self._stream.flush()


def _report_error(ex: BaseException) -> None:
    kind = ex.kind if isinstance(ex, CligptError) else "unexpected"
    record: Dict[str, object] = {"status": "error", "kind": kind, "error": f"{type(ex).__name__}: {ex}"}
    if isinstance(ex, ValidationError):
        record["violations"] = [
            {"field": v.field, "value": v.value, "constraint": v.constraint} for v in ex.violations
        ]
    print(json.dumps(record), file=sys.stderr)


def run(argv: Optional[Sequence[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    ap = build_parser()
    ns = ap.parse_args(list(argv or []))
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    try:
        text = compose_message(ns.context, read_input(stdin))
        api_key, model, temperature = validate_settings(
            resolve_api_key(ns.api_key),
            ns.model or default_model(),
            ns.temperature if ns.temperature is not None else default_temperature(),
        )
    except (InputError, ValidationError) as ex:
        _report_error(ex)
        return EXIT_USAGE

    path = Path(ns.chat_file).expanduser() if ns.chat_file else chat_file()
    sink = _TerminalSink(stdout)
    use_case = ChatTurnUseCase(
        OpenAIEmbeddingService(api_key),
        OpenAICompletionService(api_key),
        JsonTranscriptStore(path),
        write=sink.write,
        flush=sink.flush,
    )
    request = ChatTurnRequest(text=text, model=model, temperature=temperature, name=ns.name, clear=ns.clear)

    try:
        result = use_case.execute(request)
    except Exception as ex:  # every failure aborts the turn with nothing persisted
        if not sink.ended_with_newline:
            stdout.write("\n")
        _report_error(ex)
        return EXIT_USAGE if isinstance(ex, InputError) else EXIT_FAILURE

    if not sink.ended_with_newline:
        stdout.write("\n")
    stdout.flush()
    logger.info("Chat saved | path=%s | kept=%d | pruned=%d", path, len(result.current), result.pruned)
    return 0


def main() -> int:
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
