from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, List

from ...domain.errors import StorageError
from ...domain.interfaces import TranscriptStore
from ...domain.models import EmbeddedMessage, Embedding, Message, Role
from ...domain.transcript import Transcript
from ..logging import get_logger

logger = get_logger("cligpt.storage")


def _decode_entry(index: int, raw: Any) -> EmbeddedMessage:
    if not isinstance(raw, list) or len(raw) != 2:
        raise StorageError(f"Entry {index} is not a [message, embedding] pair")
    msg, emb = raw
    if not isinstance(msg, dict):
        raise StorageError(f"Entry {index} message is not an object")
    content = msg.get("content")
    if not isinstance(content, str):
        raise StorageError(f"Entry {index} message has no text 'content'")
    try:
        role = Role.parse(str(msg.get("role")))
    except ValueError as ex:
        raise StorageError(f"Entry {index}: {ex}") from ex
    name = msg.get("name")
    if name is not None and not isinstance(name, str):
        raise StorageError(f"Entry {index} message 'name' is not a string")
    if not isinstance(emb, list) or not all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in emb
    ):
        raise StorageError(f"Entry {index} embedding is not an array of numbers")
    return EmbeddedMessage(message=Message(role=role, content=content, name=name), embedding=Embedding.of(emb))


def _check_dimensions(transcript: Transcript) -> None:
    """Every stored embedding must be non-empty and share one length."""
    dim = None
    for i, entry in enumerate(transcript):
        if entry.embedding.dim == 0:
            raise StorageError(f"Entry {i} embedding is empty")
        if dim is None:
            dim = entry.embedding.dim
        elif entry.embedding.dim != dim:
            raise StorageError(f"Entry {i} embedding has dimension {entry.embedding.dim}, expected {dim}")


def _encode_entry(entry: EmbeddedMessage) -> List[Any]:
    return [entry.message.to_wire(), list(entry.embedding.values)]


class JsonTranscriptStore(TranscriptStore):
    """Transcript persisted as a JSON array of ``[message, embedding]`` pairs.

    The path is resolved by the caller; nothing here consults the environment.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def load(self) -> Transcript:
        if not self._path.exists():
            logger.info("No transcript yet | path=%s", self._path)
            return Transcript()
        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as ex:
            raise StorageError(f"Cannot read transcript {self._path}: {ex}") from ex
        try:
            data = json.loads(text)
        except json.JSONDecodeError as ex:
            raise StorageError(f"Transcript {self._path} is not valid JSON: {ex}") from ex
        if not isinstance(data, list):
            raise StorageError(f"Transcript {self._path} must hold a JSON array")
        transcript = Transcript(_decode_entry(i, raw) for i, raw in enumerate(data))
        _check_dimensions(transcript)
        logger.info("Transcript loaded | path=%s | entries=%d", self._path, len(transcript))
        return transcript

    def save(self, transcript: Transcript) -> None:
        """Atomically replace the file: write a sibling temp file, then rename it over."""
        payload = json.dumps([_encode_entry(e) for e in transcript], indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.write("\n")
            os.replace(tmp_name, self._path)
        except OSError as ex:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write transcript {self._path}: {ex}") from ex
        logger.info("Transcript saved | path=%s | entries=%d", self._path, len(transcript))
