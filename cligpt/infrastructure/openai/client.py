from __future__ import annotations

import json
from typing import Dict, Iterator, List, Optional

import requests

from ...domain.errors import ContractError, TransportError
from ...domain.interfaces import CompletionService, EmbeddingService
from ...domain.models import EMBEDDING_DIM, ChatModel, Embedding, Message
from ..config import embed_model, http_timeout_seconds, openai_url
from ..logging import get_logger

logger = get_logger("cligpt.openai")

_SSE_DATA = "data:"
_SSE_DONE = "[DONE]"


def _headers(api_key: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}


def _error_detail(r: requests.Response) -> str:
    """Best-effort extraction of the provider's error message from a failed response."""
    try:
        data = r.json()
    except ValueError:
        return (r.text or "").strip()[:200]
    err = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    return str(data)[:200]


def _post(url: str, api_key: str, body: dict, timeout: float, stream: bool = False) -> requests.Response:
    try:
        r = requests.post(url, headers=_headers(api_key), json=body, timeout=timeout, stream=stream)
    except requests.RequestException as ex:
        raise TransportError(f"Request to {url} failed: {ex}") from ex
    if r.status_code >= 400:
        detail = _error_detail(r)
        r.close()
        raise TransportError(f"Request to {url} rejected with HTTP {r.status_code}: {detail}")
    return r


class OpenAIEmbeddingService(EmbeddingService):
    """Embedding adapter for OpenAI /embeddings."""

    def __init__(self, api_key: str, model: Optional[str] = None, expected_dim: int = EMBEDDING_DIM) -> None:
        self._api_key = api_key
        self._model = model or embed_model()
        self._expected_dim = expected_dim

    def embed_text(self, text: str) -> Embedding:
        url = f"{openai_url()}/embeddings"
        r = _post(url, self._api_key, {"model": self._model, "input": text}, http_timeout_seconds())
        try:
            data = r.json()
        except ValueError as ex:
            raise ContractError(f"Embedding response is not JSON: {ex}") from ex

        items = data.get("data") if isinstance(data, dict) else None
        if not items:
            raise ContractError("Embedding response contained no vectors")
        raw = items[0].get("embedding") if isinstance(items[0], dict) else None
        if not isinstance(raw, list):
            raise ContractError("Embedding response entry has no 'embedding' array")
        try:
            vec = Embedding.of(raw)
        except (TypeError, ValueError) as ex:
            raise ContractError(f"Embedding contains non-numeric values: {ex}") from ex
        if vec.dim != self._expected_dim:
            raise ContractError(f"Embedding has dimension {vec.dim}, expected {self._expected_dim}")
        logger.debug("Embedded text | model=%s | chars=%d", self._model, len(text))
        return vec


def parse_sse_line(line: str) -> Optional[dict]:
    """
    Decode one server-sent-events line of a streamed chat completion.

    Returns the decoded chunk, ``{}`` for lines that carry no data (comments,
    blank keep-alives, other fields), or None for the terminal ``[DONE]`` marker.

    Raises:
        TransportError: The data payload is not valid JSON or reports an error.
    """
    s = line.strip()
    if not s.startswith(_SSE_DATA):
        return {}
    payload = s[len(_SSE_DATA):].strip()
    if payload == _SSE_DONE:
        return None
    try:
        chunk = json.loads(payload)
    except json.JSONDecodeError as ex:
        raise TransportError(f"Malformed stream chunk: {payload[:80]!r}") from ex
    if isinstance(chunk, dict) and chunk.get("error"):
        err = chunk["error"]
        msg = err.get("message") if isinstance(err, dict) else err
        raise TransportError(f"Stream reported an error: {msg}")
    return chunk if isinstance(chunk, dict) else {}


def chunk_text(chunk: dict) -> str:
    parts: List[str] = []
    for choice in chunk.get("choices") or []:
        delta = choice.get("delta") or {}
        content = delta.get("content")
        if isinstance(content, str):
            parts.append(content)
    return "".join(parts)


class OpenAICompletionService(CompletionService):
    """Chat completion adapter for OpenAI /chat/completions with streaming."""

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    def stream_reply(self, model: ChatModel, temperature: float, messages: List[Message]) -> Iterator[str]:
        url = f"{openai_url()}/chat/completions"
        body = {
            "model": model.value,
            "temperature": temperature,
            "messages": [m.to_wire() for m in messages],
            "stream": True,
        }
        logger.info("Completion request | model=%s | messages=%d", model.value, len(messages))
        r = _post(url, self._api_key, body, http_timeout_seconds(), stream=True)
        # SSE responses rarely declare a charset; requests would fall back to latin-1.
        r.encoding = "utf-8"
        with r:
            try:
                for line in r.iter_lines(decode_unicode=True):
                    if not line:
                        continue
                    if isinstance(line, bytes):
                        line = line.decode("utf-8")
                    chunk = parse_sse_line(line)
                    if chunk is None:
                        return
                    text = chunk_text(chunk)
                    if text:
                        yield text
            except requests.RequestException as ex:
                raise TransportError(f"Completion stream interrupted: {ex}") from ex
