"""
Pytest configuration and fixtures for cligpt tests.

Provides fake remote services, transcript builders and environment cleanup.
"""

import os
from typing import Dict, Iterator, List, Optional

import pytest

from cligpt.domain.interfaces import CompletionService, EmbeddingService, TranscriptStore
from cligpt.domain.models import Embedding, Message, Role
from cligpt.domain.transcript import Transcript


VALID_API_KEY = "sk-" + "a1B2c3D4e5" * 4


class FakeEmbeddingService(EmbeddingService):
    """Returns canned vectors by text, or a constant vector for unknown text."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, default: Optional[List[float]] = None):
        self.vectors = dict(vectors or {})
        self.default = default or [1.0, 0.0]
        self.calls: List[str] = []

    def embed_text(self, text: str) -> Embedding:
        self.calls.append(text)
        return Embedding.of(self.vectors.get(text, self.default))


class FakeCompletionService(CompletionService):
    """Yields a fixed list of fragments and records the request it was given."""

    def __init__(self, fragments: List[str]):
        self.fragments = list(fragments)
        self.requests: List[tuple] = []

    def stream_reply(self, model, temperature, messages) -> Iterator[str]:
        self.requests.append((model, temperature, list(messages)))
        yield from self.fragments


class MemoryTranscriptStore(TranscriptStore):
    """In-memory store that counts saves."""

    def __init__(self, transcript: Optional[Transcript] = None):
        self.stored = transcript if transcript is not None else Transcript()
        self.saves = 0

    def load(self) -> Transcript:
        return Transcript(self.stored)

    def save(self, transcript: Transcript) -> None:
        self.saves += 1
        self.stored = Transcript(transcript)


def build_transcript(vectors: List[List[float]]) -> Transcript:
    """Alternating user/assistant transcript, one entry per vector."""
    t = Transcript()
    for i, v in enumerate(vectors):
        role = Role.USER if i % 2 == 0 else Role.ASSISTANT
        t.append(Message(role=role, content=f"{role.value} {i}"), Embedding.of(v))
    return t


@pytest.fixture
def transcript_factory():
    """Factory for alternating transcripts from raw vectors."""
    return build_transcript


@pytest.fixture
def memory_store():
    return MemoryTranscriptStore()


@pytest.fixture
def clean_environment():
    """Clean environment variables for testing."""
    env_vars_to_clean = [
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "CLIGPT_MODEL",
        "CLIGPT_TEMPERATURE",
        "CLIGPT_EMBED_MODEL",
        "CLIGPT_HTTP_TIMEOUT",
        "CLIGPT_DATA_DIR",
        "CLIGPT_CHAT_FILE",
        "XDG_DATA_HOME",
    ]

    original_env = {}
    for var in env_vars_to_clean:
        if var in os.environ:
            original_env[var] = os.environ[var]
            del os.environ[var]

    yield

    for var in env_vars_to_clean:
        os.environ.pop(var, None)
    for var, value in original_env.items():
        os.environ[var] = value
