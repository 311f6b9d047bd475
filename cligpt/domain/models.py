from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


EMBEDDING_DIM = 1536


class Role(str, Enum):
    """Author of a chat message, valued by its wire identifier."""

    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def parse(cls, value: str) -> "Role":
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(r.value for r in cls)
            raise ValueError(f"Unknown role '{value}'; expected one of: {allowed}") from None


class ChatModel(str, Enum):
    """Completion models accepted by the client, valued by their wire identifier."""

    GPT_35_TURBO = "gpt-3.5-turbo"
    GPT_35_TURBO_16K = "gpt-3.5-turbo-16k"
    GPT_4 = "gpt-4"
    GPT_4_32K = "gpt-4-32k"

    @classmethod
    def choices(cls) -> List[str]:
        return [m.value for m in cls]


@dataclass(frozen=True)
class Message:
    """A single chat message.

    Fields:
        role: Who wrote the message.
        content: UTF-8 text as sent to (or received from) the model.
        name: Optional display name of the author.
    """
    role: Role
    content: str
    name: Optional[str] = None

    def to_wire(self) -> Dict[str, str]:
        out = {"role": self.role.value, "content": self.content}
        if self.name:
            out["name"] = self.name
        return out


@dataclass(frozen=True)
class Embedding:
    """Embedding vector with explicit dimension.

    Fields:
        values: The numeric embedding.
        dim: Dimension; checked against EMBEDDING_DIM by the embedding adapter.
    """
    values: List[float]
    dim: int

    @classmethod
    def of(cls, values) -> "Embedding":
        vals = [float(x) for x in values]
        return cls(values=vals, dim=len(vals))


@dataclass(frozen=True)
class EmbeddedMessage:
    """A message paired with the embedding of its content."""
    message: Message
    embedding: Embedding

    @property
    def role(self) -> Role:
        return self.message.role
