from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..domain.models import ChatModel
from ..domain.transcript import Transcript


@dataclass(frozen=True)
class ChatTurnRequest:
    text: str
    model: ChatModel = ChatModel.GPT_35_TURBO
    temperature: float = 0.0
    name: Optional[str] = None
    clear: bool = False


@dataclass(frozen=True)
class ChatTurnResult:
    reply: str
    current: Transcript
    outdated: Optional[Transcript] = None

    @property
    def pruned(self) -> int:
        return len(self.outdated) if self.outdated is not None else 0
