"""Similarity-guided pruning of the conversation front.

After a turn completes, every earlier entry is scored against the latest
request/response pair. The least relevant exchange and everything before it
are set aside so the prompt resent on the next turn stays bounded, while the
latest exchange is always kept.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ..infrastructure.logging import get_logger
from .errors import PartitionInvariantError
from .models import Role
from .similarity import similarity
from .transcript import Transcript

logger = get_logger("cligpt.partition")

MIN_PARTITION_ENTRIES = 4


@dataclass(frozen=True)
class Ranking:
    """Extremes of the candidate scan, before turn-boundary adjustment."""
    most_similar: int
    most_score: float
    least_similar: int
    least_score: float


def _score(transcript: Transcript, n: int) -> float:
    values = transcript[n].embedding.values
    scores = [
        s
        for s in (
            similarity(values, transcript[-2].embedding.values),
            similarity(values, transcript[-1].embedding.values),
        )
        if math.isfinite(s)
    ]
    return max(scores) if scores else math.nan


def rank_candidates(transcript: Transcript) -> Optional[Ranking]:
    """Find the most and least similar entries among all but the last two.

    Ties keep the earliest index. Candidates with undefined similarity are
    skipped; returns None when no candidate has a defined score.
    """
    most: Optional[Tuple[int, float]] = None
    least: Optional[Tuple[int, float]] = None
    for n in range(len(transcript) - 2):
        score = _score(transcript, n)
        if not math.isfinite(score):
            continue
        if most is None or score > most[1]:
            most = (n, score)
        if least is None or score < least[1]:
            least = (n, score)
    if most is None or least is None:
        return None
    return Ranking(most_similar=most[0], most_score=most[1], least_similar=least[0], least_score=least[1])


def turn_start(transcript: Transcript, index: int) -> int:
    """Move an assistant index back onto the user message that prompted it."""
    if index > 0 and transcript[index].role is Role.ASSISTANT:
        return index - 1
    return index


def turn_end(transcript: Transcript, index: int) -> int:
    """Index just past the exchange starting at ``index``, never past the last request."""
    limit = len(transcript) - 2
    end = index + 1
    if end < limit and transcript[index].role is Role.USER and transcript[end].role is Role.ASSISTANT:
        end += 1
    return min(end, limit)


def partition(transcript: Transcript) -> Tuple[Transcript, Optional[Transcript]]:
    """Split ``transcript`` into ``(current, outdated)``.

    ``outdated`` is None when nothing should be dropped. Only the least
    similar exchange decides where the cut lands; the most similar one must
    sit strictly after it, otherwise no split is made.

    Raises:
        PartitionInvariantError: The best score ranked below the worst one.
    """
    if len(transcript) < MIN_PARTITION_ENTRIES:
        return transcript, None

    ranking = rank_candidates(transcript)
    if ranking is None:
        logger.debug("Partition skipped | reason=no-defined-similarity | entries=%d", len(transcript))
        return transcript, None

    if not ranking.most_score >= ranking.least_score:
        raise PartitionInvariantError(
            f"most similar score {ranking.most_score} at {ranking.most_similar} is below "
            f"least similar score {ranking.least_score} at {ranking.least_similar}"
        )

    most_similar = turn_start(transcript, ranking.most_similar)
    least_similar = turn_start(transcript, ranking.least_similar)
    logger.debug(
        "Partition ranking | entries=%d | most=%d (%.4f) | least=%d (%.4f)",
        len(transcript),
        most_similar,
        ranking.most_score,
        least_similar,
        ranking.least_score,
    )
    if most_similar <= least_similar:
        return transcript, None

    outdated, current = transcript.split_at(turn_end(transcript, least_similar))
    return current, outdated
