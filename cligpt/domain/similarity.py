from __future__ import annotations

import math
from typing import Sequence

from .errors import ContractError


def dot(x: Sequence[float], y: Sequence[float]) -> float:
    return sum(a * b for a, b in zip(x, y))


def similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two equal-length vectors.

    Returns ``nan`` when either vector has zero magnitude; callers treat a
    non-finite score as undefined.
    """
    if len(a) != len(b):
        raise ContractError(f"Vector length mismatch: {len(a)} != {len(b)}")
    denom = math.sqrt(dot(a, a) * dot(b, b))
    if denom == 0.0:
        return math.nan
    return dot(a, b) / denom
