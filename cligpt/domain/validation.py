"""Per-field validation shared by the CLI and library callers.

Each ``check_*`` function is pure: it returns None for an acceptable value or
a :class:`FieldViolation` describing the rejection. ``validate_settings`` runs
them all and raises a single :class:`ValidationError`.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .errors import FieldViolation, ValidationError
from .models import ChatModel

API_KEY_PREFIX = "sk-"
API_KEY_MIN_CHARS = 40
API_KEY_MAX_CHARS = 50
_API_KEY_RE = re.compile(
    rf"^{re.escape(API_KEY_PREFIX)}[A-Za-z0-9]{{{API_KEY_MIN_CHARS},{API_KEY_MAX_CHARS}}}$"
)

TEMPERATURE_MIN = 0.0
TEMPERATURE_MAX = 1.0


def mask_secret(value: str, keep: int = 6) -> str:
    if len(value) <= keep:
        return "*" * len(value)
    return value[:keep] + "*" * (len(value) - keep)


def check_api_key(value: Optional[str]) -> Optional[FieldViolation]:
    constraint = (
        f"'{API_KEY_PREFIX}' followed by {API_KEY_MIN_CHARS}-{API_KEY_MAX_CHARS} "
        "ASCII alphanumeric characters"
    )
    if not value:
        return FieldViolation("api_key", "", constraint)
    if _API_KEY_RE.match(value):
        return None
    return FieldViolation("api_key", mask_secret(value), constraint)


def check_temperature(value: object) -> Optional[FieldViolation]:
    constraint = f"a number between {TEMPERATURE_MIN} and {TEMPERATURE_MAX} inclusive"
    try:
        t = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return FieldViolation("temperature", str(value), constraint)
    if not TEMPERATURE_MIN <= t <= TEMPERATURE_MAX:
        return FieldViolation("temperature", str(value), constraint)
    return None


def check_model(value: object) -> Optional[FieldViolation]:
    if isinstance(value, ChatModel):
        return None
    if value in ChatModel.choices():
        return None
    return FieldViolation("model", str(value), "one of: " + ", ".join(ChatModel.choices()))


def validate_settings(api_key: Optional[str], model: object, temperature: object) -> Tuple[str, ChatModel, float]:
    """Validate every field and return the parsed values.

    Raises:
        ValidationError: Carries one violation per rejected field.
    """
    violations: List[FieldViolation] = [
        v
        for v in (check_api_key(api_key), check_model(model), check_temperature(temperature))
        if v is not None
    ]
    if violations:
        raise ValidationError(violations)
    return str(api_key), ChatModel(model), float(temperature)  # type: ignore[arg-type]
