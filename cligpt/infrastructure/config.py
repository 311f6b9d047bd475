from __future__ import annotations

import os
import sys
from pathlib import Path


def env_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


def openai_url() -> str:
    return env_str("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")


def embed_model() -> str:
    return env_str("CLIGPT_EMBED_MODEL", "text-embedding-ada-002")


def default_model() -> str:
    return env_str("CLIGPT_MODEL", "gpt-3.5-turbo")


def default_temperature() -> str:
    # Returned unparsed so a bad value is reported by validation, not here.
    return env_str("CLIGPT_TEMPERATURE", "0.0")


def http_timeout_seconds() -> float:
    try:
        return float(env_str("CLIGPT_HTTP_TIMEOUT", "60"))
    except Exception:
        return 60.0


def data_dir() -> Path:
    """
    Per-user data directory for cligpt.

    CLIGPT_DATA_DIR wins when set; otherwise the platform convention is used
    (XDG data home on Linux, Application Support on macOS, APPDATA on Windows).
    """
    explicit = os.getenv("CLIGPT_DATA_DIR", "").strip()
    if explicit:
        return Path(explicit).expanduser()
    home = Path.home()
    if sys.platform == "win32":
        base = os.getenv("APPDATA", "").strip()
        root = Path(base) if base else home / "AppData" / "Roaming"
        return root / "cligpt" / "data"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / "cligpt"
    xdg = os.getenv("XDG_DATA_HOME", "").strip()
    root = Path(xdg) if xdg else home / ".local" / "share"
    return root / "cligpt"


def chat_file() -> Path:
    explicit = os.getenv("CLIGPT_CHAT_FILE", "").strip()
    if explicit:
        return Path(explicit).expanduser()
    return data_dir() / "chat.json"
