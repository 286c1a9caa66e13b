"""
Configuration management for the Sentimiento analysis service
"""

import os
from typing import Dict, List, Optional, Callable, Any
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

@dataclass
class Config:
    # Environment
    APP_ENV: str
    PORT: int
    VERSION: str

    # Remote model provider
    HUGGING_FACE_API_KEY: Optional[str]
    HF_API_URL: str
    HF_TIMEOUT_SECONDS: float
    HF_MAX_ATTEMPTS: int

    # Local engine
    DEFAULT_MODEL: str
    PHRASE_WEIGHT: float

    # Network safety
    ALLOWED_ORIGINS: List[str]
    MAX_BODY_BYTES: int

    # Request observability
    REQUEST_ID_HEADER: str

    # Frontend
    STATIC_DIR: str


ConfigListener = Callable[["Config", Dict[str, Any]], None]

_CONFIG_INSTANCE: Optional[Config] = None
_CONFIG_LISTENERS: List[ConfigListener] = []


def _parse_int(var: str, default: int) -> int:
    raw = os.getenv(var)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(var: str, default: float) -> float:
    raw = os.getenv(var)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _build_config() -> Config:
    """Create a new ``Config`` instance from environment variables."""

    # An empty key means "not configured", same as an absent one
    hf_key = os.getenv("HUGGING_FACE_API_KEY", "").strip() or None

    return Config(
        # Environment
        APP_ENV=os.getenv("APP_ENV", "prod"),
        PORT=_parse_int("PORT", 3000),
        VERSION=os.getenv("APP_VERSION", "2.1.0"),

        # Remote model provider
        HUGGING_FACE_API_KEY=hf_key,
        HF_API_URL=os.getenv("HF_API_URL", "https://api-inference.huggingface.co/models").rstrip("/"),
        HF_TIMEOUT_SECONDS=_parse_float("HF_TIMEOUT_SECONDS", 15.0),
        HF_MAX_ATTEMPTS=max(1, _parse_int("HF_MAX_ATTEMPTS", 3)),

        # Local engine
        DEFAULT_MODEL=os.getenv("DEFAULT_MODEL", "spanish").lower(),
        PHRASE_WEIGHT=_parse_float("PHRASE_WEIGHT", 1.5),

        # Network safety
        ALLOWED_ORIGINS=[origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()],
        MAX_BODY_BYTES=_parse_int("MAX_BODY_BYTES", 32 * 1024),

        # Request observability
        REQUEST_ID_HEADER=os.getenv("REQUEST_ID_HEADER", "X-Request-ID"),

        # Frontend
        STATIC_DIR=os.getenv("STATIC_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "frontend")),
    )


def _notify_listeners(changes: Dict[str, Any]) -> None:
    """Notify registered listeners of configuration changes."""

    if not changes:
        return

    cfg = get_config()
    for listener in list(_CONFIG_LISTENERS):
        try:
            listener(cfg, changes)
        except Exception:
            # Listeners should not break config updates; ignore failures.
            continue


def get_config() -> Config:
    """Return the shared configuration object."""

    global _CONFIG_INSTANCE
    if _CONFIG_INSTANCE is None:
        _CONFIG_INSTANCE = _build_config()
    return _CONFIG_INSTANCE


def update_config(**updates: Any) -> Config:
    """Mutate the shared config in place and notify listeners."""

    cfg = get_config()
    applied: Dict[str, Any] = {}

    for key, value in updates.items():
        if not hasattr(cfg, key):
            raise AttributeError(f"Config has no attribute '{key}'")
        current = getattr(cfg, key)
        if current == value:
            continue
        setattr(cfg, key, value)
        applied[key] = value

    if applied:
        _notify_listeners(applied)
    return cfg


def subscribe_to_updates(listener: ConfigListener) -> Callable[[], None]:
    """Register a callback invoked when the configuration changes."""

    if listener not in _CONFIG_LISTENERS:
        _CONFIG_LISTENERS.append(listener)

    def _unsubscribe() -> None:
        try:
            _CONFIG_LISTENERS.remove(listener)
        except ValueError:
            pass

    return _unsubscribe


def reset_config() -> Config:
    """Reload configuration from the environment and notify listeners."""

    global _CONFIG_INSTANCE
    _CONFIG_INSTANCE = _build_config()
    _notify_listeners({"__reset__": True})
    return _CONFIG_INSTANCE
