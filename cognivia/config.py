# cognivia/config.py
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash"


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_MODEL
    data_dir: Path = Path("quizzes")
    question_count: int = 10
    min_document_chars: int = 100
    strict_options: bool = False
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _bool_env(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """
    Read settings from the environment, loading a .env file first if present.
    """
    load_dotenv()
    return Settings(
        gemini_api_key=os.environ.get("GEMINI_API_KEY") or None,
        gemini_model=os.environ.get("GEMINI_MODEL") or DEFAULT_MODEL,
        data_dir=Path(os.environ.get("COGNIVIA_DATA_DIR") or "quizzes"),
        question_count=_int_env("COGNIVIA_QUESTION_COUNT", 10),
        min_document_chars=_int_env("COGNIVIA_MIN_DOCUMENT_CHARS", 100),
        strict_options=_bool_env("COGNIVIA_STRICT_OPTIONS", False),
        log_level=(os.environ.get("COGNIVIA_LOG_LEVEL") or "INFO").upper(),
    )
