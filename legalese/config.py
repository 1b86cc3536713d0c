import os
from dataclasses import dataclass


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    chunk_size: int = 1000
    overlap_size: int = 200
    max_upload_bytes: int = 10 * 1024 * 1024
    max_prompt_chars: int = 25000
    generation_model: str = "google/flan-t5-base"
    knowledge_base_path: str | None = None
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Read settings from the environment; unset variables keep their defaults."""
    origins = os.environ.get("LEGALESE_CORS_ORIGINS", "*")
    return Settings(
        chunk_size=_int_env("LEGALESE_CHUNK_SIZE", 1000),
        overlap_size=_int_env("LEGALESE_OVERLAP_SIZE", 200),
        max_upload_bytes=_int_env("LEGALESE_MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        max_prompt_chars=_int_env("LEGALESE_MAX_PROMPT_CHARS", 25000),
        generation_model=os.environ.get("LEGALESE_GENERATION_MODEL", "google/flan-t5-base"),
        knowledge_base_path=os.environ.get("LEGALESE_KNOWLEDGE_BASE") or None,
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
