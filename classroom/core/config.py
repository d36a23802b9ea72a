"""Centralized configuration read from environment variables."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class StoreBackend(str, Enum):
    """Available document store backends."""

    MEMORY = "memory"
    AGENTFS = "agentfs"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class ClassroomConfig:
    """Application configuration.

    Attributes:
        gemini_api_key: Generation endpoint key (empty = generation disabled)
        gemini_model: Model used on the generateContent endpoint
        gemini_api_url: Base URL of the generation API
        generation_timeout: Timeout (s) for generation calls
        store_backend: memory or agentfs
        agentfs_id: AgentFS database id when store_backend=agentfs
        blob_dir: Local directory for file uploads
        allow_late_start: Allow starting a quiz after its due_date
        pass_mark: Minimum score (%) to pass
        tick_interval: Seconds between countdown ticks
        session_ttl: Seconds a finished or abandoned attempt session stays in memory
        quiz_question_count: Questions a published quiz must have (0 = any)
        stub_delay_seconds: Simulated delay of the stub endpoints
        cors_origins: Allowed CORS origins
        log_level: Log level
    """

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    generation_timeout: float = 30.0
    store_backend: StoreBackend = StoreBackend.MEMORY
    agentfs_id: str = "classroom"
    blob_dir: Path = field(default_factory=lambda: Path.cwd() / "uploads")
    allow_late_start: bool = True
    pass_mark: int = 70
    tick_interval: float = 1.0
    session_ttl: float = 900.0
    quiz_question_count: int = 10
    stub_delay_seconds: float = 1.5
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:8080"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ClassroomConfig":
        """Build configuration from environment variables."""
        backend = os.getenv("STORE_BACKEND", StoreBackend.MEMORY.value).lower()
        try:
            store_backend = StoreBackend(backend)
        except ValueError:
            store_backend = StoreBackend.MEMORY

        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
            gemini_api_url=os.getenv(
                "GEMINI_API_URL",
                "https://generativelanguage.googleapis.com/v1beta/models",
            ),
            generation_timeout=float(os.getenv("GENERATION_TIMEOUT", "30")),
            store_backend=store_backend,
            agentfs_id=os.getenv("AGENTFS_ID", "classroom"),
            blob_dir=Path(os.getenv("BLOB_DIR", str(Path.cwd() / "uploads"))),
            allow_late_start=_env_bool("ALLOW_LATE_START", True),
            pass_mark=int(os.getenv("PASS_MARK", "70")),
            tick_interval=float(os.getenv("TICK_INTERVAL", "1.0")),
            session_ttl=float(os.getenv("SESSION_TTL_SECONDS", "900")),
            quiz_question_count=int(os.getenv("QUIZ_QUESTION_COUNT", "10")),
            stub_delay_seconds=float(os.getenv("STUB_DELAY_SECONDS", "1.5")),
            cors_origins=_env_list("CORS_ORIGINS", ["http://localhost:8080"]),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def generation_enabled(self) -> bool:
        return bool(self.gemini_api_key)


_config: ClassroomConfig | None = None


def get_config() -> ClassroomConfig:
    """Get global configuration (lazy)."""
    global _config
    if _config is None:
        _config = ClassroomConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration (used by tests)."""
    global _config
    _config = None
