"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "sessions.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)


PathLike = Union[str, Path]

DEFAULT_MODELS = {
    "openai": ["gpt-4.1-mini", "gpt-4o-mini"],
    "anthropic": ["claude-3-5-sonnet-20241022", "claude-3-5-haiku-20241022"],
}


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(float(raw))
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name) or default
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class EngineConfig:
    """Runtime settings for the continuity and delivery engine."""

    bot_name: str = "QualiConsult AI"

    # WhatsApp Cloud API
    verify_token: str = "qcai_2026"
    meta_access_token: str = ""
    phone_number_id: str = ""
    graph_api_version: str = "v19.0"
    test_to: str = ""

    # Generation backend
    llm_provider: str = "openai"
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    model_candidates: list[str] = field(
        default_factory=lambda: list(DEFAULT_MODELS["openai"])
    )
    max_output_tokens: int = 500
    generation_timeout_ms: int = 30000
    attempts_per_model: int = 2

    # Delivery
    chunk_max_chars: int = 3500
    send_delay_ms: int = 250

    # Continuity
    dedup_window_seconds: int = 600
    session_ttl_seconds: int = 1800
    short_message_max_chars: int = 12
    question_marks: str = "?؟"
    session_backend: str = "memory"
    database_url: str | None = None
    serialize_conversations: bool = True

    # HTTP
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build configuration from environment variables."""
        defaults = cls()
        provider = _env_str("LLM_PROVIDER", defaults.llm_provider).lower()
        models = _env_list("MODEL_CANDIDATES", "")
        if not models and provider == "openai":
            models = _env_list("OPENAI_MODEL", "")
        if not models:
            models = list(DEFAULT_MODELS.get(provider, defaults.model_candidates))

        return cls(
            bot_name=_env_str("BOT_NAME", defaults.bot_name),
            verify_token=_env_str("VERIFY_TOKEN", defaults.verify_token),
            meta_access_token=_env_str("META_ACCESS_TOKEN"),
            phone_number_id=_env_str("PHONE_NUMBER_ID"),
            graph_api_version=_env_str("GRAPH_API_VERSION", defaults.graph_api_version),
            test_to=_env_str("TEST_TO"),
            llm_provider=provider,
            openai_api_key=_env_str("OPENAI_API_KEY"),
            anthropic_api_key=_env_str("ANTHROPIC_API_KEY"),
            model_candidates=models,
            max_output_tokens=_env_int("MAX_OUTPUT_TOKENS", defaults.max_output_tokens),
            generation_timeout_ms=_env_int(
                "GENERATION_TIMEOUT_MS", defaults.generation_timeout_ms
            ),
            attempts_per_model=_env_int("ATTEMPTS_PER_MODEL", defaults.attempts_per_model),
            chunk_max_chars=_env_int("WA_CHUNK_MAX", defaults.chunk_max_chars),
            send_delay_ms=_env_int("WA_SEND_DELAY_MS", defaults.send_delay_ms),
            dedup_window_seconds=_env_int(
                "DEDUP_WINDOW_SECONDS", defaults.dedup_window_seconds
            ),
            session_ttl_seconds=_env_int(
                "SESSION_TTL_SECONDS", defaults.session_ttl_seconds
            ),
            short_message_max_chars=_env_int(
                "SHORT_MESSAGE_MAX_CHARS", defaults.short_message_max_chars
            ),
            question_marks=os.getenv("QUESTION_MARKS") or defaults.question_marks,
            session_backend=_env_str("SESSION_BACKEND", defaults.session_backend).lower(),
            database_url=os.getenv("DATABASE_URL") or None,
            serialize_conversations=_env_bool(
                "SERIALIZE_CONVERSATIONS", defaults.serialize_conversations
            ),
            api_host=_env_str("API_HOST", defaults.api_host),
            api_port=_env_int("API_PORT", defaults.api_port),
            log_level=_env_str("LOG_LEVEL", defaults.log_level),
        )

    @property
    def send_delay_seconds(self) -> float:
        return self.send_delay_ms / 1000

    def env_summary(self) -> dict[str, str]:
        """Credential presence summary for the startup log (never values)."""
        return {
            "meta": "OK" if self.meta_access_token else "MISSING",
            "phone": "OK" if self.phone_number_id else "MISSING",
            "openai": "OK" if self.openai_api_key else "MISSING",
            "anthropic": "OK" if self.anthropic_api_key else "MISSING",
            "provider": self.llm_provider,
            "models": ",".join(self.model_candidates),
            "max_output_tokens": str(self.max_output_tokens),
            "session_backend": self.session_backend,
        }
