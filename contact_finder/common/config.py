"""
Configuration loader for the contact discovery pipeline.

Loads all settings from environment variables (.env file).
Validates required settings and provides type-safe access.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


class Config:
    """
    Centralized configuration for all discovery components.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== Intelligence Provider (OpenAI-compatible chat completions) =====
    PERPLEXITY_API_KEY: str = os.getenv("PERPLEXITY_API_KEY", "")
    PROVIDER_BASE_URL: str = os.getenv("PROVIDER_BASE_URL", "https://api.perplexity.ai")
    PROVIDER_MODEL: str = os.getenv("PROVIDER_MODEL", "sonar")
    PROVIDER_TEMPERATURE: float = float(os.getenv("PROVIDER_TEMPERATURE", "0.2"))
    PROVIDER_MAX_TOKENS: int = _env_int("PROVIDER_MAX_TOKENS", 1000)
    PROVIDER_TIMEOUT_SECONDS: int = _env_int("PROVIDER_TIMEOUT_SECONDS", 30)
    # Attempts per provider call (tenacity), including the first one
    PROVIDER_MAX_ATTEMPTS: int = _env_int("PROVIDER_MAX_ATTEMPTS", 2)

    # ===== Rate-limiting courtesy delays =====
    PHASE_DELAY_MS: int = _env_int("PHASE_DELAY_MS", 50)
    FALLBACK_DELAY_MS: int = _env_int("FALLBACK_DELAY_MS", 200)

    # ===== Search defaults =====
    DEFAULT_MINIMUM_CONFIDENCE: int = _env_int("DEFAULT_MINIMUM_CONFIDENCE", 30)
    DEFAULT_MAX_CONTACTS: int = _env_int("DEFAULT_MAX_CONTACTS", 10)
    BATCH_MAX_WORKERS: int = _env_int("BATCH_MAX_WORKERS", 4)

    # ===== Observability =====
    # Emit session trace events as JSON lines on stdout (for log shippers)
    TRACE_EMIT_JSON: bool = os.getenv("TRACE_EMIT_JSON", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required configuration is present.
        Raises ValueError if critical settings are missing.
        """
        required_settings = {
            "PERPLEXITY_API_KEY": cls.PERPLEXITY_API_KEY,
            "PROVIDER_BASE_URL": cls.PROVIDER_BASE_URL,
            "PROVIDER_MODEL": cls.PROVIDER_MODEL,
        }

        missing = [name for name, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Please check your .env file."
            )

        if cls.PROVIDER_MAX_ATTEMPTS < 1:
            raise ValueError("PROVIDER_MAX_ATTEMPTS must be at least 1.")

        if not 0 <= cls.DEFAULT_MINIMUM_CONFIDENCE <= 100:
            raise ValueError("DEFAULT_MINIMUM_CONFIDENCE must be between 0 and 100.")

    @classmethod
    def phase_delay_seconds(cls) -> float:
        """Delay inserted after each executed search phase."""
        return cls.PHASE_DELAY_MS / 1000.0

    @classmethod
    def fallback_delay_seconds(cls) -> float:
        """Delay inserted before each supplemental (fallback) search."""
        return cls.FALLBACK_DELAY_MS / 1000.0

    @classmethod
    def summary(cls) -> str:
        """Return a summary of the current configuration (safe for logging)."""
        return f"""
Configuration Summary:
  Provider: {cls.PROVIDER_BASE_URL} ({cls.PROVIDER_MODEL}) {'✓ Key configured' if cls.PERPLEXITY_API_KEY else '✗ Key missing'}
  Provider timeout: {cls.PROVIDER_TIMEOUT_SECONDS}s, attempts: {cls.PROVIDER_MAX_ATTEMPTS}
  Delays: phase {cls.PHASE_DELAY_MS}ms, fallback {cls.FALLBACK_DELAY_MS}ms
  Defaults: min confidence {cls.DEFAULT_MINIMUM_CONFIDENCE}, max contacts {cls.DEFAULT_MAX_CONTACTS}
  Batch workers: {cls.BATCH_MAX_WORKERS}
  Trace JSON events: {'Enabled' if cls.TRACE_EMIT_JSON else 'Disabled'}
        """.strip()
