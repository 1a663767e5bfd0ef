"""
minimaze configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Navigator LLM
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "openai")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "gpt-4o-mini")

    # API Keys
    ANTHROPIC_API_KEY: str | None = os.getenv("ANTHROPIC_API_KEY")
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")

    # Episode
    MAX_STEPS: int = int(os.getenv("MAZE_MAX_STEPS", "20"))
    FRAME_DELAY_SECONDS: float = float(os.getenv("FRAME_DELAY_SECONDS", "0.5"))

    # Telemetry exports land here as telemetry-<session_id>.json
    TELEMETRY_DIR: Path = Path(os.getenv("TELEMETRY_DIR", "logs"))

    @classmethod
    def validate(cls) -> None:
        """Raise ValueError if the configured LLM provider has no API key."""
        if cls.MAX_STEPS < 1:
            raise ValueError("MAZE_MAX_STEPS must be at least 1")

        if cls.LLM_PROVIDER == "anthropic" and not cls.ANTHROPIC_API_KEY:
            raise ValueError(
                "ANTHROPIC_API_KEY is required when using the 'anthropic' provider"
            )

        if cls.LLM_PROVIDER == "openai" and not cls.OPENAI_API_KEY:
            raise ValueError(
                "OPENAI_API_KEY is required when using the 'openai' provider. "
                "Run the scripted navigator instead if no key is available."
            )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "minimaze Configuration:",
            f"  LLM Provider: {cls.LLM_PROVIDER}",
            f"  LLM Model: {cls.LLM_MODEL}",
            f"  Max Steps: {cls.MAX_STEPS}",
            f"  Frame Delay: {cls.FRAME_DELAY_SECONDS}s",
            f"  Telemetry Dir: {cls.TELEMETRY_DIR}",
        ]
        return "\n".join(lines)
