"""Logging utilities for minimaze episodes.

Color-coded console output distinguishes deterministic engine work (blue)
from navigator LLM calls (yellow), warnings (magenta) and failures (red).
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""

    BLUE = "\033[94m"      # Deterministic operations (pathfinding, telemetry)
    YELLOW = "\033[93m"    # Navigator LLM calls
    MAGENTA = "\033[95m"   # Recoverable problems (persistence, rejected input)
    RED = "\033[91m"       # Errors
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata

    BOLD = "\033[1m"
    RESET = "\033[0m"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes unless MINIMAZE_NO_COLOR is set."""
    if os.getenv("MINIMAZE_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


# Markers for operation types (color-blind accessible)
TAG_DETERMINISTIC = "[•]"
TAG_LLM = "[AI]"
TAG_WARNING = "[?]"
TAG_ERROR = "[!]"
TAG_SUCCESS = "[✓]"
TAG_INFO = "[i]"


def log_deterministic(message: str) -> None:
    print(colored(f"{TAG_DETERMINISTIC} {message}", Color.BLUE))


def log_llm(message: str) -> None:
    print(colored(f"{TAG_LLM} {message}", Color.YELLOW))


def log_warning(message: str) -> None:
    """Recoverable problem: the episode carries on."""
    print(colored(f"{TAG_WARNING} {message}", Color.MAGENTA))


def log_error(message: str) -> None:
    print(colored(f"{TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    print(colored(f"{TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    print(colored(f"{TAG_INFO} {message}", Color.CYAN))
