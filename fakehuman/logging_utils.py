"""Logging utilities for FakeHuman agents.

Provides color-coded console output so decisions, warnings and executed
actions are easy to tell apart when several agents share one terminal.
"""

import os
from enum import Enum

from .config import Config


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for message types
    BLUE = "\033[94m"      # Deterministic decisions (advisor traces)
    YELLOW = "\033[93m"    # Warnings (soft failures)
    RED = "\033[91m"       # Errors (invariant violations)
    GREEN = "\033[92m"     # Executed actions
    CYAN = "\033[96m"      # Info/metadata

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


# Markers for message types (color-blind accessible)
LOG_TAG_DECISION = "[•]"
LOG_TAG_WARNING = "[!]"
LOG_TAG_ERROR = "[x]"
LOG_TAG_SUCCESS = "[✓]"
LOG_TAG_INFO = "[i]"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text unless FAKEHUMAN_NO_COLOR is set, otherwise plain text
    """
    if Config.NO_COLOR or os.getenv("FAKEHUMAN_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def is_verbose() -> bool:
    return Config.VERBOSE or bool(os.getenv("FAKEHUMAN_VERBOSE"))


def log_decision(message: str) -> None:
    """Log an advisor decision trace (blue). Printed only in verbose mode."""
    if is_verbose():
        print(colored(f"  {LOG_TAG_DECISION} {message}", Color.BLUE))


def log_warning(message: str) -> None:
    """Log a soft failure (yellow). Always printed."""
    print(colored(f"  {LOG_TAG_WARNING} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error (red). Always printed."""
    print(colored(f"  {LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log an executed action (green). Printed only in verbose mode."""
    if is_verbose():
        print(colored(f"  {LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"  {LOG_TAG_INFO} {message}", Color.CYAN))
