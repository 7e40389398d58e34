"""Terminal emulator detection and session attach."""

import os
import shutil
import subprocess

from . import config
from .errors import ExternalCommandError, ValidationError
from .telemetry import get_logger

logger = get_logger(__name__)


def available_terminals() -> list[str]:
    """Candidate terminals found on PATH, in preference order."""
    return [term for term in config.TERMINAL_CANDIDATES if shutil.which(term)]


def default_terminal() -> str:
    """Pick a terminal emulator.

    Order: TERMLAYOUT_TERMINAL, TERMINAL, first candidate on PATH, xterm.
    """
    for var in config.TERMINAL_ENV_VARS:
        if term := os.environ.get(var):
            return term

    found = available_terminals()
    if found:
        return found[0]
    return config.FALLBACK_TERMINAL


def validate_terminal(terminal: str) -> None:
    """Raises ValidationError if ``terminal`` is not on PATH."""
    if shutil.which(terminal) is None:
        raise ValidationError(f"terminal '{terminal}' not found in PATH")


def terminal_args(terminal: str) -> list[str]:
    """Arguments that make ``terminal`` run ``tmux attach-session -t``."""
    if terminal == "gnome-terminal":
        return ["--", "tmux", "attach-session", "-t"]
    return ["-e", "tmux", "attach-session", "-t"]


def attach_session(terminal: str, name: str) -> None:
    """Open a new terminal window attached to session ``name``.

    The window is spawned without waiting for it to exit.

    Raises:
        ExternalCommandError: If the terminal could not be started.
    """
    cmd = [terminal, *terminal_args(terminal), name]
    try:
        subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        logger.error(f"[Terminal] Failed to launch {terminal}: {e}")
        raise ExternalCommandError(cmd, f"Failed to launch terminal: {e}") from e
    logger.info(f"[Terminal] Attached {name!r} in {terminal}")
