"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the verbosity of the
state bound to the current context, without requiring explicit state passing
through the compiler layers.

Features:
- Context-aware logging tied to a verbosity-bearing state object
- Timestamps, colors and call-site metadata on stderr
- Thread-safe using contextvars (concurrent compilations don't share state)

Usage:
    from markuptree.lib.log import LOG, state_connectToLogger

    # At start of a pipeline stage:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("Compiled 3 files", level=1)
    LOG("Dropped attribute 'onClick'", level=2)
    LOG("Expression '{1 +}' failed: unexpected end", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold the state whose verbosity governs LOG()
_program_state: ContextVar[Optional[Any]] = ContextVar('markuptree_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{module: <12}</cyan>:"
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a verbosity-bearing state to the logging context.

    Args:
        state: Any object with an integer `verbosity` attribute
               (ProgramState in the CLI)
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the connected state, 0 when nothing is connected"""
    state = _program_state.get()
    return getattr(state, 'verbosity', 0) if state is not None else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)
    """
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """
    Log a warning if any state is connected with verbosity >= 1.

    Used for host-facing diagnostics (unrecognized tags, dropped nodes in
    strict mode) that should not vanish at default verbosity.
    """
    if verbosity_get() >= 1:
        logger.opt(depth=1).warning(message, **kwargs)
