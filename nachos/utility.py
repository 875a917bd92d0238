"""Debug message control, selected by single-character flags.

Predefined flags:

    '+' -- turn on all debug messages
    't' -- thread system
    's' -- semaphores, locks, and conditions
    'i' -- interrupt emulation
    'm' -- machine emulation
    'd' -- disk emulation
    'f' -- file system
    'a' -- address spaces
    'n' -- network emulation
"""

from __future__ import annotations

import sys

__all__ = ["debug_init", "debug_is_enabled", "debug"]

ALL_FLAGS = "+"


class _DebugState:
    """Holds the set of enabled debug flags; None means debugging is off."""

    def __init__(self) -> None:
        self.flags: str | None = None


_state = _DebugState()


def debug_init(flags: str | None) -> None:
    """Enable debug messages for every character in ``flags``.

    A ``"+"`` in ``flags`` enables all messages; ``None`` disables them all.
    """
    _state.flags = flags


def debug_is_enabled(flag: str) -> bool:
    """Return True if messages tagged with ``flag`` are to be printed."""
    flags = _state.flags
    if flags is None:
        return False
    return flag in flags or ALL_FLAGS in flags


def debug(flag: str, message: str, *args: object) -> None:
    """Print ``message`` (printf-style formatted with ``args``) if ``flag`` is enabled."""
    if not debug_is_enabled(flag):
        return
    text = message % args if args else message
    sys.stdout.write(text)
    sys.stdout.flush()