"""
OutputManager — the diagnostic sink core.

Central coordinator for severity-gated diagnostic output. Every message
is formatted into one line and handed to ``self.sink(level, line)``.
The default sink prints to the console when the message level is at or
below the current threshold:

    ←── more severe ────────────────────────── more verbose ──→
    -8     0     8     16     24      32    40      48    56
    quiet  panic fatal error  warning info  verbose debug trace

The sink is a plain attribute so other components (the report manager)
can wrap it with a fan-out decorator without the callers noticing.

Log flags (set through the log-level directive):
    repeat      print repeated lines instead of collapsing them
    level       prefix lines with "[level]"
    time        prefix lines with seconds since start
    datetime    prefix lines with the local date and time
"""

import sys
import time
from datetime import datetime
from typing import Any, Callable, Optional, TextIO

from . import levels
from .directive import parse_directive

Sink = Callable[[int, str], None]


class OutputManager:
    """Central coordinator for severity-gated diagnostic output.

    Console output is written to the configured file handle (default:
    stderr). Consecutive identical console lines are collapsed unless
    the repeat flag is set.

    Usage::

        out = OutputManager(level=levels.VERBOSE)
        out.emit(levels.VERBOSE, "Loaded {count} entries", count=42)
        out.set_loglevel("+level+debug")
        out.error("Something went wrong")
    """

    def __init__(
        self,
        level: int = levels.DEFAULT_LEVEL,
        flags: int = 0,
        file: TextIO = None,
    ):
        self.level = level
        self.flags = flags
        self.file = file if file is not None else sys.stderr
        self.sink: Sink = self.write_console
        self._start = time.monotonic()
        self._last_line: Optional[str] = None
        self._repeat_count = 0

    # -----------------------------------------------------------------
    # Emission
    # -----------------------------------------------------------------
    def emit(self, level: int, message: str, /, **kwargs: Any) -> None:
        """Format a message and deliver it to the sink.

        Every message reaches the sink regardless of threshold; the
        console sink filters by level itself, while wrapping sinks may
        apply a threshold of their own.

        Args:
            level: Message severity (higher = more verbose)
            message: Format string (uses str.format with kwargs)
            **kwargs: Values for template placeholders
        """
        text = message.format(**kwargs) if kwargs else message
        for line in text.splitlines() or ['']:
            self.sink(level, self.format_line(level, line))

    def format_line(self, level: int, text: str) -> str:
        """Decorate a line according to the current log flags."""
        prefix = []
        if self.flags & levels.FLAG_DATETIME:
            prefix.append(datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3])
        if self.flags & levels.FLAG_TIME:
            prefix.append(f"{time.monotonic() - self._start:.6f}")
        if self.flags & levels.FLAG_LEVEL:
            prefix.append(f"[{levels.level_name(level)}]")
        if prefix:
            return ' '.join(prefix) + ' ' + text
        return text

    def write_console(self, level: int, line: str) -> None:
        """Default sink: print to the console if the level passes."""
        if level > self.level:
            return
        if not self.flags & levels.FLAG_REPEAT:
            if line == self._last_line:
                self._repeat_count += 1
                return
            self.flush_repeats()
        print(line, file=self.file)
        self._last_line = line

    def flush_repeats(self) -> None:
        """Report how often the last console line was suppressed."""
        if self._repeat_count:
            print(f"    Last message repeated {self._repeat_count} times",
                  file=self.file)
            self._repeat_count = 0
        self._last_line = None

    def error(self, message: str, /, **kwargs: Any) -> None:
        """Emit an error message."""
        self.emit(levels.ERROR, message, **kwargs)

    def warning(self, message: str, /, **kwargs: Any) -> None:
        """Emit a warning message."""
        self.emit(levels.WARNING, message, **kwargs)

    def info(self, message: str, /, **kwargs: Any) -> None:
        """Emit an informational message."""
        self.emit(levels.INFO, message, **kwargs)

    def debug(self, message: str, /, **kwargs: Any) -> None:
        """Emit a debug message."""
        self.emit(levels.DEBUG, message, **kwargs)

    def is_enabled(self, level: int) -> bool:
        """True when a message at level would reach the console.

        Used by callers to gate expensive diagnostics.
        """
        return level <= self.level

    # -----------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------
    def set_loglevel(self, directive: str) -> None:
        """Apply a log-level directive such as "+level+verbose" or "debug".

        On error the flags and level are left as they were.

        Raises:
            InvalidDirective: if the directive does not parse
        """
        self.flags, self.level = parse_directive(
            directive, self.flags, self.level,
            levels.LOG_FLAGS, levels.LEVEL_NAMES,
        )

    @property
    def quiet(self) -> bool:
        """True when nothing at all is printed to the console."""
        return self.level < levels.PANIC


# =============================================================================
# Module-level singleton
# =============================================================================

_manager: Optional[OutputManager] = None


def init_output(loglevel: str = None, file: TextIO = None) -> OutputManager:
    """Initialize the module-level OutputManager singleton.

    Call once at program startup after parsing CLI arguments.

    Args:
        loglevel: Optional log-level directive (e.g., 'verbose', '+level+debug')
        file: Console destination (default: stderr)

    Returns:
        The initialized OutputManager instance

    Raises:
        InvalidDirective: if loglevel does not parse
    """
    global _manager

    manager = OutputManager(file=file)
    if loglevel:
        manager.set_loglevel(loglevel)
    _manager = manager
    return _manager


def get_output() -> OutputManager:
    """Get the module-level OutputManager, creating a default if needed."""
    global _manager
    if _manager is None:
        _manager = OutputManager()
    return _manager
