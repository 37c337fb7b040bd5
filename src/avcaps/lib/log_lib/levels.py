"""
Severity level constants and the log flag bits.

Levels are plain integers. A message is shown when its level is at or
below the current threshold:

    message.level <= threshold  →  message is shown

    ←── more severe ────────────────────────── more verbose ──→
    -8     0     8     16     24      32    40      48    56
    quiet  panic fatal error  warning info  verbose debug trace

Symbolic names are matched exactly and case-sensitively by the
log-level directive parser, in the order of LEVEL_NAMES.
"""

QUIET = -8         # Nothing at all
PANIC = 0          # Process is about to crash
FATAL = 8          # Unrecoverable error, process exits
ERROR = 16         # Error, the operation failed
WARNING = 24       # Something looks wrong but processing continues
INFO = 32          # Standard informational output (default)
VERBOSE = 40       # Detailed informational output
DEBUG = 48         # Internal state useful to developers
TRACE = 56         # Extremely verbose tracing

DEFAULT_LEVEL = INFO

# Ordered symbolic level table
LEVEL_NAMES = (
    ('quiet', QUIET),
    ('panic', PANIC),
    ('fatal', FATAL),
    ('error', ERROR),
    ('warning', WARNING),
    ('info', INFO),
    ('verbose', VERBOSE),
    ('debug', DEBUG),
    ('trace', TRACE),
)

# Log flag bits, toggled by the flag part of a log-level directive
FLAG_REPEAT = 0x1      # Print repeated lines instead of collapsing them
FLAG_LEVEL = 0x2       # Prefix each line with "[level]"
FLAG_TIME = 0x4        # Prefix each line with seconds since start
FLAG_DATETIME = 0x8    # Prefix each line with the wall-clock date/time

LOG_FLAGS = (
    ('repeat', FLAG_REPEAT),
    ('level', FLAG_LEVEL),
    ('time', FLAG_TIME),
    ('datetime', FLAG_DATETIME),
)


def level_name(level: int) -> str:
    """Return the symbolic name for a level, or the nearest less verbose one.

    Levels between two named rungs take the name of the lower rung, so
    an info+4 message still prints as "info".
    """
    name = LEVEL_NAMES[0][0]
    for candidate, value in LEVEL_NAMES:
        if value <= level:
            name = candidate
    return name
