"""CPU feature flags and thread count overrides.

``--cpuflags`` uses the same directive grammar as the log level, minus
the level part:

    --cpuflags -avx2        keep detected flags, drop avx2
    --cpuflags sse2+sse3    absolute: exactly sse2 and sse3
    --cpuflags 0            rejected (no level part here)

The detected set comes from /proc/cpuinfo where available; other
platforms start from an empty set.
"""

import os
import platform
import re
from typing import Dict, List, Optional

from avcaps.lib.log_lib import InvalidDirective, get_output, parse_directive

CPU_FLAGS = (
    ('mmx', 0x1),
    ('mmxext', 0x2),
    ('sse', 0x4),
    ('sse2', 0x8),
    ('sse3', 0x10),
    ('ssse3', 0x20),
    ('sse4.1', 0x40),
    ('sse4.2', 0x80),
    ('avx', 0x100),
    ('avx2', 0x200),
    ('fma3', 0x400),
    ('avx512', 0x800),
    ('neon', 0x10000),
    ('vfp', 0x20000),
    ('armv8', 0x40000),
)

# /proc/cpuinfo spelling → our flag name
_CPUINFO_NAMES: Dict[str, str] = {
    'mmx': 'mmx',
    'mmxext': 'mmxext',
    'sse': 'sse',
    'sse2': 'sse2',
    'pni': 'sse3',
    'ssse3': 'ssse3',
    'sse4_1': 'sse4.1',
    'sse4_2': 'sse4.2',
    'avx': 'avx',
    'avx2': 'avx2',
    'fma': 'fma3',
    'avx512f': 'avx512',
    'neon': 'neon',
    'asimd': 'neon',
    'vfp': 'vfp',
    'fp': 'vfp',
}

_BITS = dict(CPU_FLAGS)

_forced_flags: Optional[int] = None
_forced_count: Optional[int] = None


def parse_cpuinfo(text: str) -> int:
    """Extract our flag mask from /proc/cpuinfo content."""
    mask = 0
    for line in text.splitlines():
        key, _, value = line.partition(':')
        if key.strip() not in ('flags', 'Features'):
            continue
        for word in value.split():
            name = _CPUINFO_NAMES.get(word)
            if name:
                mask |= _BITS[name]
    return mask


def detect_cpu_flags() -> int:
    """Best-effort detection of the host's CPU flags."""
    mask = 0
    try:
        with open('/proc/cpuinfo', encoding='utf-8') as f:
            mask = parse_cpuinfo(f.read())
    except OSError:
        pass
    if platform.machine().lower() in ('aarch64', 'arm64'):
        mask |= _BITS['armv8'] | _BITS['neon'] | _BITS['vfp']
    return mask


def get_cpu_flags() -> int:
    """The forced flag mask if one was set, otherwise the detected one."""
    if _forced_flags is not None:
        return _forced_flags
    return detect_cpu_flags()


def force_cpu_flags(mask: Optional[int]) -> None:
    """Force the flag mask; None returns to detection."""
    global _forced_flags
    _forced_flags = mask


def set_cpuflags(directive: str) -> int:
    """Apply a --cpuflags directive to the current mask and force the result.

    Raises:
        InvalidDirective: on unknown flags or a trailing level
    """
    flags, _ = parse_directive(directive, get_cpu_flags(), 0,
                               CPU_FLAGS, allow_level=False)
    force_cpu_flags(flags)
    get_output().debug("CPU flags forced to {names}",
                       names=' '.join(flag_names(flags)) or '(none)')
    return flags


def flag_names(mask: int) -> List[str]:
    """Names of the bits set in mask, in table order."""
    return [name for name, bit in CPU_FLAGS if mask & bit]


def set_cpucount(text: str) -> int:
    """Force the CPU count used for thread defaults; -1 means auto.

    Raises:
        InvalidDirective: if text is not an integer >= -1
    """
    global _forced_count
    if not re.fullmatch(r'[+-]?[0-9]+', text.strip()):
        raise InvalidDirective(text, 0, "cpu count must be an integer")
    count = int(text)
    if count < -1:
        raise InvalidDirective(text, 0, "cpu count must be -1 or greater")
    _forced_count = None if count == -1 else count
    return count


def get_cpu_count() -> int:
    """The forced CPU count, or the detected one."""
    if _forced_count is not None:
        return _forced_count
    return os.cpu_count() or 1
