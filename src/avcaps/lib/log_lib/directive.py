"""
Directive parser — flag tokens plus an optional trailing level.

A directive string toggles bits in a flag set and optionally sets a
scalar level, against a baseline (flags, level) pair:

    +repeat-time        relative: set repeat, clear time
    level+debug         absolute: flags reset to {level}, level = debug
    debug               level only, flags untouched
    -8                  numeric level only

Grammar, left to right:
    - '+' sets a keyword's bit, '-' clears it.
    - A bare keyword is only accepted as the very first token. It
      switches to ABSOLUTE mode: the flag baseline is reset to zero and
      the keyword is then applied as a set.
    - Flag scanning stops at the first text that is not a token.
    - Whatever remains is the level text. A leading '+' before it is
      consumed. If no flag token was consumed, the whole string is the
      level text and the flag baseline is kept.
    - Level text is matched against the symbolic name table first
      (exact, case-sensitive), then parsed as a base-10 integer.

The keyword table and the level-name table are the only per-use-site
inputs; log levels and CPU flags both parse through here.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .errors import InvalidDirective

RELATIVE = 'relative'
ABSOLUTE = 'absolute'

_INTEGER_RE = re.compile(r'[+-]?[0-9]+')


@dataclass
class Directive:
    """Result of parsing one directive string."""
    flags: int
    mode: str = RELATIVE
    level: Optional[int] = None
    tokens_consumed: int = 0


class DirectiveParser:
    """Small state machine over a single directive string.

    Args:
        keywords: (name, bit) pairs recognised as flag tokens
        level_names: (name, level) pairs, matched in order
        allow_level: When False any level text is an error
    """

    def __init__(self, keywords: Iterable[Tuple[str, int]],
                 level_names: Sequence[Tuple[str, int]] = (),
                 allow_level: bool = True):
        # Longest first so a keyword never shadows a longer one
        self.keywords = sorted(keywords, key=lambda kw: len(kw[0]), reverse=True)
        self.level_names = tuple(level_names)
        self.allow_level = allow_level

    def _match_keyword(self, text: str, start: int) -> Optional[Tuple[str, int]]:
        for name, bit in self.keywords:
            if text.startswith(name, start):
                return name, bit
        return None

    def parse(self, text: str, flags: int) -> Directive:
        """Parse text against baseline flags.

        Raises:
            InvalidDirective: when the level text is neither a known
                name nor an integer, or a level is not allowed here
        """
        result = Directive(flags=flags)
        pos = 0

        while pos < len(text):
            sign = text[pos] if text[pos] in '+-' else None
            if sign is None and result.tokens_consumed:
                break
            start = pos + 1 if sign else pos
            match = self._match_keyword(text, start)
            if match is None:
                break
            name, bit = match
            if sign is None:
                result.mode = ABSOLUTE
                result.flags = 0
            if sign == '-':
                result.flags &= ~bit
            else:
                result.flags |= bit
            pos = start + len(name)
            result.tokens_consumed += 1

        if pos == len(text):
            return result

        if text[pos] == '+':
            level_pos = pos + 1
        elif not result.tokens_consumed:
            level_pos = 0
        else:
            level_pos = pos

        if not self.allow_level:
            raise InvalidDirective(text, pos, "unrecognized flag")

        result.level = self._resolve_level(text, level_pos)
        return result

    def _resolve_level(self, text: str, pos: int) -> int:
        level_text = text[pos:]
        for name, value in self.level_names:
            if name == level_text:
                return value
        if _INTEGER_RE.fullmatch(level_text):
            return int(level_text)
        raise InvalidDirective(text, pos, "unrecognized level")


def parse_directive(text: str, flags: int, level: int,
                    keywords: Iterable[Tuple[str, int]],
                    level_names: Sequence[Tuple[str, int]] = (),
                    allow_level: bool = True) -> Tuple[int, int]:
    """Apply a directive to a baseline (flags, level) pair.

    Returns the new (flags, level). The baseline is left for the caller
    to overwrite, so a failed parse never changes it.
    """
    parser = DirectiveParser(keywords, level_names, allow_level=allow_level)
    directive = parser.parse(text, flags)
    new_level = level if directive.level is None else directive.level
    return directive.flags, new_level
