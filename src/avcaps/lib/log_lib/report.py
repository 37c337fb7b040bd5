"""
Diagnostic report files.

A report is a plain-text copy of the diagnostic log written next to the
normal console output. It is opened lazily, at most once per process,
and never closed explicitly; the file lives until the process exits.

    report = ReportManager(output)
    report.activate()                       # avcaps-20261018-142501.log
    report.activate("other.log")            # no-op, already open

File name templates:
    %p      program name
    %t      local time as YYYYMMDD-HHMMSS
    %%      a literal percent sign

The report threshold is independent of the console threshold. Without
an explicit level it is the more verbose of DEBUG and the console level
at activation time, and it follows later console level increases.
"""

import re
import threading
from datetime import datetime
from typing import Callable, List, Optional, TextIO, Tuple

from . import levels
from .errors import InvalidDirective, ReportOpenFailed
from .manager import OutputManager, Sink, get_output

DEFAULT_TEMPLATE = "%p-%t.log"
DEFAULT_REPORT_LEVEL = levels.DEBUG

_INTEGER_RE = re.compile(r'[+-]?[0-9]+')


def expand_filename_template(template: str, program: str,
                             now: datetime) -> str:
    """Expand %p, %t and %% in a report file name template.

    Unknown %x pairs expand to nothing, as does a trailing lone %.
    """
    out = []
    chars = iter(template)
    for c in chars:
        if c != '%':
            out.append(c)
            continue
        c = next(chars, None)
        if c is None:
            break
        if c == 'p':
            out.append(program)
        elif c == 't':
            out.append(now.strftime('%Y%m%d-%H%M%S'))
        elif c == '%':
            out.append('%')
    return ''.join(out)


def quote_argument(arg: str) -> str:
    """Quote a command-line argument for the report's "Command line:" block.

    Arguments made only of shell-safe characters are written as-is.
    Anything else is double-quoted with \\, ", $ and ` escaped and
    non-printable bytes written as \\xNN.
    """
    data = arg.encode('utf-8', errors='surrogateescape')
    if all(0x2B <= b <= 0x3A or 0x40 <= b <= 0x5A or b == 0x5F
           or 0x61 <= b <= 0x7A for b in data):
        return arg
    out = ['"']
    for b in data:
        if chr(b) in '\\"$`':
            out.append('\\' + chr(b))
        elif b < 0x20 or b > 0x7E:
            out.append(f"\\x{b:02x}")
        else:
            out.append(chr(b))
    out.append('"')
    return ''.join(out)


def _split_report_spec(text: str) -> List[Tuple[str, Optional[str]]]:
    """Split "key=value:key=value" honoring backslash escapes and 'quotes'."""
    pairs = []
    current = []
    key = None
    quoted = False
    chars = iter(text)
    for c in chars:
        if quoted:
            if c == "'":
                quoted = False
            else:
                current.append(c)
        elif c == "'":
            quoted = True
        elif c == '\\':
            escaped = next(chars, None)
            if escaped is not None:
                current.append(escaped)
        elif c == '=' and key is None:
            key = ''.join(current)
            current = []
        elif c == ':':
            pairs.append((key, ''.join(current)) if key is not None
                         else (''.join(current), None))
            key = None
            current = []
        else:
            current.append(c)
    if current or key is not None:
        pairs.append((key, ''.join(current)) if key is not None
                     else (''.join(current), None))
    return pairs


def parse_report_spec(text: str,
                      output: OutputManager = None) -> Tuple[Optional[str], Optional[int]]:
    """Parse a report environment value like "file=%p.log:level=32".

    Recognized keys are ``file`` (a name template) and ``level`` (an
    integer severity). Unknown keys are reported and ignored; parsing
    stops at the first entry without '='.

    Returns:
        (template, level), either of which may be None

    Raises:
        InvalidDirective: if the level value is not an integer
    """
    output = output or get_output()
    template = None
    level = None
    for count, (key, value) in enumerate(_split_report_spec(text or '')):
        if value is None:
            if count:
                output.error("Failed to parse report specification: "
                             "missing '=' after \"{key}\"", key=key)
            break
        if key == 'file':
            template = value
        elif key == 'level':
            if not _INTEGER_RE.fullmatch(value):
                raise InvalidDirective(text, text.find(value),
                                       "invalid report level")
            level = int(value)
        else:
            output.error("Unknown key '{key}' in report specification", key=key)
    return template, level


class ReportSink:
    """Fan-out sink: forward every line, copy severe enough ones to a file.

    Each copied line is flushed immediately so the report survives an
    abrupt exit.
    """

    def __init__(self, forward: Sink, file: TextIO, threshold: int,
                 output: OutputManager = None):
        self.forward = forward
        self.file = file
        self.threshold = threshold
        # When set, the threshold follows later console level increases
        self.output = output

    @property
    def effective_threshold(self) -> int:
        if self.output is None:
            return self.threshold
        return max(self.threshold, self.output.level)

    def __call__(self, level: int, line: str) -> None:
        self.forward(level, line)
        if level <= self.effective_threshold:
            self.file.write(line + "\n")
            self.file.flush()


class ReportManager:
    """One-shot owner of the process's report file.

    Activation is guarded so a second call, from any thread, is a no-op
    once the report is open. A failed open leaves the manager inactive,
    so activation can be retried.

    Attributes:
        opened: True once the report file has been created
        path: Expanded report path, None until opened
        file: The open report file, None until opened
        threshold: Severity threshold resolved at activation
    """

    def __init__(self, output: OutputManager = None, program: str = None,
                 clock: Callable[[], datetime] = datetime.now):
        if program is None:
            from avcaps._version import __app_name__
            program = __app_name__
        self.output = output
        self.program = program
        self.clock = clock
        self.opened = False
        self.path: Optional[str] = None
        self.file: Optional[TextIO] = None
        self.threshold = DEFAULT_REPORT_LEVEL
        self._lock = threading.Lock()

    def activate(self, template: str = None, level: int = None,
                 argv: List[str] = None) -> None:
        """Open the report file and start copying diagnostics into it.

        Args:
            template: File name template (default "%p-%t.log")
            level: Explicit report threshold; None derives it from the
                console level
            argv: Command line to record at the top of the report

        Raises:
            ReportOpenFailed: if the file cannot be opened
        """
        with self._lock:
            if self.opened:
                return
            output = self.output or get_output()
            now = self.clock()
            path = expand_filename_template(
                template or DEFAULT_TEMPLATE, self.program, now)

            if level is not None:
                threshold = level
            else:
                threshold = max(DEFAULT_REPORT_LEVEL, output.level)

            try:
                file = open(path, "w", encoding="utf-8")
            except OSError as e:
                output.error("Failed to open report \"{path}\": {reason}",
                             path=path, reason=e.strerror or e)
                raise ReportOpenFailed(path, e) from e

            previous_sink = output.sink
            output.sink = ReportSink(previous_sink, file, threshold,
                                     output=None if level is not None else output)
            try:
                output.info("{prog} started on {date} at {time}\n"
                            "Report written to \"{path}\"\n"
                            "Log level: {threshold}",
                            prog=self.program,
                            date=now.strftime('%Y-%m-%d'),
                            time=now.strftime('%H:%M:%S'),
                            path=path, threshold=threshold)

                if argv is not None:
                    command_line = ' '.join(quote_argument(a) for a in argv)
                    file.write("Command line:\n" + command_line + "\n")
                    file.flush()
            except Exception:
                # Leave the manager inactive
                output.sink = previous_sink
                file.close()
                raise

            self.file = file
            self.path = path
            self.threshold = threshold
            self.opened = True


# =============================================================================
# Module-level singleton
# =============================================================================

_report: Optional[ReportManager] = None


def init_report(output: OutputManager = None, program: str = None) -> ReportManager:
    """Initialize the module-level ReportManager singleton."""
    global _report
    _report = ReportManager(output=output, program=program)
    return _report


def get_report() -> ReportManager:
    """Get the module-level ReportManager, creating a default if needed."""
    global _report
    if _report is None:
        _report = ReportManager()
    return _report
