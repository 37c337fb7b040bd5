"""
log_lib — severity-gated diagnostics with directive parsing and reports.

A reusable diagnostics library providing:
- Integer severity levels (level <= threshold is shown)
- Log flags for line decoration and repeated-line collapse
- A directive parser for "+flag-flag+level" style option strings
- One-shot report files fed by a fan-out sink
- Function tracing decorator

Public API:
    OutputManager      — central coordinator
    init_output        — singleton initialization
    get_output         — access singleton
    parse_directive    — apply a directive to a (flags, level) pair
    DirectiveParser    — the directive state machine
    ReportManager      — one-shot report file owner
    init_report        — report singleton initialization
    get_report         — access report singleton
    InvalidDirective   — directive parse error
    ReportOpenFailed   — report file could not be opened
    trace              — function tracing decorator
"""

from .errors import InvalidDirective, ReportOpenFailed
from .directive import Directive, DirectiveParser, parse_directive
from .manager import OutputManager, init_output, get_output
from .report import (
    ReportManager, ReportSink, init_report, get_report,
    expand_filename_template, parse_report_spec,
)
from .trace import trace

__all__ = [
    'InvalidDirective', 'ReportOpenFailed',
    'Directive', 'DirectiveParser', 'parse_directive',
    'OutputManager', 'init_output', 'get_output',
    'ReportManager', 'ReportSink', 'init_report', 'get_report',
    'expand_filename_template', 'parse_report_spec',
    'trace',
]
