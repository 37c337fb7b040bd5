"""
Tests for log_lib.report — report file activation and fan-out.

Tests file name templates, one-shot activation, severity gating between
console and report, threshold derivation, open failures, the report
header and the report environment specification.
"""

from datetime import datetime

import pytest

from avcaps.lib.log_lib import (
    InvalidDirective, OutputManager, ReportManager, ReportOpenFailed,
    ReportSink, expand_filename_template, get_report, init_report,
    parse_report_spec,
)
from avcaps.lib.log_lib.levels import DEBUG, ERROR, INFO, TRACE, VERBOSE, WARNING
from avcaps.lib.log_lib.report import quote_argument

NOW = datetime(2026, 10, 18, 14, 25, 1)


@pytest.fixture
def report(out):
    return ReportManager(out, program="avcaps", clock=lambda: NOW)


def read(path):
    with open(path, encoding="utf-8") as f:
        return f.read()


# =============================================================================
# File name templates
# =============================================================================

class TestFilenameTemplate:
    """expand_filename_template handles %p, %t and %%."""

    def test_default_template(self):
        assert expand_filename_template("%p-%t.log", "avcaps", NOW) == \
            "avcaps-20261018-142501.log"

    def test_literal_percent(self):
        assert expand_filename_template("100%%.log", "avcaps", NOW) == "100%.log"

    def test_unknown_pair_dropped(self):
        """Unknown %x pairs expand to nothing."""
        assert expand_filename_template("a%xb", "avcaps", NOW) == "ab"

    def test_trailing_percent_dropped(self):
        assert expand_filename_template("log%", "avcaps", NOW) == "log"

    def test_plain_text_unchanged(self):
        assert expand_filename_template("report.txt", "avcaps", NOW) == "report.txt"


# =============================================================================
# Activation
# =============================================================================

class TestActivation:
    """ReportManager.activate opens the file at most once."""

    def test_default_name_in_cwd(self, report, workdir):
        report.activate()
        assert report.opened is True
        assert report.path == "avcaps-20261018-142501.log"
        assert (workdir / "avcaps-20261018-142501.log").exists()

    def test_second_activation_is_noop(self, report, workdir):
        """Two activations with different templates create only the first file."""
        report.activate("first.log")
        report.activate("second.log")
        assert report.path == "first.log"
        assert [p.name for p in workdir.iterdir()] == ["first.log"]

    def test_second_activation_keeps_first_header(self, report, workdir, out):
        report.activate("first.log", level=ERROR)
        report.activate("second.log", level=TRACE)
        assert report.threshold == ERROR
        assert read(workdir / "first.log").count("started on") == 1

    def test_activation_does_not_raise(self, report, workdir, buf):
        """The header's "Log level" value does not clash with emit's arguments."""
        report.activate("r.log", level=INFO)
        assert "Log level: 32" in buf.getvalue()

    def test_failed_header_rolls_back(self, report, workdir, out):
        """An error after opening leaves the manager inactive and the sink unchanged."""
        sink = out.sink
        with pytest.raises(AttributeError):
            report.activate("r.log", argv=["avcaps", None])
        assert report.opened is False
        assert report.file is None
        assert out.sink == sink
        report.activate("again.log", argv=["avcaps"])
        assert report.opened is True
        assert "Command line:\navcaps\n" in read(workdir / "again.log")

    def test_header_lines(self, report, workdir):
        report.activate("r.log")
        text = read(workdir / "r.log")
        assert "avcaps started on 2026-10-18 at 14:25:01" in text
        assert 'Report written to "r.log"' in text
        assert f"Log level: {DEBUG}" in text

    def test_header_also_on_console(self, report, workdir, buf):
        report.activate("r.log")
        assert 'Report written to "r.log"' in buf.getvalue()

    def test_command_line_recorded(self, report, workdir):
        report.activate("r.log", argv=["avcaps", "-v", "debug", "two words"])
        text = read(workdir / "r.log")
        assert 'Command line:\navcaps -v debug "two words"\n' in text


# =============================================================================
# Gating
# =============================================================================

class TestGating:
    """Console and report thresholds are applied independently."""

    def test_info_to_console_only(self, report, workdir, out, buf):
        """With report level warning, info reaches the console but not the file."""
        report.activate("r.log", level=WARNING)
        out.info("console only")
        out.error("both places")
        text = read(workdir / "r.log")
        assert "console only" not in text
        assert "both places" in text
        assert "console only" in buf.getvalue()
        assert "both places" in buf.getvalue()

    def test_debug_to_report_only(self, report, workdir, out, buf):
        """The default report threshold captures debug lines the console hides."""
        report.activate("r.log")
        out.debug("report only")
        assert "report only" in read(workdir / "r.log")
        assert "report only" not in buf.getvalue()

    def test_trace_hidden_from_default_report(self, report, workdir, out):
        report.activate("r.log")
        out.emit(TRACE, "too chatty")
        assert "too chatty" not in read(workdir / "r.log")

    def test_lines_flushed_immediately(self, report, workdir, out):
        report.activate("r.log")
        out.error("flushed")
        assert "flushed" in read(workdir / "r.log")


# =============================================================================
# Threshold
# =============================================================================

class TestThreshold:
    """Explicit levels are fixed; derived ones follow the console."""

    def test_explicit_level(self, report, workdir):
        report.activate("r.log", level=ERROR)
        assert report.threshold == ERROR

    def test_derived_from_verbose_console(self, workdir, buf):
        out = OutputManager(level=TRACE, file=buf)
        report = ReportManager(out, program="avcaps", clock=lambda: NOW)
        report.activate("r.log")
        assert report.threshold == TRACE

    def test_derived_not_below_debug(self, report, workdir):
        assert report.threshold == DEBUG
        report.activate("r.log")
        assert report.threshold == DEBUG

    def test_follows_later_console_increase(self, report, workdir, out):
        report.activate("r.log")
        out.level = TRACE
        out.emit(TRACE, "now visible")
        assert "now visible" in read(workdir / "r.log")

    def test_explicit_level_ignores_console(self, report, workdir, out):
        report.activate("r.log", level=INFO)
        out.level = TRACE
        out.debug("stays out")
        assert "stays out" not in read(workdir / "r.log")


# =============================================================================
# Open failures
# =============================================================================

class TestOpenFailure:
    """A report that cannot be opened is logged and can be retried."""

    def test_raises_and_logs(self, report, tmp_path, buf):
        path = str(tmp_path / "missing" / "r.log")
        with pytest.raises(ReportOpenFailed) as exc:
            report.activate(path)
        assert exc.value.path == path
        assert "Failed to open report" in buf.getvalue()
        assert report.opened is False

    def test_is_oserror(self):
        assert issubclass(ReportOpenFailed, OSError)

    def test_retry_after_failure(self, report, tmp_path):
        with pytest.raises(ReportOpenFailed):
            report.activate(str(tmp_path / "missing" / "r.log"))
        good = tmp_path / "r.log"
        report.activate(str(good))
        assert report.opened is True
        assert good.exists()

    def test_sink_untouched_on_failure(self, report, tmp_path, out):
        sink = out.sink
        with pytest.raises(ReportOpenFailed):
            report.activate(str(tmp_path / "missing" / "r.log"))
        assert out.sink == sink


# =============================================================================
# ReportSink
# =============================================================================

class TestReportSink:
    """The fan-out sink always forwards."""

    def test_forwards_everything(self, tmp_path):
        seen = []
        with open(tmp_path / "r.log", "w", encoding="utf-8") as f:
            sink = ReportSink(lambda level, line: seen.append(line), f, WARNING)
            sink(DEBUG, "hidden from file")
            sink(ERROR, "kept")
        assert seen == ["hidden from file", "kept"]
        assert read(tmp_path / "r.log") == "kept\n"

    def test_effective_threshold_follows_output(self, tmp_path, buf):
        out = OutputManager(level=VERBOSE, file=buf)
        with open(tmp_path / "r.log", "w", encoding="utf-8") as f:
            sink = ReportSink(out.write_console, f, DEBUG, output=out)
            assert sink.effective_threshold == DEBUG
            out.level = TRACE
            assert sink.effective_threshold == TRACE


# =============================================================================
# Command-line quoting
# =============================================================================

class TestQuoteArgument:
    """quote_argument leaves safe arguments bare and escapes the rest."""

    def test_safe_argument(self):
        assert quote_argument("-v") == "-v"
        assert quote_argument("file.txt") == "file.txt"

    def test_space_quoted(self):
        assert quote_argument("two words") == '"two words"'

    def test_shell_specials_escaped(self):
        assert quote_argument('say "hi"') == '"say \\"hi\\""'
        assert quote_argument("$HOME") == '"\\$HOME"'

    def test_non_ascii_as_hex(self):
        assert quote_argument("é") == '"\\xc3\\xa9"'

    def test_empty_argument(self):
        """An empty argument has no unsafe bytes and is written bare."""
        assert quote_argument("") == ""


# =============================================================================
# Report specification
# =============================================================================

class TestParseReportSpec:
    """parse_report_spec reads "file=...:level=..." values."""

    def test_file_and_level(self, out):
        assert parse_report_spec("file=%p.log:level=32", out) == ("%p.log", 32)

    def test_level_only(self, out):
        assert parse_report_spec("level=-8", out) == (None, -8)

    def test_bad_level(self, out):
        with pytest.raises(InvalidDirective):
            parse_report_spec("level=loud", out)

    def test_unknown_key_logged(self, out, buf):
        assert parse_report_spec("color=red:level=16", out) == (None, 16)
        assert "Unknown key 'color'" in buf.getvalue()

    def test_stops_at_entry_without_equals(self, out, buf):
        assert parse_report_spec("file=a.log:junk:level=8", out) == ("a.log", None)
        assert "missing '='" in buf.getvalue()

    def test_escaped_separator(self, out):
        assert parse_report_spec("file=a\\:b.log", out) == ("a:b.log", None)

    def test_quoted_value(self, out):
        assert parse_report_spec("file='x:y.log'", out) == ("x:y.log", None)

    def test_empty(self, out):
        assert parse_report_spec("", out) == (None, None)


# =============================================================================
# Singleton
# =============================================================================

class TestReportSingleton:
    """init_report / get_report."""

    def test_init_then_get(self, out):
        report = init_report(out, program="mytool")
        assert get_report() is report
        assert report.program == "mytool"

    def test_default_program_name(self):
        from avcaps.lib.log_lib import report as _report_mod
        _report_mod._report = None
        assert get_report().program == "avcaps"
