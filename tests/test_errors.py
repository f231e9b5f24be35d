"""Tests for Result and ErrorReport."""

from loguru import logger

from tmux_preview.errors import Error, ErrorReport, ErrorType, Result


def failure(error_type=ErrorType.COMMAND_FAILED):
    return Result.err(Error(error_type=error_type, message="it broke", context={"target": "=work"}))


class TestResult:
    def test_ok(self):
        result = Result.ok([1, 2])
        assert result.is_ok()
        assert not result.is_err()
        assert result.value_or([]) == [1, 2]

    def test_err(self):
        result = failure()
        assert result.is_err()
        assert result.value is None
        assert result.value_or([]) == []

    def test_empty_value_is_still_ok(self):
        assert Result.ok("").value_or("fallback") == ""


class TestErrorReport:
    def test_success_collects_nothing(self):
        report = ErrorReport()
        assert report.collect_result(Result.ok(1))
        assert report.errors == []
        assert report.warnings == []

    def test_failure_defaults_to_warning(self):
        report = ErrorReport()
        assert not report.collect_result(failure(ErrorType.PANE_VANISHED))
        assert [w.error_type for w in report.warnings] == [ErrorType.PANE_VANISHED]
        assert not report.has_errors()

    def test_failure_as_error(self):
        report = ErrorReport()
        report.collect_result(failure(), as_warning=False)
        assert report.has_errors()

    def test_messages_with_braces_are_logged_verbatim(self):
        records = []
        logger.add(lambda m: records.append(m.record), level="DEBUG")
        report = ErrorReport()
        error = Error(error_type=ErrorType.COMMAND_FAILED, message="unknown option {x}",
                      context={"session": "a{b}"})
        report.add_warning(error)
        report.add_error(error)
        assert [r["message"] for r in records] == ["unknown option {x}"] * 2
        assert records[0]["extra"]["session"] == "a{b}"
        assert records[1]["extra"]["status"] == "error"

    def test_summary_logs_without_sinks(self):
        report = ErrorReport()
        report.collect_result(failure())
        report.log_summary("trace")
