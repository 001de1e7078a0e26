"""
Unit tests for FailureReporter.
"""

import logging

from backend.src.services.failure_reporter import FailureReporter
from backend.src.services.multicast_dispatcher import DeliveryResult


class TestFailureReporter:
    """Tests for FailureReporter.report."""

    def test_partial_failure_logged_per_token(self, caplog):
        """One failed token out of three: one error line naming it."""
        results = [
            DeliveryResult.delivered("m1"),
            DeliveryResult.failed("Requested entity was not found.", "NOT_FOUND", unregistered=True),
            DeliveryResult.delivered("m3"),
        ]

        with caplog.at_level(logging.INFO, logger="dailypulse.push"):
            summary = FailureReporter().report(results, ["t1", "t2", "t3"])

        assert summary.success_count == 2
        assert summary.failure_count == 1
        assert summary.failed_tokens == ["t2"]
        assert summary.unregistered_tokens == ["t2"]
        assert summary.delivered_tokens == ["t1", "t3"]

        error_lines = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
        assert error_lines == ["Token failed: t2: Requested entity was not found."]
        assert "2 successful, 1 failed" in caplog.text

    def test_two_of_five_failed(self, caplog):
        """Five tokens, two failures: exactly the two failing tokens are logged."""
        tokens = ["t1", "t2", "t3", "t4", "t5"]
        results = [
            DeliveryResult.delivered("m1"),
            DeliveryResult.failed("Requested entity was not found.", "NOT_FOUND", unregistered=True),
            DeliveryResult.delivered("m3"),
            DeliveryResult.delivered("m4"),
            DeliveryResult.failed("Internal error", "INTERNAL"),
        ]

        with caplog.at_level(logging.INFO, logger="dailypulse.push"):
            summary = FailureReporter().report(results, tokens)

        assert summary.success_count == 3
        assert summary.failure_count == 2
        assert summary.failed_tokens == ["t2", "t5"]
        assert summary.unregistered_tokens == ["t2"]
        assert summary.delivered_tokens == ["t1", "t3", "t4"]

        error_lines = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
        assert error_lines == [
            "Token failed: t2: Requested entity was not found.",
            "Token failed: t5: Internal error",
        ]
        assert "3 successful, 2 failed" in caplog.text

    def test_all_successful_logs_no_errors(self, caplog):
        results = [DeliveryResult.delivered("m1"), DeliveryResult.delivered("m2")]

        with caplog.at_level(logging.INFO, logger="dailypulse.push"):
            summary = FailureReporter().report(results, ["t1", "t2"])

        assert summary.failure_count == 0
        assert summary.failed == []
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_failure_without_unregistered_flag(self):
        results = [DeliveryResult.failed("quota exceeded", "QUOTA_EXCEEDED")]

        summary = FailureReporter().report(results, ["t1"])

        assert summary.failed_tokens == ["t1"]
        assert summary.unregistered_tokens == []
        assert summary.failed[0].error_code == "QUOTA_EXCEEDED"

    def test_empty_results(self):
        summary = FailureReporter().report([], [])

        assert summary.success_count == 0
        assert summary.failure_count == 0
