"""
Tests for common/diagnostics.py - Diagnostic collection and reporting.
"""

import logging

import pytest

from display_compiler.src.common.diagnostics import (
    DiagnosticSeverity,
    ExportDiagnostics,
    ExportError,
)


class TestExportDiagnostics:
    """Tests for ExportDiagnostics class."""

    def test_diagnostics_initialization(self):
        """Test ExportDiagnostics initializes with empty diagnostics."""
        diag = ExportDiagnostics()
        assert not diag.has_errors()
        assert diag.error_count() == 0
        assert diag.warning_count() == 0

    def test_error_collection(self):
        """Test adding and counting errors."""
        diag = ExportDiagnostics()
        diag.error("Test error", stage="test")
        assert diag.has_errors()
        assert diag.error_count() == 1

    def test_warning_collection(self):
        """Test warnings are counted but are not errors."""
        diag = ExportDiagnostics()
        diag.warning("Test warning", stage="test")
        assert not diag.has_errors()
        assert diag.warning_count() == 1

    def test_info_filtered_by_default_level(self):
        """Test info messages are dropped at the default warning level."""
        diag = ExportDiagnostics()
        diag.info("Progress", stage="test")
        assert diag.diagnostics == []

    def test_info_recorded_at_info_level(self):
        """Test info messages are recorded when log_level is info."""
        diag = ExportDiagnostics(log_level="info")
        diag.info("Progress", stage="scaling")
        messages = diag.get_messages(min_severity=DiagnosticSeverity.INFO)
        assert messages == ["INFO [scaling]: Progress"]

    def test_tile_index_in_message(self):
        """Test tile-scoped messages show a 1-based tile number."""
        diag = ExportDiagnostics()
        diag.warning("Odd tile", stage="codegen", tile_index=2)
        assert diag.get_messages() == ["WARNING [codegen:tile 3]: Odd tile"]

    def test_default_stage_used(self):
        """Test messages without a stage use default_stage."""
        diag = ExportDiagnostics()
        diag.default_stage = "emission"
        diag.warning("Something")
        assert diag.diagnostics[0].stage == "emission"

    def test_raise_errors_mode(self):
        """Test that raise_errors=True turns errors into ExportError."""
        diag = ExportDiagnostics(raise_errors=True)
        with pytest.raises(ExportError) as exc_info:
            diag.error("This should raise", stage="test")
        assert "This should raise" in str(exc_info.value)
        assert exc_info.value.stage == "test"

    def test_get_messages_filters_by_severity(self):
        """Test that get_messages filters out lower severity messages."""
        diag = ExportDiagnostics(log_level="debug")
        diag.info("Info message", stage="test")
        diag.warning("Warning message", stage="test")
        diag.error("Error message", stage="test")

        messages = diag.get_messages(min_severity=DiagnosticSeverity.WARNING)
        assert len(messages) == 2
        assert not any("Info message" in m for m in messages)

    def test_format_for_user_summary(self):
        """Test the user summary counts errors and warnings."""
        diag = ExportDiagnostics()
        assert diag.format_for_user() == "No diagnostics."
        diag.warning("w")
        diag.error("e")
        assert "1 error(s), 1 warning(s)" in diag.format_for_user()

    def test_merge(self):
        """Test merging another collector."""
        first = ExportDiagnostics()
        second = ExportDiagnostics()
        second.error("boom")
        first.merge(second)
        assert first.has_errors()
        assert len(first.diagnostics) == 1

    def test_messages_forwarded_to_logging(self, caplog):
        """Test diagnostics are forwarded to the display_compiler logger."""
        diag = ExportDiagnostics()
        with caplog.at_level(logging.WARNING, logger="display_compiler"):
            diag.warning("Logged warning", stage="layout")
        assert "Logged warning" in caplog.text

    def test_invalid_log_level(self):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValueError):
            ExportDiagnostics(log_level="verbose")
