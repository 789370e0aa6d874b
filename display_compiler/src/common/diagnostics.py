import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

"""Unified diagnostic collection for the whole export pipeline."""

logger = logging.getLogger("display_compiler")


class DiagnosticSeverity(Enum):
    """Severity levels for export diagnostics."""

    DEBUG = "debug"  # Internal pipeline information
    INFO = "info"  # Progress labels and other user-facing notes
    WARNING = "warning"  # Issues that don't prevent the export
    ERROR = "error"  # Issues that abort the export


_SEVERITY_ORDER = [
    DiagnosticSeverity.DEBUG,
    DiagnosticSeverity.INFO,
    DiagnosticSeverity.WARNING,
    DiagnosticSeverity.ERROR,
]

_LOGGING_LEVELS = {
    DiagnosticSeverity.DEBUG: logging.DEBUG,
    DiagnosticSeverity.INFO: logging.INFO,
    DiagnosticSeverity.WARNING: logging.WARNING,
    DiagnosticSeverity.ERROR: logging.ERROR,
}


class ExportError(Exception):
    """Raised for pipeline errors when diagnostics run with ``raise_errors``."""

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        self.message = message
        self.stage = stage
        prefix = f"[{stage}] " if stage else ""
        super().__init__(f"{prefix}{message}")


@dataclass
class Diagnostic:
    """A single diagnostic message with context."""

    severity: DiagnosticSeverity
    message: str
    stage: str  # grid, scaling, extraction, codegen, layout, emission
    tile_index: Optional[int] = None


class ExportDiagnostics:
    """Central diagnostic collection for one export run.

    Every recorded message is also forwarded to the ``display_compiler``
    logger, so ``logging`` configuration decides what reaches the terminal.

    Usage:
        diagnostics = ExportDiagnostics(log_level="info")
        diagnostics.info("Scaling to 160x160", stage="scaling")
        if diagnostics.has_errors():
            print(diagnostics.format_for_user())
    """

    def __init__(self, log_level: str = "warning", raise_errors: bool = False):
        self.diagnostics: List[Diagnostic] = []
        self.min_severity = DiagnosticSeverity(log_level.lower())
        self.raise_errors = raise_errors
        self._error_count = 0
        self._warning_count = 0
        self.default_stage = "unknown"

    def debug(
        self, message: str, stage: str | None = None, tile_index: Optional[int] = None
    ) -> None:
        self._add(DiagnosticSeverity.DEBUG, message, stage, tile_index)

    def info(
        self, message: str, stage: str | None = None, tile_index: Optional[int] = None
    ) -> None:
        """Add an informational message (progress labels land here)."""
        self._add(DiagnosticSeverity.INFO, message, stage, tile_index)

    def warning(
        self, message: str, stage: str | None = None, tile_index: Optional[int] = None
    ) -> None:
        """Add a warning (always recorded, doesn't stop the export)."""
        self._add(DiagnosticSeverity.WARNING, message, stage, tile_index)
        self._warning_count += 1

    def error(
        self, message: str, stage: str | None = None, tile_index: Optional[int] = None
    ) -> None:
        """Add an error (always recorded, aborts the export)."""
        self._add(DiagnosticSeverity.ERROR, message, stage, tile_index)
        self._error_count += 1
        if self.raise_errors:
            raise ExportError(message, stage or self.default_stage)

    def _add(
        self,
        severity: DiagnosticSeverity,
        message: str,
        stage: str | None,
        tile_index: Optional[int],
    ) -> None:
        """Internal method to add a diagnostic."""
        diag = Diagnostic(
            severity=severity,
            message=message,
            stage=stage or self.default_stage,
            tile_index=tile_index,
        )
        logger.log(_LOGGING_LEVELS[severity], self._format_diagnostic(diag))

        if _SEVERITY_ORDER.index(severity) < _SEVERITY_ORDER.index(self.min_severity):
            return
        self.diagnostics.append(diag)

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return self._error_count > 0

    def error_count(self) -> int:
        return self._error_count

    def warning_count(self) -> int:
        return self._warning_count

    def get_messages(
        self, min_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    ) -> List[str]:
        """Get formatted messages at or above the specified severity level."""
        threshold = _SEVERITY_ORDER.index(min_severity)
        return [
            self._format_diagnostic(diag)
            for diag in self.diagnostics
            if _SEVERITY_ORDER.index(diag.severity) >= threshold
        ]

    def _format_diagnostic(self, diag: Diagnostic) -> str:
        """Format a single diagnostic for display."""
        # Format: SEVERITY [stage:tile N]: message
        location = diag.stage
        if diag.tile_index is not None:
            location += f":tile {diag.tile_index + 1}"
        return f"{diag.severity.value.upper()} [{location}]: {diag.message}"

    def format_for_user(self) -> str:
        """Format all diagnostics for user-friendly output."""
        if not self.diagnostics:
            return "No diagnostics."

        messages = self.get_messages(self.min_severity)
        summary = f"\nExport summary: {self._error_count} error(s), {self._warning_count} warning(s)"
        return "\n".join(messages) + summary

    def merge(self, other: "ExportDiagnostics") -> None:
        """Merge diagnostics from another collector."""
        self.diagnostics.extend(other.diagnostics)
        self._error_count += other._error_count
        self._warning_count += other._warning_count
