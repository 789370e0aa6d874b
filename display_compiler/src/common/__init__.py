"""Common utilities shared across export stages."""

from .diagnostics import ExportDiagnostics, DiagnosticSeverity, ExportError
from .constants import *

__all__ = [
    "ExportDiagnostics",
    "DiagnosticSeverity",
    "ExportError",
    # Configuration
    "ExportConfig",
    "ResourceLimits",
    "DEFAULT_CONFIG",
    # Constants
    "MAX_INSTRUCTIONS",
    "MAX_GRAPHICS_BUFFER",
    "DISPLAY_TYPES",
    "PROCESSOR_TYPES",
    "DISPLAY_BACKGROUND",
    "LINK_PREFIX",
]
