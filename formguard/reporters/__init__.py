"""Reporters - Diagnostic capture for form runs."""

from formguard.reporters.diagnostics import DiagnosticEvent, DiagnosticsRecorder

__all__ = ["DiagnosticEvent", "DiagnosticsRecorder"]
