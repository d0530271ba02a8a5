"""Regex commit-message gate with fragment-level match diagnostics."""
