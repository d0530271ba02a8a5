"""GitHub Actions workflow-command formatting."""

from __future__ import annotations


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def error_command(message: str) -> str:
    return f"::error::{escape_data(message)}"

