"""Diagnostic fragment variants and their loaders."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from .errors import ConfigurationError


@dataclass(frozen=True)
class PlainFragment:
    pattern: str


@dataclass(frozen=True)
class OptionalGroup:
    patterns: tuple[str, ...]


Fragment = Union[PlainFragment, OptionalGroup]


def parse_fragments(raw: Any) -> tuple[Fragment, ...]:
    """Convert a list of ``str`` / ``list[str]`` items into fragment variants.

    A string becomes a plain fragment and a list of strings becomes an
    optional group. Anything else raises ``ConfigurationError``.
    """
    if not isinstance(raw, (list, tuple)):
        raise ConfigurationError("debug fragments must be a list")
    out: list[Fragment] = []
    for index, item in enumerate(raw):
        if isinstance(item, str):
            out.append(PlainFragment(pattern=item))
            continue
        if isinstance(item, (list, tuple)):
            if not item:
                raise ConfigurationError(f"debug fragment group #{index} is empty")
            if not all(isinstance(piece, str) for piece in item):
                raise ConfigurationError(f"debug fragment group #{index} must contain only strings")
            out.append(OptionalGroup(patterns=tuple(item)))
            continue
        raise ConfigurationError(
            f"debug fragment #{index} must be a string or a list of strings, got {type(item).__name__}"
        )
    return tuple(out)


def _load_structured_payload(raw_text: str) -> Any:
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            import yaml  # type: ignore
        except Exception as err:  # noqa: BLE001
            raise ConfigurationError("fragment file must be JSON or YAML (requires PyYAML)") from err
        try:
            return yaml.safe_load(raw_text)
        except yaml.YAMLError as err:
            raise ConfigurationError(f"fragment file is neither valid JSON nor YAML: {err}") from err


def fragments_from_payload(payload: Any) -> tuple[Fragment, ...]:
    if isinstance(payload, dict):
        if "fragments" not in payload:
            raise ConfigurationError("fragment config must define fragments[]")
        payload = payload["fragments"]
    return parse_fragments(payload)


def load_fragments(path: Path) -> tuple[Fragment, ...]:
    try:
        raw = path.expanduser().read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigurationError(f"cannot read fragment file {path}: {err}") from err
    return fragments_from_payload(_load_structured_payload(raw))


def fragments_from_json(text: str) -> tuple[Fragment, ...] | None:
    """Parse the ``debugRegex`` Action input. Blank input means no diagnostics."""
    if not text.strip():
        return None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as err:
        raise ConfigurationError(f"DEBUGREGEX is not valid JSON: {err}") from err
    return parse_fragments(payload)
