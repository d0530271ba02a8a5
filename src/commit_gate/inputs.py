"""Build a check request from GitHub Actions inputs and the triggering event."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping
from urllib import error as urllib_error
from urllib import request as urllib_request

from .checker import CheckRequest
from .errors import ConfigurationError, GitHubApiError
from .fragments import Fragment, fragments_from_json


DEFAULT_API_URL = "https://api.github.com"
PULL_REQUEST_EVENTS = {"pull_request", "pull_request_target"}
PAGE_SIZE = 100
REQUEST_TIMEOUT_SEC = 30

CommitFetcher = Callable[[str, int], list[str]]


@dataclass(frozen=True)
class ActionInputs:
    pattern: str
    flags: str
    error: str
    exclude_title: bool = False
    exclude_description: bool = False
    check_all_commit_messages: bool = False
    access_token: str = ""
    debug_fragments: tuple[Fragment, ...] | None = None


def get_input(env: Mapping[str, str], name: str) -> str:
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    return env.get(key, "").strip()


def get_boolean_input(env: Mapping[str, str], name: str) -> bool:
    raw = get_input(env, name)
    if not raw:
        return False
    lowered = raw.lower()
    if lowered in {"true", "yes", "1"}:
        return True
    if lowered in {"false", "no", "0"}:
        return False
    raise ConfigurationError(f'Input "{name}" must be a boolean, got "{raw}".')


def read_inputs(env: Mapping[str, str]) -> ActionInputs:
    return ActionInputs(
        pattern=get_input(env, "pattern"),
        flags=get_input(env, "flags"),
        error=get_input(env, "error"),
        exclude_title=get_boolean_input(env, "excludeTitle"),
        exclude_description=get_boolean_input(env, "excludeDescription"),
        check_all_commit_messages=get_boolean_input(env, "checkAllCommitMessages"),
        access_token=get_input(env, "accessToken"),
        debug_fragments=fragments_from_json(get_input(env, "debugRegex")),
    )


def load_event(env: Mapping[str, str]) -> tuple[str, dict[str, Any]]:
    event_name = env.get("GITHUB_EVENT_NAME", "").strip()
    if not event_name:
        raise ConfigurationError("GITHUB_EVENT_NAME is not set.")
    event_path = env.get("GITHUB_EVENT_PATH", "").strip()
    if not event_path:
        raise ConfigurationError("GITHUB_EVENT_PATH is not set.")
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as err:
        raise ConfigurationError(f"cannot read event payload {event_path}: {err}") from err
    if not isinstance(payload, dict):
        raise ConfigurationError("event payload root must be an object")
    return event_name, payload


def pull_request_message(pull_request: Mapping[str, Any], inputs: ActionInputs) -> str:
    title = str(pull_request.get("title") or "")
    body = str(pull_request.get("body") or "")
    message = "" if inputs.exclude_title else title
    if not inputs.exclude_description and body:
        message = f"{message}\n\n{body}" if message else body
    return message


def collect_messages(
    event_name: str,
    payload: Mapping[str, Any],
    inputs: ActionInputs,
    fetch_commits: CommitFetcher | None = None,
) -> list[str]:
    if event_name in PULL_REQUEST_EVENTS:
        pull_request = payload.get("pull_request")
        if not isinstance(pull_request, dict):
            raise ConfigurationError("pull_request event payload lacks pull_request data.")
        if inputs.check_all_commit_messages:
            if fetch_commits is None:
                raise ConfigurationError("checkAllCommitMessages requires a commit fetcher.")
            repo = payload.get("repository")
            full_name = str(repo.get("full_name", "")).strip() if isinstance(repo, dict) else ""
            number = pull_request.get("number")
            if not full_name or not isinstance(number, int):
                raise ConfigurationError("pull_request event payload lacks repository or number.")
            return fetch_commits(full_name, number)
        message = pull_request_message(pull_request, inputs)
        return [message] if message else []

    if event_name == "push":
        commits = payload.get("commits", [])
        if not isinstance(commits, list):
            raise ConfigurationError("push event payload commits must be a list.")
        return [str(c.get("message", "")) for c in commits if isinstance(c, dict) and c.get("message")]

    raise ConfigurationError(f'Event "{event_name}" is not supported.')


def fetch_pull_request_commits(
    *,
    api_url: str,
    repository: str,
    number: int,
    token: str,
    timeout_sec: int = REQUEST_TIMEOUT_SEC,
) -> list[str]:
    """List the commit messages of a pull request, following pagination."""
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": "commit-message-gate",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    messages: list[str] = []
    page = 1
    while True:
        url = f"{api_url.rstrip('/')}/repos/{repository}/pulls/{number}/commits?per_page={PAGE_SIZE}&page={page}"
        req = urllib_request.Request(url, headers=headers, method="GET")
        try:
            with urllib_request.urlopen(req, timeout=timeout_sec) as resp:  # nosec B310
                raw = resp.read().decode("utf-8", errors="replace")
        except (urllib_error.URLError, TimeoutError) as err:
            raise GitHubApiError(f"cannot list commits of {repository}#{number}: {err}") from err
        try:
            rows = json.loads(raw)
        except json.JSONDecodeError as err:
            raise GitHubApiError(f"invalid JSON listing commits of {repository}#{number}") from err
        if not isinstance(rows, list):
            raise GitHubApiError(f"unexpected response listing commits of {repository}#{number}")
        for row in rows:
            commit = row.get("commit", {}) if isinstance(row, dict) else {}
            message = str(commit.get("message", "") if isinstance(commit, dict) else "")
            if message:
                messages.append(message)
        if len(rows) < PAGE_SIZE:
            return messages
        page += 1


def build_request(env: Mapping[str, str], fetch_commits: CommitFetcher | None = None) -> CheckRequest:
    inputs = read_inputs(env)
    event_name, payload = load_event(env)
    if fetch_commits is None and inputs.check_all_commit_messages:
        api_url = env.get("GITHUB_API_URL", "").strip() or DEFAULT_API_URL

        def _fetch(repository: str, number: int) -> list[str]:
            return fetch_pull_request_commits(
                api_url=api_url,
                repository=repository,
                number=number,
                token=inputs.access_token,
            )

        fetch_commits = _fetch

    messages = collect_messages(event_name, payload, inputs, fetch_commits)
    return CheckRequest(
        pattern=inputs.pattern,
        flags=inputs.flags,
        error=inputs.error,
        messages=tuple(messages),
        debug_fragments=inputs.debug_fragments,
    )
