"""Custom exceptions for the commit_gate package."""


class CommitGateError(Exception):
    """Base exception for commit gate errors."""
    pass


class ConfigurationError(CommitGateError):
    """Exception raised for invalid inputs, fragment files or event payloads."""
    pass


class GitHubApiError(ConfigurationError):
    """Exception raised when commits cannot be listed from the GitHub API."""
    pass
