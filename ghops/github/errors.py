"""Exceptions raised by ghops before a request reaches GitHub."""


class GitHubCommandError(Exception):
    """Base class for local command failures."""
    pass


class InvalidArgumentError(GitHubCommandError, ValueError):
    """Raised when parameters are missing, ambiguous or out of range."""
    pass


class InvalidFormatError(GitHubCommandError, ValueError):
    """Raised when a value does not have the expected shape."""
    pass
