"""Errors raised by the flag dependency analyzer."""

from typing import Optional


class FlagDepsError(Exception):
    """Base class for all analyzer errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class ConfigError(FlagDepsError):
    """An environment setting could not be interpreted."""


class FlagDataNotFoundError(FlagDepsError):
    """The flag export file is missing or unreadable."""


class MalformedFlagDataError(FlagDepsError):
    """The flag export is not valid JSON or has the wrong shape."""


class NothingToReportError(FlagDepsError):
    """No dependencies were found, so no artifacts are produced."""


class RenderError(FlagDepsError):
    """The graph rendering backend failed or is unavailable."""


class ReportWriteError(FlagDepsError):
    """A rendered artifact could not be written to disk."""
