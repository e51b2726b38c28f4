"""Structured error types for the git poller.

Every failure that leaves the poller is a GitPollerError carrying a category
and, where one exists, an actionable suggestion. Lower-level command failures
are chained onto the component error that owns the step.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .git.executor import ProcessResult


class ErrorCategory(Enum):
    """Categories of poller errors for organization and handling."""

    CONFIGURATION = "configuration"  # Missing repository, invalid options
    EXECUTION = "execution"  # Process could not start, non-zero exit, timeout
    SETUP = "setup"  # clone / init / config / fetch
    DETECTION = "detection"  # Head hash queries
    EXTRACTION = "extraction"  # History retrieval
    PARSING = "parsing"  # Malformed history records
    SYNC = "sync"  # clean / reset / merge
    TAGGING = "tagging"  # tag / push --tags


class GitPollerError(Exception):
    """Base class for poller errors with recovery suggestions.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
    """

    category: ErrorCategory = ErrorCategory.EXECUTION
    default_suggestion: str | None = None

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion or self.default_suggestion
        self.details = details or {}

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        for key, value in self.details.items():
            lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.message


class ConfigurationError(GitPollerError):
    """Invalid or unreadable poller configuration."""

    category = ErrorCategory.CONFIGURATION
    default_suggestion = "Check the configuration file syntax and required fields"


class CommandExecutionError(GitPollerError):
    """A git process failed to start, exited non-zero or timed out."""

    category = ErrorCategory.EXECUTION

    def __init__(
        self,
        message: str,
        args: list[str] | None = None,
        result: ProcessResult | None = None,
    ):
        details: dict[str, Any] = {}
        if args:
            details["command"] = " ".join(args)
        if result is not None:
            details["exit_code"] = result.exit_code
            if result.stderr.strip():
                details["stderr"] = result.stderr.strip()
        super().__init__(message, details=details)
        self.command_args = list(args or [])
        self.result = result

    @property
    def stderr(self) -> str:
        """Standard error of the failed process, empty if it never started."""
        return self.result.stderr if self.result is not None else ""

    @property
    def timed_out(self) -> bool:
        return self.result is not None and self.result.timed_out


class SetupError(GitPollerError):
    """Repository setup (clone, init, config or fetch) failed."""

    category = ErrorCategory.SETUP
    default_suggestion = "Verify the repository URL and that the working directory is writable"


class HeadQueryError(GitPollerError):
    """A head identifier query failed for a reason other than an empty branch."""

    category = ErrorCategory.DETECTION


class ExtractionError(GitPollerError):
    """The history retrieval command failed."""

    category = ErrorCategory.EXTRACTION
    default_suggestion = "Check that the remote tracking branch exists after fetch"


class ParseError(GitPollerError):
    """Raw history records could not be deserialized."""

    category = ErrorCategory.PARSING
    MESSAGE = "History Parsing Failed"

    def __init__(self, message: str | None = None) -> None:
        # The message is fixed; the argument only lets pickle rebuild the error
        super().__init__(self.MESSAGE)


class SyncError(GitPollerError):
    """Working copy synchronization (clean, reset or merge) failed."""

    category = ErrorCategory.SYNC
    default_suggestion = "Resolve conflicts in the working directory manually"


class TagError(GitPollerError):
    """Creating or pushing the release tag failed."""

    category = ErrorCategory.TAGGING
