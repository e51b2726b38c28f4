"""Bringing the working tree in line with origin after changes are found."""

from ..errors import CommandExecutionError, SyncError
from ..poller_logging import get_logger
from . import commands
from .change_detector import ChangeDetector
from .commands import GitRunner


class WorkingCopySynchronizer:
    """clean -> (reset if a local head exists) -> merge origin/<branch>.

    Completed steps are not undone when a later one fails.
    """

    def __init__(self, runner: GitRunner, enabled: bool = True):
        self.runner = runner
        self.enabled = enabled
        self.detector = ChangeDetector(runner)
        self.logger = get_logger()

    def synchronize(self) -> None:
        """Update the working copy; no-op when disabled.

        Raises:
            SyncError: If clean, reset or merge fails
            HeadQueryError: If the local head cannot be determined
        """
        if not self.enabled:
            self.logger.debug("Automatic get-source disabled, leaving working copy untouched")
            return

        self._run(commands.clean_args(), "clean")
        if self.detector.local_head() is not None:
            self._run(commands.reset_args(), "reset")
        self._run(commands.merge_args(self.runner.reference), "merge")

    def _run(self, args: list[str], step: str) -> None:
        try:
            self.runner.run(args)
        except CommandExecutionError as e:
            raise SyncError(f"git {step} failed: {e}", details=e.details) from e
