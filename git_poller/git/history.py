"""Retrieval of raw structured history records from git."""

import re

from ..errors import CommandExecutionError, ExtractionError
from ..poller_logging import get_logger
from . import commands
from .commands import GitRunner

# git %ci:   <ModifiedTime>2009-03-02 16:10:39 +1000</ModifiedTime>
# rewritten: <ModifiedTime>2009-03-02T16:10:39+10:00</ModifiedTime>
_NATIVE_TIMESTAMP = re.compile(
    r"<ModifiedTime>(\d{4}-\d\d-\d\d)\s(\d\d:\d\d:\d\d)\s([+-])(\d\d)(\d\d)</ModifiedTime>"
)


def normalize_timestamps(raw: str) -> str:
    """Rewrite git's native committer dates into ISO-8601 with a colon offset."""
    return _NATIVE_TIMESTAMP.sub(r"<ModifiedTime>\1T\2\3\4:\5</ModifiedTime>", raw)


class HistoryExtractor:
    """Runs the history log against the remote tracking branch."""

    def __init__(self, runner: GitRunner):
        self.runner = runner
        self.logger = get_logger()

    def extract(self) -> str:
        """Return every commit on origin/<branch>, oldest first, as raw records.

        Raises:
            ExtractionError: If the log command fails
        """
        reference = self.runner.reference
        try:
            result = self.runner.run(commands.history_args(reference))
        except CommandExecutionError as e:
            raise ExtractionError(
                f"Could not read history of {reference.remote_branch}: {e}",
                details=e.details,
            ) from e

        return normalize_timestamps(result.stdout)
