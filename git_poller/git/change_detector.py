"""Head-hash comparison that decides whether history extraction is needed.

Extracting and parsing the full history is comparatively expensive, so on an
already-initialized repository the poller first compares the newest remote
and local commit hashes and skips extraction when they match.
"""

from ..errors import CommandExecutionError, HeadQueryError
from ..poller_logging import get_logger
from . import commands
from .commands import GitRunner
from .models import HeadQueryResult, LocalHead, NoLocalHead, QueryFailed

# git gives no exit code specific to "branch has no commits", so the
# diagnostic text is the only signal. The executor forces LC_ALL=C.
NO_LOCAL_HEAD_DIAGNOSTICS = (
    "fatal: bad default revision 'HEAD'",
    "does not have any commits yet",
)


def is_no_local_head(error: CommandExecutionError) -> bool:
    """Return True if a failed log command means the branch has no commits."""
    text = f"{error.stderr}\n{error.message}"
    return any(sentinel in text for sentinel in NO_LOCAL_HEAD_DIAGNOSTICS)


def _clean_hash(output: str) -> str:
    # --pretty=format:'%H' prints the quotes literally
    return output.strip().strip("'").strip()


class ChangeDetector:
    """Compares remote and local head identifiers.

    Example:
        detector = ChangeDetector(runner)
        if detector.has_changes():
            ...
    """

    def __init__(self, runner: GitRunner):
        self.runner = runner
        self.logger = get_logger()

    def remote_head(self) -> str:
        """Hash of the newest commit on the remote tracking branch.

        Raises:
            HeadQueryError: If the log command fails
        """
        try:
            result = self.runner.run(commands.remote_head_args(self.runner.reference))
        except CommandExecutionError as e:
            raise HeadQueryError(
                f"Could not read remote head of {self.runner.reference.remote_branch}: {e}",
                details=e.details,
            ) from e
        return _clean_hash(result.stdout)

    def query_local_head(self) -> HeadQueryResult:
        """Query the newest local commit without raising."""
        try:
            result = self.runner.run(commands.local_head_args())
        except CommandExecutionError as e:
            if is_no_local_head(e):
                return NoLocalHead()
            return QueryFailed(e)

        commit_id = _clean_hash(result.stdout)
        if not commit_id:
            return NoLocalHead()
        return LocalHead(commit_id)

    def local_head(self) -> str | None:
        """Hash of the newest local commit, or None if the branch is empty.

        Raises:
            HeadQueryError: If the query fails for any other reason
        """
        outcome = self.query_local_head()
        if isinstance(outcome, QueryFailed):
            raise HeadQueryError(
                f"Could not read local head: {outcome.cause}",
                details=getattr(outcome.cause, "details", None),
            ) from outcome.cause
        if isinstance(outcome, NoLocalHead):
            self.logger.debug("Local branch has no commits yet")
            return None
        return outcome.commit_id

    def has_changes(self) -> bool:
        """Return False only when both heads are known and identical."""
        remote = self.remote_head()
        local = self.local_head()

        if remote and local and remote == local:
            self.logger.debug(f"Heads match at {remote}, skipping history extraction")
            return False

        self.logger.debug(f"Heads differ (remote={remote or '-'}, local={local or '-'})")
        return True
