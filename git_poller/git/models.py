"""Value types passed between the git poller components."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class RepositoryReference:
    """Where the remote lives and where its working copy is kept.

    Attributes:
        url: Remote repository URL passed to clone / remote.origin.url
        local_path: Working copy directory
        branch: Branch tracked on origin
    """

    url: str
    local_path: Path
    branch: str = "master"

    @property
    def remote_branch(self) -> str:
        """Remote tracking ref for the configured branch."""
        return f"origin/{self.branch}"


class RepositorySetupState(Enum):
    """Working directory state, derived from filesystem probes per poll."""

    ABSENT = "absent"
    PRESENT_UNINITIALIZED = "present_uninitialized"
    READY = "ready"


@dataclass
class ChangeSetEntry:
    """One commit within a polling window.

    Attributes:
        sequence_number: Position in the complete ascending history (1-based)
        timestamp: Committer timestamp, offset-aware
        author_name: Committer name
        author_email: Committer email
        message: First line of the commit message
        commit_id: Commit hash, empty when the record carries no type
        modification_type: Record type, "Commit" for git
    """

    sequence_number: int
    timestamp: datetime
    author_name: str = ""
    author_email: str = ""
    message: str = ""
    commit_id: str = ""
    modification_type: str = ""

    def to_dict(self) -> dict:
        return {
            "sequence_number": self.sequence_number,
            "timestamp": self.timestamp.isoformat(),
            "author_name": self.author_name,
            "author_email": self.author_email,
            "message": self.message,
            "commit_id": self.commit_id,
            "modification_type": self.modification_type,
        }


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive [start, end] range of commit timestamps.

    Naive bounds are interpreted as local time so they compare against the
    offset-aware commit timestamps.
    """

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return _aware(self.start) <= _aware(moment) <= _aware(self.end)


def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment


@dataclass(frozen=True)
class LocalHead:
    """The local branch has at least one commit."""

    commit_id: str


@dataclass(frozen=True)
class NoLocalHead:
    """The local branch has no commits yet."""


@dataclass(frozen=True)
class QueryFailed:
    """The head query failed for any other reason."""

    cause: Exception


HeadQueryResult = LocalHead | NoLocalHead | QueryFailed
