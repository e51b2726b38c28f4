"""Git integration: repository setup, change detection and history parsing.

This package shells out to the git executable through an injected
CommandExecutor and turns its log output into ChangeSetEntry lists.
"""

from .change_detector import ChangeDetector
from .commands import GitRunner
from .executor import (
    CommandExecutor,
    FileSystemProbe,
    LocalFileSystem,
    ProcessResult,
    SubprocessCommandExecutor,
)
from .history import HistoryExtractor, normalize_timestamps
from .history_parser import HistoryParser
from .models import (
    ChangeSetEntry,
    HeadQueryResult,
    LocalHead,
    NoLocalHead,
    QueryFailed,
    RepositoryReference,
    RepositorySetupState,
    TimeWindow,
)
from .repository_probe import RepositoryStateProbe
from .sync import WorkingCopySynchronizer
from .tagger import ReleaseTagger

__all__ = [
    "ChangeDetector",
    "ChangeSetEntry",
    "CommandExecutor",
    "FileSystemProbe",
    "GitRunner",
    "HeadQueryResult",
    "HistoryExtractor",
    "HistoryParser",
    "LocalFileSystem",
    "LocalHead",
    "NoLocalHead",
    "ProcessResult",
    "QueryFailed",
    "ReleaseTagger",
    "RepositoryReference",
    "RepositorySetupState",
    "RepositoryStateProbe",
    "SubprocessCommandExecutor",
    "TimeWindow",
    "WorkingCopySynchronizer",
    "normalize_timestamps",
]
