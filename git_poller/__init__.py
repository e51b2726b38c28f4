"""Git source control poller for continuous integration orchestrators.

Detects new upstream commits, extracts a time-bounded, sequence-numbered
change set, synchronizes the working copy and tags successful builds by
shelling out to the git command-line tool.
"""

from .config import GitSourceConfig, load_config
from .errors import (
    CommandExecutionError,
    ConfigurationError,
    ExtractionError,
    GitPollerError,
    HeadQueryError,
    ParseError,
    SetupError,
    SyncError,
    TagError,
)
from .git import ChangeSetEntry, TimeWindow
from .source_control import GitSourceControl

__version__ = "1.0.0"

__all__ = [
    "ChangeSetEntry",
    "CommandExecutionError",
    "ConfigurationError",
    "ExtractionError",
    "GitPollerError",
    "GitSourceConfig",
    "GitSourceControl",
    "HeadQueryError",
    "ParseError",
    "SetupError",
    "SyncError",
    "TagError",
    "TimeWindow",
    "load_config",
]
