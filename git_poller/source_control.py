"""Orchestrator-facing git source control.

Wires the git components together for one configured repository:

    get_changes(start, end)      RepositoryStateProbe -> ChangeDetector
                                 -> HistoryExtractor -> HistoryParser
    synchronize_working_copy()   WorkingCopySynchronizer
    tag_release(label, ok)       ReleaseTagger
"""

from datetime import datetime
from pathlib import Path

from .config import GitSourceConfig
from .git import (
    ChangeDetector,
    ChangeSetEntry,
    CommandExecutor,
    FileSystemProbe,
    GitRunner,
    HistoryExtractor,
    HistoryParser,
    LocalFileSystem,
    ReleaseTagger,
    RepositoryStateProbe,
    SubprocessCommandExecutor,
    TimeWindow,
    WorkingCopySynchronizer,
)
from .poller_logging import get_logger


class GitSourceControl:
    """Git polling adapter for one repository.

    Polls are not safe to run concurrently against the same working
    directory; the caller serializes them.

    Example:
        source = GitSourceControl(load_config(Path("git.json")))
        changes = source.get_changes(last_build_start, this_build_start)
        source.synchronize_working_copy()
        source.tag_release("1.0.42", build_succeeded=True)
    """

    def __init__(
        self,
        config: GitSourceConfig,
        executor: CommandExecutor | None = None,
        file_system: FileSystemProbe | None = None,
        history_parser: HistoryParser | None = None,
        base_dir: Path | None = None,
    ):
        self.config = config
        self.reference = config.repository_reference(base_dir)
        self.runner = GitRunner(
            executor=executor or SubprocessCommandExecutor(),
            reference=self.reference,
            executable=config.executable,
            timeout=config.timeout,
        )
        self.probe = RepositoryStateProbe(self.runner, file_system or LocalFileSystem())
        self.detector = ChangeDetector(self.runner)
        self.extractor = HistoryExtractor(self.runner)
        self.parser = history_parser or HistoryParser()
        self.synchronizer = WorkingCopySynchronizer(
            self.runner, enabled=config.auto_get_source
        )
        self.tagger = ReleaseTagger(
            self.runner,
            enabled=config.tag_on_success,
            message_template=config.tag_commit_message,
        )
        self.logger = get_logger()

    def get_changes(self, start: datetime, end: datetime) -> list[ChangeSetEntry]:
        """Return commits on origin/<branch> with timestamps in [start, end].

        Raises:
            SetupError, HeadQueryError, ExtractionError, ParseError
        """
        freshly_created = self.probe.prepare()

        if not freshly_created and not self.detector.has_changes():
            return []

        raw_records = self.extractor.extract()
        changes = self.parser.parse(raw_records, TimeWindow(start, end))
        self.logger.info(
            f"Found {len(changes)} change(s) on {self.reference.remote_branch} "
            f"between {start.isoformat()} and {end.isoformat()}"
        )
        return changes

    def synchronize_working_copy(self) -> None:
        """Clean, reset and merge the working copy when auto get-source is on.

        Raises:
            SyncError, HeadQueryError
        """
        self.synchronizer.synchronize()

    def tag_release(self, label: str, build_succeeded: bool) -> None:
        """Tag the build label and push tags when tagging on success is on.

        Raises:
            TagError
        """
        self.tagger.tag(label, build_succeeded)
