"""Unit tests for the orchestrator-facing GitSourceControl."""

from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from git_poller import GitSourceControl
from git_poller.config import GitSourceConfig
from git_poller.errors import ExtractionError, ParseError, SetupError
from git_poller.git import ChangeSetEntry, HistoryParser
from git_poller.git.commands import HISTORY_FORMAT

REMOTE_HEAD = ["log", "origin/master", "--date-order", "-1", "--pretty=format:'%H'"]
LOCAL_HEAD = ["log", "--date-order", "-1", "--pretty=format:'%H'"]
HISTORY = [
    "log",
    "origin/master",
    "--date-order",
    "--reverse",
    f"--pretty=format:{HISTORY_FORMAT}",
]

START = datetime(2001, 1, 21, 20, 0, tzinfo=UTC)
END = START + timedelta(days=1)


@pytest.fixture
def make_source(config: GitSourceConfig, executor, make_fs):
    """Build a GitSourceControl over the recording executor."""

    def _make(existing: list[Path] | None = None, **kwargs) -> GitSourceControl:
        return GitSourceControl(
            config, executor=executor, file_system=make_fs(existing), **kwargs
        )

    return _make


class TestGetChanges:
    """Tests for GitSourceControl.get_changes."""

    def test_clone_then_extract_when_directory_absent(
        self, make_source, executor, work_dir: Path
    ):
        """Test that a fresh clone skips head comparison."""
        source = make_source([])

        assert source.get_changes(START, END) == []
        assert executor.commands == [["clone", "xyz.git", str(work_dir)], HISTORY]

    def test_init_then_extract_when_git_dir_missing(self, make_source, executor, work_dir: Path):
        """Test init, 4x config, fetch and extract without head queries."""
        source = make_source([work_dir])

        source.get_changes(START, END)

        assert executor.verbs == ["init", "config", "config", "config", "config", "fetch", "log"]
        assert executor.commands[-1] == HISTORY
        assert REMOTE_HEAD not in executor.commands
        assert LOCAL_HEAD not in executor.commands

    def test_no_extraction_when_heads_match(self, make_source, executor, work_dir: Path):
        """Test the short circuit when remote and local heads are equal."""
        executor.script(REMOTE_HEAD, "abcdef")
        executor.script(LOCAL_HEAD, "abcdef")
        source = make_source([work_dir, work_dir / ".git"])

        assert source.get_changes(START, END) == []
        assert executor.commands == [["fetch"], REMOTE_HEAD, LOCAL_HEAD]
        assert HISTORY not in executor.commands

    def test_extract_when_heads_differ(self, make_source, executor, work_dir: Path):
        """Test that differing heads extract and parse with the caller's bounds."""
        executor.script(REMOTE_HEAD, "abcdef")
        executor.script(LOCAL_HEAD, "ghijkl")
        executor.script(HISTORY, "<raw/>")
        parsed = [MagicMock(spec=ChangeSetEntry), MagicMock(spec=ChangeSetEntry)]
        parser = MagicMock(spec=HistoryParser)
        parser.parse.return_value = parsed
        source = make_source([work_dir, work_dir / ".git"], history_parser=parser)

        result = source.get_changes(START, END)

        assert result is parsed
        assert executor.commands == [["fetch"], REMOTE_HEAD, LOCAL_HEAD, HISTORY]
        raw, window = parser.parse.call_args.args
        assert raw == "<raw/>"
        assert window.start == START
        assert window.end == END

    def test_extract_when_local_branch_empty(self, make_source, executor, work_dir: Path):
        """Test that an empty local branch is not an error."""
        executor.script(REMOTE_HEAD, "abcdef")
        executor.fail(LOCAL_HEAD, stderr="fatal: bad default revision 'HEAD'\n")
        source = make_source([work_dir, work_dir / ".git"])

        source.get_changes(START, END)

        assert executor.commands[-1] == HISTORY

    def test_parses_real_history(self, make_source, executor, work_dir: Path):
        """Test end to end from native git dates to numbered entries."""
        executor.script(
            HISTORY,
            "<Modification><Type>Commit aaa</Type><ModifiedTime>2001-01-20 10:00:00 +0000"
            "</ModifiedTime><UserName>Fred</UserName><EmailAddress>fred@x.org</EmailAddress>"
            "<Comment>first</Comment></Modification>\n"
            "<Modification><Type>Commit bbb</Type><ModifiedTime>2001-01-22 06:00:00 +1000"
            "</ModifiedTime><UserName>Wilma</UserName><EmailAddress>wilma@x.org</EmailAddress>"
            "<Comment><![CDATA[second & last]]></Comment></Modification>",
        )
        source = make_source([])

        changes = source.get_changes(START, END)

        assert len(changes) == 1
        assert changes[0].sequence_number == 2
        assert changes[0].commit_id == "bbb"
        assert changes[0].author_name == "Wilma"
        assert changes[0].message == "second & last"

    def test_setup_failure_propagates(self, make_source, executor, work_dir: Path):
        executor.fail(["fetch"], stderr="fatal: unable to access 'xyz.git'")
        source = make_source([work_dir, work_dir / ".git"])

        with pytest.raises(SetupError):
            source.get_changes(START, END)

        assert executor.commands == [["fetch"]]

    def test_extraction_failure_propagates(self, make_source, executor):
        executor.fail(HISTORY)

        with pytest.raises(ExtractionError):
            make_source([]).get_changes(START, END)

    def test_parse_failure_propagates(self, make_source, executor):
        executor.script(HISTORY, "><")

        with pytest.raises(ParseError):
            make_source([]).get_changes(START, END)

    def test_runner_uses_config(self, executor, make_fs, work_dir: Path):
        """Test that executable and timeout come from the configuration."""
        config = GitSourceConfig(
            repository="xyz.git",
            working_directory=work_dir,
            executable="/usr/local/bin/git",
            timeout=30,
        )
        source = GitSourceControl(
            config, executor=executor, file_system=make_fs([work_dir, work_dir / ".git"])
        )
        executor.script(REMOTE_HEAD, "abc")
        executor.script(LOCAL_HEAD, "abc")

        source.get_changes(START, END)

        assert {call["executable"] for call in executor.calls} == {"/usr/local/bin/git"}
        assert {call["timeout"] for call in executor.calls} == {30}


class TestSynchronizeAndTag:
    """Tests for the get-source and post-build entry points."""

    def test_synchronize_working_copy(self, make_source, executor):
        executor.script(LOCAL_HEAD, "abcdef")

        make_source().synchronize_working_copy()

        assert executor.verbs == ["clean", "log", "reset", "merge"]

    def test_synchronize_disabled(self, executor, make_fs, work_dir: Path):
        config = GitSourceConfig(
            repository="xyz.git", working_directory=work_dir, auto_get_source=False
        )

        GitSourceControl(config, executor=executor, file_system=make_fs()).synchronize_working_copy()

        assert executor.calls == []

    def test_tag_release_uses_config(self, executor, make_fs, work_dir: Path):
        config = GitSourceConfig(
            repository="xyz.git",
            working_directory=work_dir,
            tag_on_success=True,
            tag_commit_message="release {0}",
        )
        source = GitSourceControl(config, executor=executor, file_system=make_fs())

        source.tag_release("1.2.3", build_succeeded=True)

        assert executor.commands == [
            ["tag", "-a", "-m", "release 1.2.3", "1.2.3"],
            ["push", "--tags"],
        ]

    def test_tag_release_off_by_default(self, make_source, executor):
        make_source().tag_release("1.2.3", build_succeeded=True)

        assert executor.calls == []
