"""
Shared fixtures for the git poller test suite.

Provides test fixtures for:
- A recording command executor with scripted git output
- A stub filesystem probe
- Repository references and configuration rooted in tmp_path
"""

from pathlib import Path

import pytest

from git_poller.config import GitSourceConfig
from git_poller.errors import CommandExecutionError
from git_poller.git import (
    CommandExecutor,
    FileSystemProbe,
    GitRunner,
    ProcessResult,
    RepositoryReference,
)


class RecordingExecutor(CommandExecutor):
    """CommandExecutor that records calls and replays scripted results.

    Responses are keyed by the git argument list. A ProcessResult with a
    non-zero exit code is raised as CommandExecutionError, mirroring the
    subprocess executor.
    """

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self.responses: dict[tuple[str, ...], ProcessResult | Exception] = {}

    def script(self, args: list[str], response: ProcessResult | Exception | str) -> None:
        if isinstance(response, str):
            response = ProcessResult(stdout=response)
        self.responses[tuple(args)] = response

    def fail(self, args: list[str], stderr: str = "fatal: boom", exit_code: int = 128) -> None:
        self.script(args, ProcessResult(stderr=stderr, exit_code=exit_code))

    @property
    def commands(self) -> list[list[str]]:
        return [call["args"] for call in self.calls]

    @property
    def verbs(self) -> list[str]:
        return [call["args"][0] for call in self.calls]

    def execute(self, executable, args, working_dir, timeout=None) -> ProcessResult:
        self.calls.append(
            {
                "executable": executable,
                "args": list(args),
                "working_dir": Path(working_dir),
                "timeout": timeout,
            }
        )
        response = self.responses.get(tuple(args), ProcessResult())
        if isinstance(response, Exception):
            raise response
        if response.failed:
            raise CommandExecutionError(
                f"Command exited with code {response.exit_code}",
                args=[executable] + list(args),
                result=response,
            )
        return response


class StubFileSystem(FileSystemProbe):
    """FileSystemProbe answering from a fixed set of existing directories."""

    def __init__(self, existing: list[Path] | None = None) -> None:
        self.existing = {Path(p) for p in existing or []}
        self.probed: list[Path] = []
        self.created: list[Path] = []

    def directory_exists(self, path: Path) -> bool:
        self.probed.append(Path(path))
        return Path(path) in self.existing

    def make_directories(self, path: Path) -> None:
        self.created.append(Path(path))
        self.existing.add(Path(path))


@pytest.fixture()
def executor() -> RecordingExecutor:
    """Executor with no scripted responses (every command succeeds silently)."""
    return RecordingExecutor()


@pytest.fixture()
def work_dir(tmp_path: Path) -> Path:
    """Working copy location that does not exist on disk yet."""
    return (tmp_path / "source").resolve()


@pytest.fixture()
def reference(work_dir: Path) -> RepositoryReference:
    return RepositoryReference(url="xyz.git", local_path=work_dir)


@pytest.fixture()
def runner(executor: RecordingExecutor, reference: RepositoryReference) -> GitRunner:
    return GitRunner(executor=executor, reference=reference, timeout=5)


@pytest.fixture()
def ready_fs(work_dir: Path) -> StubFileSystem:
    """Filesystem where the working copy is an initialized repository."""
    return StubFileSystem([work_dir, work_dir / ".git"])


@pytest.fixture()
def config(work_dir: Path) -> GitSourceConfig:
    return GitSourceConfig(repository="xyz.git", working_directory=work_dir)


@pytest.fixture()
def sample_history() -> str:
    """Four raw records, oldest first, as produced after timestamp rewriting."""
    return "".join(
        f"<Modification><Type>Commit {sha}</Type>"
        f"<ModifiedTime>{stamp}</ModifiedTime>"
        "<UserName>Fred</UserName><EmailAddress>abc@abc.com</EmailAddress>"
        f"<Comment>Commit Message {number}</Comment></Modification>\n"
        for number, (sha, stamp) in enumerate(
            [
                ("a1", "2000-01-01T10:00:00+10:00"),
                ("b2", "2001-01-01T10:00:00+10:00"),
                ("c3", "2009-01-01T10:00:00+10:00"),
                ("d4", "2009-01-02T10:00:00+10:00"),
            ],
            start=1,
        )
    )


@pytest.fixture()
def make_fs():
    """Factory for StubFileSystem instances with the given existing directories."""
    return StubFileSystem
