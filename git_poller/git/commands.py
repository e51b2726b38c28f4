"""Git argument lists and the runner that executes them for one repository.

The argument lists are the wire contract with git; the structured history
template must stay in step with the history parser's element names.
"""

from dataclasses import dataclass
from pathlib import Path

from .executor import CommandExecutor, ProcessResult
from .models import RepositoryReference

HISTORY_FORMAT = (
    "<Modification>"
    "<Type>Commit %H</Type>"
    "<ModifiedTime>%ci</ModifiedTime>"
    "<UserName>%cN</UserName>"
    "<EmailAddress>%ce</EmailAddress>"
    "<Comment>%s</Comment>"
    "</Modification>"
)

HEAD_FORMAT = "--pretty=format:'%H'"

DEFAULT_FETCH_REFSPEC = "+refs/heads/*:refs/remotes/origin/*"


def clone_args(reference: RepositoryReference) -> list[str]:
    return ["clone", reference.url, str(reference.local_path)]


def init_args() -> list[str]:
    return ["init"]


def config_args(key: str, value: str) -> list[str]:
    return ["config", key, value]


def remote_config_entries(reference: RepositoryReference) -> list[tuple[str, str]]:
    """Config writes that turn a bare `git init` into a clone of origin."""
    return [
        ("remote.origin.url", reference.url),
        ("remote.origin.fetch", DEFAULT_FETCH_REFSPEC),
        (f"branch.{reference.branch}.remote", "origin"),
        (f"branch.{reference.branch}.merge", f"refs/heads/{reference.branch}"),
    ]


def fetch_args() -> list[str]:
    return ["fetch"]


def remote_head_args(reference: RepositoryReference) -> list[str]:
    return ["log", reference.remote_branch, "--date-order", "-1", HEAD_FORMAT]


def local_head_args() -> list[str]:
    return ["log", "--date-order", "-1", HEAD_FORMAT]


def history_args(reference: RepositoryReference) -> list[str]:
    return [
        "log",
        reference.remote_branch,
        "--date-order",
        "--reverse",
        f"--pretty=format:{HISTORY_FORMAT}",
    ]


def clean_args() -> list[str]:
    return ["clean", "-d", "-f", "-x"]


def reset_args() -> list[str]:
    return ["reset", "HEAD", "--hard"]


def merge_args(reference: RepositoryReference) -> list[str]:
    return ["merge", reference.remote_branch]


def tag_args(label: str, message: str) -> list[str]:
    return ["tag", "-a", "-m", message, label]


def push_tags_args() -> list[str]:
    return ["push", "--tags"]


@dataclass(frozen=True)
class GitRunner:
    """Binds an executor to one repository's executable, directory and timeout.

    Attributes:
        executor: Command execution seam
        reference: Repository being operated on
        executable: Git executable name or path
        timeout: Per-command timeout in seconds (None for no limit)
    """

    executor: CommandExecutor
    reference: RepositoryReference
    executable: str = "git"
    timeout: float | None = None

    def run(self, args: list[str], working_dir: Path | None = None) -> ProcessResult:
        """Run git with args in the working copy (or working_dir if given).

        Raises:
            CommandExecutionError: Propagated from the executor
        """
        return self.executor.execute(
            self.executable,
            args,
            working_dir or self.reference.local_path,
            self.timeout,
        )
