"""Command execution and filesystem seams used by every git component.

Components never call subprocess or os.path directly; they receive a
CommandExecutor and a FileSystemProbe so tests can script both.
"""

import os
import subprocess
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..errors import CommandExecutionError
from ..poller_logging import get_logger


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a finished (or aborted) process.

    Attributes:
        stdout: Captured standard output
        stderr: Captured standard error
        exit_code: Process exit code (-1 when killed by timeout)
        timed_out: Whether the process was aborted by the timeout
    """

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    timed_out: bool = False

    @property
    def failed(self) -> bool:
        return self.timed_out or self.exit_code != 0


class CommandExecutor(ABC):
    """Runs an executable with an argument list in a working directory."""

    @abstractmethod
    def execute(
        self,
        executable: str,
        args: list[str],
        working_dir: Path,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run the command to completion.

        Raises:
            CommandExecutionError: If the process cannot start, exits
                non-zero or times out.
        """


class FileSystemProbe(ABC):
    """Filesystem existence checks and directory creation."""

    @abstractmethod
    def directory_exists(self, path: Path) -> bool:
        """Return True if path exists and is a directory."""

    @abstractmethod
    def make_directories(self, path: Path) -> None:
        """Create path and any missing parents; existing directories are kept."""


class LocalFileSystem(FileSystemProbe):
    """FileSystemProbe backed by the local disk."""

    def directory_exists(self, path: Path) -> bool:
        return Path(path).is_dir()

    def make_directories(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)


class SubprocessCommandExecutor(CommandExecutor):
    """CommandExecutor built on subprocess.run.

    Output is decoded as UTF-8 and git diagnostics are forced into the C
    locale so stderr sentinels can be matched reliably.
    """

    def __init__(self, env_overrides: dict[str, str] | None = None):
        self.env_overrides = {"LC_ALL": "C", "LANGUAGE": "C"}
        if env_overrides:
            self.env_overrides.update(env_overrides)
        self.logger = get_logger()

    def execute(
        self,
        executable: str,
        args: list[str],
        working_dir: Path,
        timeout: float | None = None,
    ) -> ProcessResult:
        command = [executable] + list(args)
        context = {"command": " ".join(command), "working_dir": str(working_dir)}
        self.logger.info(f"Calling {executable} {' '.join(args)}", extra=context)

        env = dict(os.environ)
        env.update(self.env_overrides)
        started = time.monotonic()

        try:
            completed = subprocess.run(
                command,
                cwd=working_dir,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                env=env,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            result = ProcessResult(
                stdout=_decode(e.stdout),
                stderr=_decode(e.stderr),
                exit_code=-1,
                timed_out=True,
            )
            self.logger.error(
                f"{executable} timed out after {timeout}s", extra=context
            )
            raise CommandExecutionError(
                f"Command timed out after {timeout}s", args=command, result=result
            ) from e
        except (FileNotFoundError, OSError) as e:
            self.logger.error(f"Could not start {executable}: {e}", extra=context)
            raise CommandExecutionError(
                f"Could not start {executable}: {e}", args=command
            ) from e

        duration_ms = round((time.monotonic() - started) * 1000, 1)
        result = ProcessResult(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            exit_code=completed.returncode,
        )

        if result.failed:
            self.logger.error(
                f"{executable} exited with code {result.exit_code}: {result.stderr.strip()}",
                extra={**context, "exit_code": result.exit_code, "duration_ms": duration_ms},
            )
            raise CommandExecutionError(
                f"Command exited with code {result.exit_code}",
                args=command,
                result=result,
            )

        self.logger.debug(
            f"{executable} {args[0] if args else ''} finished in {duration_ms}ms",
            extra={**context, "exit_code": 0, "duration_ms": duration_ms},
        )
        return result


def _decode(output: bytes | str | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
