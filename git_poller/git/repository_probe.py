"""Working directory inspection and repository setup.

The probe picks one of three setup paths on every poll:

    ABSENT                 -> git clone (which also fetches)
    PRESENT_UNINITIALIZED  -> git init, 4x git config, git fetch
    READY                  -> git fetch

and reports whether the local repository was created by this poll.
"""

from ..errors import CommandExecutionError, SetupError
from ..poller_logging import get_logger
from . import commands
from .commands import GitRunner
from .executor import FileSystemProbe
from .models import RepositorySetupState


class RepositoryStateProbe:
    """Selects and runs the setup path for a working directory.

    Example:
        probe = RepositoryStateProbe(runner, LocalFileSystem())
        freshly_created = probe.prepare()
    """

    def __init__(self, runner: GitRunner, file_system: FileSystemProbe):
        self.runner = runner
        self.file_system = file_system
        self.logger = get_logger()

    @property
    def reference(self):
        return self.runner.reference

    def detect_state(self) -> RepositorySetupState:
        """Classify the working directory using existence checks only."""
        local_path = self.reference.local_path
        if not self.file_system.directory_exists(local_path):
            return RepositorySetupState.ABSENT
        if not self.file_system.directory_exists(local_path / ".git"):
            return RepositorySetupState.PRESENT_UNINITIALIZED
        return RepositorySetupState.READY

    def prepare(self) -> bool:
        """Bring the working directory to READY and fetch from origin.

        Returns:
            True if the local repository was created by this call

        Raises:
            SetupError: If any clone, init, config or fetch command fails
        """
        state = self.detect_state()
        self.logger.debug(f"Working directory {self.reference.local_path} is {state.value}")

        if state is RepositorySetupState.ABSENT:
            self._clone()
            return True

        if state is RepositorySetupState.PRESENT_UNINITIALIZED:
            self._initialize()
            self._fetch()
            return True

        self._fetch()
        return False

    def _clone(self) -> None:
        # The target does not exist yet, so git must start from its parent
        parent = self.reference.local_path.parent
        self.file_system.make_directories(parent)
        self._run_setup(commands.clone_args(self.reference), "clone", working_dir=parent)

    def _initialize(self) -> None:
        self._run_setup(commands.init_args(), "init")
        for key, value in commands.remote_config_entries(self.reference):
            self._run_setup(commands.config_args(key, value), f"config {key}")

    def _fetch(self) -> None:
        self._run_setup(commands.fetch_args(), "fetch")

    def _run_setup(self, args: list[str], step: str, working_dir=None) -> None:
        try:
            self.runner.run(args, working_dir=working_dir)
        except CommandExecutionError as e:
            raise SetupError(
                f"git {step} failed for {self.reference.url}: {e}",
                details=e.details,
            ) from e
