"""Tagging successful builds and publishing the tags."""

from ..errors import CommandExecutionError, TagError
from ..poller_logging import get_logger
from . import commands
from .commands import GitRunner

DEFAULT_TAG_MESSAGE = "ccnet build {0}"


class ReleaseTagger:
    """Creates an annotated tag for a build label, then runs push --tags."""

    def __init__(
        self,
        runner: GitRunner,
        enabled: bool = False,
        message_template: str = DEFAULT_TAG_MESSAGE,
    ):
        self.runner = runner
        self.enabled = enabled
        self.message_template = message_template
        self.logger = get_logger()

    def tag_message(self, label: str) -> str:
        return self.message_template.format(label)

    def tag(self, label: str, build_succeeded: bool) -> None:
        """Tag and push when enabled and the build succeeded.

        Raises:
            TagError: If tag creation or the push fails; push is never
                attempted after a failed tag
        """
        if not self.enabled or not build_succeeded:
            self.logger.debug(f"Not tagging {label} (enabled={self.enabled}, succeeded={build_succeeded})")
            return

        try:
            self.runner.run(commands.tag_args(label, self.tag_message(label)))
        except CommandExecutionError as e:
            raise TagError(f"Could not create tag {label}: {e}", details=e.details) from e

        try:
            self.runner.run(commands.push_tags_args())
        except CommandExecutionError as e:
            raise TagError(f"Could not push tag {label}: {e}", details=e.details) from e

        self.logger.info(f"Tagged and pushed {label}")
