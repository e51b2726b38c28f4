"""Configuration model for one git source block."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..git.models import RepositoryReference
from ..git.tagger import DEFAULT_TAG_MESSAGE


class GitSourceConfig(BaseModel):
    """Validated, immutable settings for one polled repository."""

    executable: str = Field(default="git")
    repository: str
    branch: str = Field(default="master")
    tag_commit_message: str = Field(default=DEFAULT_TAG_MESSAGE)
    tag_on_success: bool = Field(default=False)
    auto_get_source: bool = Field(default=True)
    working_directory: Path | None = Field(default=None)
    timeout: float = Field(default=600, gt=0)  # seconds

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("repository", "executable", "branch")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not str(v).strip():
            raise ValueError("must not be empty")
        return str(v).strip()

    @field_validator("tag_commit_message")
    @classmethod
    def validate_label_placeholder(cls, v: str) -> str:
        if "{0}" not in v:
            raise ValueError("must contain the {0} label placeholder")
        try:
            v.format("label")
        except (IndexError, KeyError, ValueError) as e:
            raise ValueError(f"invalid template: {e}") from e
        return v

    def repository_reference(self, base_dir: Path | None = None) -> RepositoryReference:
        """Resolve the working directory against base_dir (default: cwd)."""
        base = Path(base_dir) if base_dir else Path.cwd()
        local_path = self.working_directory or base
        if not local_path.is_absolute():
            local_path = base / local_path
        return RepositoryReference(
            url=self.repository,
            local_path=local_path.resolve(),
            branch=self.branch,
        )
