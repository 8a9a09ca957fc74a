from dataclasses import field

from pydantic import field_validator
from pydantic.dataclasses import dataclass

from .wait_policy import WaitPolicy

DEFAULT_COMMIT_LABEL_KEY = "io.openshift.build.commit.id"


@dataclass(frozen=True)
class TagReleaseOptions:
    release_version: str
    branch: str
    wait: bool = False
    registry_repositories: list[str] = field(default_factory=list)
    # registry tag holding the latest build of the branch, defaults to the branch name
    source_tag: str | None = None
    commit_label_key: str = DEFAULT_COMMIT_LABEL_KEY
    wait_policy: WaitPolicy = field(default_factory=WaitPolicy)
    dry_run: bool = False

    @field_validator("release_version", "branch")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def candidate_tag(self) -> str:
        return self.source_tag or self.branch

    @staticmethod
    def parse_repositories(value: str | None) -> list[str]:
        if not value:
            return []
        return [repo.strip() for repo in value.split(",") if repo.strip()]
