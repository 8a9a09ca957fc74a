from dataclasses import dataclass, field
from enum import Enum


class RepositoryOutcome(Enum):
    PENDING = "pending"
    SKIPPED = "skipped"
    PROMOTED = "promoted"
    FAILED = "failed"


@dataclass(frozen=True)
class RepositoryResult:
    repository: str
    outcome: RepositoryOutcome = RepositoryOutcome.PENDING
    manifest_digest: str | None = None
    error: Exception | None = None


@dataclass
class ReleaseReport:
    release_version: str
    commit_sha: str | None = None
    git_tag_created: bool = False
    repositories: list[RepositoryResult] = field(default_factory=list)

    def first_failure(self) -> RepositoryResult | None:
        return next((r for r in self.repositories if r.outcome is RepositoryOutcome.FAILED), None)

    @property
    def succeeded(self) -> bool:
        return self.commit_sha is not None and all(
            r.outcome in (RepositoryOutcome.SKIPPED, RepositoryOutcome.PROMOTED) for r in self.repositories
        )
