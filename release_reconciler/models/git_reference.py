from pydantic.dataclasses import dataclass

BRANCH_REF_PREFIX = "refs/heads/"
TAG_REF_PREFIX = "refs/tags/"


@dataclass(frozen=True)
class GitReference:
    name: str
    commit_sha: str


@dataclass(frozen=True)
class GitRepository:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


def branch_ref(branch: str) -> str:
    return f"{BRANCH_REF_PREFIX}{branch.removeprefix(BRANCH_REF_PREFIX)}"


def tag_ref(tag: str) -> str:
    return f"{TAG_REF_PREFIX}{tag.removeprefix(TAG_REF_PREFIX)}"
