from dataclasses import field

from pydantic.dataclasses import dataclass

from .tag_release_options import DEFAULT_COMMIT_LABEL_KEY
from .wait_policy import WaitPolicy

DEFAULT_GIT_OWNER = "integr8ly"
DEFAULT_GIT_REPOSITORY = "integreatly-operator"
DEFAULT_REGISTRY_URL = "https://quay.io"
DEFAULT_REGISTRY_REPOSITORIES = [
    "integreatly/integreatly-operator",
    "integreatly/integreatly-operator-test-harness",
]


@dataclass(frozen=True)
class GitConfig:
    owner: str = DEFAULT_GIT_OWNER
    repository: str = DEFAULT_GIT_REPOSITORY


@dataclass(frozen=True)
class RegistryConfig:
    url: str = DEFAULT_REGISTRY_URL
    repositories: list[str] = field(default_factory=lambda: list(DEFAULT_REGISTRY_REPOSITORIES))
    commit_label: str = DEFAULT_COMMIT_LABEL_KEY


@dataclass(frozen=True)
class ReleaseConfig:
    git: GitConfig = field(default_factory=GitConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    wait: WaitPolicy = field(default_factory=WaitPolicy)
