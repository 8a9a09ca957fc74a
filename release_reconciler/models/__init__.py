from .git_reference import GitReference, GitRepository
from .registry_tag import ManifestLabel, RegistryTag
from .release_config import GitConfig, RegistryConfig, ReleaseConfig
from .release_report import ReleaseReport, RepositoryOutcome, RepositoryResult
from .tag_release_options import TagReleaseOptions
from .wait_policy import WaitPolicy

__all__ = [
    "GitReference",
    "GitRepository",
    "ManifestLabel",
    "RegistryTag",
    "GitConfig",
    "RegistryConfig",
    "ReleaseConfig",
    "ReleaseReport",
    "RepositoryOutcome",
    "RepositoryResult",
    "TagReleaseOptions",
    "WaitPolicy",
]
