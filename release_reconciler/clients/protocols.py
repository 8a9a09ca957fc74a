from typing import Protocol

from release_reconciler.models import GitReference, GitRepository, ManifestLabel, RegistryTag
from release_reconciler.utils.cancellation import CancellationScope


class ReferenceSource(Protocol):
    """Reads and creates references in a source control repository."""

    def resolve_reference(self, scope: CancellationScope, repository: GitRepository, ref_name: str) -> GitReference | None:
        """Return the reference, or None when it does not exist.

        Transport and auth failures raise TransportError.
        """
        ...

    def create_reference(
        self, scope: CancellationScope, repository: GitRepository, ref_name: str, commit_sha: str
    ) -> GitReference:
        """Create a new reference. Existing references are never overwritten."""
        ...


class TagStore(Protocol):
    """Lists and writes tags of a registry repository."""

    def list_tags(self, scope: CancellationScope, repository: str, specific_tag: str | None = None) -> list[RegistryTag]:
        ...

    def create_or_move_tag(self, scope: CancellationScope, repository: str, tag_name: str, manifest_digest: str) -> None:
        ...


class ManifestLabelReader(Protocol):
    def list_manifest_labels(
        self, scope: CancellationScope, repository: str, manifest_digest: str, key_filter: str | None = None
    ) -> list[ManifestLabel]:
        ...
