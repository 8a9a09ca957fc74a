import logging
from typing import Any, Callable, override

from release_reconciler.clients.protocols import ManifestLabelReader, ReferenceSource, TagStore
from release_reconciler.errors import (
    ImageMismatchError,
    ReconciliationCancelledError,
    ReconciliationError,
    ReferenceMismatchError,
    ReferenceNotFoundError,
    TransportError,
)
from release_reconciler.models import (
    GitReference,
    GitRepository,
    RegistryTag,
    ReleaseReport,
    RepositoryOutcome,
    RepositoryResult,
    TagReleaseOptions,
)
from release_reconciler.models.git_reference import branch_ref, tag_ref
from release_reconciler.services.service import Service
from release_reconciler.utils.cancellation import CancellationScope
from release_reconciler.utils.logging import setup_logger
from release_reconciler.utils.polling import wait_for_tag


class TagReleaseService(Service):
    """Verifies that a release version, its branch and its built images agree, then promotes them.

    The git phase resolves the branch head and creates (or checks) the
    immutable version tag. The commit it settles on is then compared with the
    commit label of the candidate image in every registry repository, in
    order, before the release tag is moved there. The first mismatch stops the
    run; repositories already promoted stay promoted.
    """

    def __init__(
        self,
        references: ReferenceSource,
        tags: TagStore,
        labels: ManifestLabelReader,
        git_repository: GitRepository,
        options: TagReleaseOptions,
        scope: CancellationScope | None = None,
    ):
        self.references: ReferenceSource = references
        self.tags: TagStore = tags
        self.labels: ManifestLabelReader = labels
        self.git_repository: GitRepository = git_repository
        self.options: TagReleaseOptions = options
        self.scope: CancellationScope = scope or CancellationScope()
        self.logger: logging.Logger = setup_logger("TagReleaseService")
        self.report: ReleaseReport = ReleaseReport(release_version=options.release_version)

    @override
    def run(self) -> ReleaseReport:
        self.report = ReleaseReport(release_version=self.options.release_version)
        commit_sha = self.reconcile_git_tag()
        self.report.commit_sha = commit_sha
        self.reconcile_registry(commit_sha)

        failure = self.report.first_failure()
        if failure and failure.error:
            raise failure.error
        return self.report

    def reconcile_git_tag(self) -> str:
        """Return the commit the release version is tagged at, creating the tag if needed."""
        version = self.options.release_version
        repo_name = self.git_repository.full_name

        branch = self._resolve(branch_ref(self.options.branch))
        if branch is None:
            raise ReferenceNotFoundError(f"Branch {self.options.branch} not found", phase="git", repository=repo_name)
        self.logger.info(f"Branch {self.options.branch} of {repo_name} is at {branch.commit_sha}")

        existing = self._resolve(tag_ref(version))
        if existing is None:
            if self.options.dry_run:
                self.logger.info(f"Dry run mode. tag {version} on {branch.commit_sha} in repo {repo_name} has not been created")
                return branch.commit_sha
            created = self._git_call(self.references.create_reference, tag_ref(version), branch.commit_sha)
            self.report.git_tag_created = True
            self.logger.info(f"Created tag {version} on {created.commit_sha} in repo {repo_name}")
            return created.commit_sha

        if existing.commit_sha != branch.commit_sha:
            raise ReferenceMismatchError(
                f"Tag {version} already points at {existing.commit_sha} "
                f"but branch {self.options.branch} is at {branch.commit_sha}",
                phase="git",
                repository=repo_name,
            )
        self.logger.info(f"Tag {version} already exists on {existing.commit_sha} in repo {repo_name}")
        return existing.commit_sha

    def reconcile_registry(self, commit_sha: str) -> None:
        repositories = self.options.registry_repositories
        if not repositories:
            self.logger.info("No registry repositories configured, skipping image promotion")
            return

        self.report.repositories = [RepositoryResult(repository=repo) for repo in repositories]
        for index, repository in enumerate(repositories):
            try:
                result = self.promote(repository, commit_sha)
            except ReconciliationError as e:
                self.logger.error(f"Promotion of {repository} failed: {e}")
                self.report.repositories[index] = RepositoryResult(
                    repository=repository, outcome=RepositoryOutcome.FAILED, error=e
                )
                return
            except Exception as e:
                self.logger.error(f"Promotion of {repository} failed unexpectedly: {e}")
                self.report.repositories[index] = RepositoryResult(
                    repository=repository, outcome=RepositoryOutcome.FAILED, error=e
                )
                raise
            self.report.repositories[index] = result

    def promote(self, repository: str, commit_sha: str) -> RepositoryResult:
        version = self.options.release_version
        candidate_tag = self.options.candidate_tag
        label_key = self.options.commit_label_key

        candidate = self._find_tag(repository, candidate_tag)
        if candidate is None:
            self.logger.info(f"No image tagged {candidate_tag} in {repository}, nothing to promote")
            return RepositoryResult(repository=repository, outcome=RepositoryOutcome.SKIPPED)
        digest = candidate.manifest_digest

        labels = self._registry_call(
            repository, self.labels.list_manifest_labels, self.scope, repository, digest, label_key
        )
        image_sha = next((label.value for label in labels if label.key == label_key), None)
        if image_sha != commit_sha:
            raise ImageMismatchError(
                f"Image {candidate_tag} ({digest}) was built from commit {image_sha or 'unknown'}, "
                f"expected {commit_sha}",
                phase="registry",
                repository=repository,
            )

        current = self._find_tag(repository, version)
        if current is not None and current.manifest_digest == digest:
            self.logger.info(f"Tag {version} already points at {digest} in {repository}")
            return RepositoryResult(repository=repository, outcome=RepositoryOutcome.PROMOTED, manifest_digest=digest)

        if self.options.dry_run:
            self.logger.info(f"Dry run mode. tag {version} on {digest} in repo {repository} has not been created")
            return RepositoryResult(repository=repository, outcome=RepositoryOutcome.PROMOTED, manifest_digest=digest)

        self._registry_call(repository, self.tags.create_or_move_tag, self.scope, repository, version, digest)
        self.logger.info(f"Promoted {repository}:{candidate_tag} to {version} ({digest})")

        if self.options.wait:
            self._registry_call(
                repository, wait_for_tag, self.scope, self.tags, repository, version, digest, self.options.wait_policy
            )
        return RepositoryResult(repository=repository, outcome=RepositoryOutcome.PROMOTED, manifest_digest=digest)

    def _resolve(self, ref_name: str) -> GitReference | None:
        return self._git_call(self.references.resolve_reference, ref_name)

    def _find_tag(self, repository: str, tag_name: str) -> RegistryTag | None:
        tags = self._registry_call(repository, self.tags.list_tags, self.scope, repository, tag_name)
        return next((t for t in tags if t.name == tag_name), None)

    def _git_call(self, operation: Callable[..., Any], *args: Any) -> Any:
        try:
            self.scope.raise_if_cancelled()
            return operation(self.scope, self.git_repository, *args)
        except TransportError as e:
            raise TransportError(
                e.message, status_code=e.status_code, phase="git", repository=self.git_repository.full_name
            ) from e
        except ReconciliationCancelledError as e:
            raise ReconciliationCancelledError(e.message, phase="git", repository=self.git_repository.full_name) from e

    def _registry_call(self, repository: str, operation: Callable[..., Any], *args: Any) -> Any:
        try:
            self.scope.raise_if_cancelled()
            return operation(*args)
        except TransportError as e:
            raise TransportError(e.message, status_code=e.status_code, phase="registry", repository=repository) from e
        except ReconciliationCancelledError as e:
            raise ReconciliationCancelledError(e.message, phase="registry", repository=repository) from e
