import os
import logging
from github import Github, GithubException, GithubIntegration, Repository

from release_reconciler.errors import TransportError
from release_reconciler.models import GitReference, GitRepository
from release_reconciler.utils.cancellation import CancellationScope

logger = logging.getLogger(__name__)


class GitHubClient:
    def __init__(self):
        app_id = os.getenv("GITHUB_APP_ID")
        install_id = os.getenv("GITHUB_APP_INSTALLATION_ID")
        private_key = os.getenv("GITHUB_APP_PRIVATE_KEY")
        token = os.getenv("GITHUB_TOKEN")
        if app_id and install_id and private_key:
            integration = GithubIntegration(int(app_id), private_key)
            token = integration.get_access_token(int(install_id)).token
        elif not token:
            logger.error("GitHub App credentials or GITHUB_TOKEN env var are mandatory")
            raise EnvironmentError("Missing GitHub credentials")
        self.client: Github = Github(token)

    def get_repo(self, full_name: str) -> Repository.Repository:
        return self.client.get_repo(full_name)


class GitHubReferenceClient:
    """Git reference access through the GitHub REST API."""

    def __init__(self, github: GitHubClient):
        self.github: GitHubClient = github

    def resolve_reference(self, scope: CancellationScope, repository: GitRepository, ref_name: str) -> GitReference | None:
        scope.raise_if_cancelled()
        try:
            gh_repo = self.github.get_repo(repository.full_name)
            # matching refs are prefix matches, e.g. tags/2.0.0 also yields tags/2.0.0-rc1
            matches = gh_repo.get_git_matching_refs(ref_name.removeprefix("refs/"))
            git_ref = next((r for r in matches if r.ref == ref_name), None)
            if git_ref is None:
                logger.debug(f"Reference {ref_name} not found in {repository.full_name}")
                return None
            sha = git_ref.object.sha
            if git_ref.object.type == "tag":
                scope.raise_if_cancelled()
                sha = gh_repo.get_git_tag(sha).object.sha
            return GitReference(name=git_ref.ref, commit_sha=sha)
        except GithubException as e:
            raise TransportError(
                f"Failed to resolve {ref_name} in {repository.full_name}: {e}", status_code=e.status
            ) from e

    def create_reference(
        self, scope: CancellationScope, repository: GitRepository, ref_name: str, commit_sha: str
    ) -> GitReference:
        scope.raise_if_cancelled()
        try:
            gh_repo = self.github.get_repo(repository.full_name)
            git_ref = gh_repo.create_git_ref(ref_name, commit_sha)
            logger.info(f"Created {ref_name} at {commit_sha} in {repository.full_name}")
            return GitReference(name=git_ref.ref, commit_sha=git_ref.object.sha)
        except GithubException as e:
            raise TransportError(
                f"Failed to create {ref_name} in {repository.full_name}: {e}", status_code=e.status
            ) from e
