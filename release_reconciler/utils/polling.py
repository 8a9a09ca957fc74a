import logging

from release_reconciler.clients.protocols import TagStore
from release_reconciler.errors import WaitTimeoutError
from release_reconciler.models import WaitPolicy
from release_reconciler.utils.cancellation import CancellationScope

logger = logging.getLogger(__name__)


def tag_points_at(tags: TagStore, scope: CancellationScope, repository: str, tag_name: str, manifest_digest: str) -> bool:
    return any(
        t.name == tag_name and t.manifest_digest == manifest_digest
        for t in tags.list_tags(scope, repository, specific_tag=tag_name)
    )


def wait_for_tag(
    scope: CancellationScope,
    tags: TagStore,
    repository: str,
    tag_name: str,
    manifest_digest: str,
    policy: WaitPolicy,
) -> None:
    """Block until ``tag_name`` points at ``manifest_digest`` in ``repository``.

    Raises WaitTimeoutError once ``policy.timeout_seconds`` elapse, and
    ReconciliationCancelledError as soon as the scope is cancelled.
    """
    deadline = scope.now() + policy.timeout_seconds
    attempt = 0
    for interval in policy.intervals():
        attempt += 1
        if tag_points_at(tags, scope, repository, tag_name, manifest_digest):
            logger.info(f"Tag {tag_name} visible in {repository} after {attempt} attempt(s)")
            return
        remaining = deadline - scope.now()
        if remaining <= 0:
            raise WaitTimeoutError(
                f"Tag {tag_name} did not point at {manifest_digest} within {policy.timeout_seconds}s",
                phase="registry",
                repository=repository,
            )
        logger.debug(f"Tag {tag_name} not visible yet in {repository}, retrying in {min(interval, remaining):.1f}s")
        scope.sleep(min(interval, remaining))
