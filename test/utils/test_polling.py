from unittest.mock import MagicMock

import pytest
from release_reconciler.errors import ReconciliationCancelledError, WaitTimeoutError
from release_reconciler.models import RegistryTag, WaitPolicy
from release_reconciler.utils.cancellation import CancellationScope
from release_reconciler.utils.polling import wait_for_tag

REPO = "integreatly/integreatly-operator"
FAST = WaitPolicy(timeout_seconds=1, initial_interval_seconds=0.01, max_interval_seconds=0.01)


def test_wait_returns_once_tag_is_visible():
    tags = MagicMock()
    tags.list_tags.side_effect = [
        [],
        [RegistryTag(name="2.0.0", manifest_digest="olddigest")],
        [RegistryTag(name="2.0.0", manifest_digest="testdigest")],
    ]

    wait_for_tag(CancellationScope(), tags, REPO, "2.0.0", "testdigest", FAST)

    assert tags.list_tags.call_count == 3


def test_wait_times_out():
    tags = MagicMock()
    tags.list_tags.return_value = []
    policy = WaitPolicy(timeout_seconds=0.03, initial_interval_seconds=0.01, max_interval_seconds=0.01)

    with pytest.raises(WaitTimeoutError) as excinfo:
        wait_for_tag(CancellationScope(), tags, REPO, "2.0.0", "testdigest", policy)

    assert excinfo.value.repository == REPO
    assert tags.list_tags.call_count >= 2


def test_wait_is_interrupted_by_cancellation():
    scope = CancellationScope()
    tags = MagicMock()

    def list_and_cancel(*args, **kwargs):
        scope.cancel()
        return []

    tags.list_tags.side_effect = list_and_cancel

    with pytest.raises(ReconciliationCancelledError):
        wait_for_tag(scope, tags, REPO, "2.0.0", "testdigest", WaitPolicy(timeout_seconds=60))

    assert tags.list_tags.call_count == 1


def test_wait_deadline_follows_scope_clock():
    clock = {"now": 0.0}
    scope = CancellationScope(clock=lambda: clock["now"])
    tags = MagicMock()

    def list_and_advance(*args, **kwargs):
        clock["now"] += 10
        return []

    tags.list_tags.side_effect = list_and_advance
    policy = WaitPolicy(timeout_seconds=15, initial_interval_seconds=0.001, max_interval_seconds=0.001)

    with pytest.raises(WaitTimeoutError):
        wait_for_tag(scope, tags, REPO, "2.0.0", "testdigest", policy)

    # deadline is 15 on the scope clock: checks at 10 and 20
    assert tags.list_tags.call_count == 2
