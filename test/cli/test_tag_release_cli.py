import os
from unittest.mock import patch

import pytest
import tag_release
from release_reconciler.errors import ImageMismatchError
from release_reconciler.models import ReleaseReport

ASSETS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "assets")


@pytest.fixture
def mock_service(monkeypatch):
    monkeypatch.setenv("RELEASE_CONFIG_FILE", os.path.join(ASSETS_DIR, "release.yaml"))
    with patch("tag_release.GitHubClient"), \
         patch("tag_release.QuayClient"), \
         patch("tag_release.TagReleaseService") as mock:
        mock.return_value.run.return_value = ReleaseReport(release_version="2.0.0-rc1", commit_sha="testsha")
        yield mock


def test_main_success(mock_service):
    assert tag_release.main(["--release-version", "2.0.0-rc1", "--wait", "--wait-timeout", "30"]) == 0

    kwargs = mock_service.call_args.kwargs
    options = kwargs["options"]
    assert options.release_version == "2.0.0-rc1"
    assert options.branch == "master"
    assert options.wait is True
    assert options.registry_repositories == ["example-org/example-operator"]
    assert options.commit_label_key == "vcs-ref"
    assert options.wait_policy.timeout_seconds == 30
    assert options.wait_policy.initial_interval_seconds == 2
    assert kwargs["git_repository"].full_name == "example-org/example-operator"


def test_cli_flags_override_config(mock_service):
    assert tag_release.main([
        "--release-version", "2.0.0",
        "--branch", "release-v2.0",
        "--quay-repos", "a/b,c/d",
        "--owner", "acme",
        "--repo", "operator",
        "--source-tag", "build-42",
        "--dry-run",
    ]) == 0

    kwargs = mock_service.call_args.kwargs
    assert kwargs["options"].registry_repositories == ["a/b", "c/d"]
    assert kwargs["options"].candidate_tag == "build-42"
    assert kwargs["options"].dry_run is True
    assert kwargs["git_repository"].full_name == "acme/operator"


def test_empty_quay_repos_disables_registry_phase(mock_service):
    assert tag_release.main(["--release-version", "2.0.0", "--quay-repos", ""]) == 0
    assert mock_service.call_args.kwargs["options"].registry_repositories == []


def test_main_failure(mock_service):
    mock_service.return_value.run.side_effect = ImageMismatchError("wrong commit", phase="registry", repository="a/b")
    assert tag_release.main(["--release-version", "2.0.0"]) == 1
