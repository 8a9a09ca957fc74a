import os
import shutil

import pytest
from release_reconciler.models import ReleaseConfig, WaitPolicy
from release_reconciler.repositories import ReleaseConfigRepository

ASSETS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "assets")


@pytest.fixture
def config_file(tmp_path):
    source_file = os.path.join(ASSETS_DIR, "release.yaml")
    dest_file = tmp_path / "release.yaml"
    shutil.copy(source_file, dest_file)
    return dest_file


def test_load_config(config_file):
    config = ReleaseConfigRepository(str(config_file)).load()

    assert config.git.owner == "example-org"
    assert config.git.repository == "example-operator"
    assert config.registry.url == "https://registry.example.com"
    assert config.registry.repositories == ["example-org/example-operator"]
    assert config.registry.commit_label == "vcs-ref"
    assert config.wait == WaitPolicy(timeout_seconds=60, initial_interval_seconds=2)


def test_missing_file_returns_defaults():
    config = ReleaseConfigRepository("notexistingfile").load()

    assert config == ReleaseConfig()
    assert config.registry.repositories == [
        "integreatly/integreatly-operator",
        "integreatly/integreatly-operator-test-harness",
    ]


def test_empty_file_returns_defaults(tmp_path):
    empty = tmp_path / "release.yaml"
    empty.write_text("")

    assert ReleaseConfigRepository(str(empty)).load() == ReleaseConfig()


def test_invalid_config_schema(tmp_path):
    bad_file = tmp_path / "bad_release.yaml"
    bad_file.write_text("wait:\n  timeout_seconds: soon")

    with pytest.raises(ValueError, match="Invalid release config structure"):
        ReleaseConfigRepository(str(bad_file)).load()
