import os

import pytest

from git import Actor, Repo

from cloud_deploy_release.utils import defaults
from cloud_deploy_release.utils.defaults import default_annotations, default_labels
from cloud_deploy_release.utils.environment import METRICS_ENVIRONMENT, ScopedEnvironment
from cloud_deploy_release.utils.github_environment_variables import GitHubContext


@pytest.fixture()
def github_env(monkeypatch):
    monkeypatch.setenv("GITHUB_SERVER_URL", "https://github.example.com/")
    monkeypatch.setenv("GITHUB_REPOSITORY", "test-org/test-repo")
    monkeypatch.delenv("GITHUB_REPOSITORY_OWNER", raising=False)
    monkeypatch.setenv("GITHUB_SHA", "abcdef123456")
    monkeypatch.setenv("GITHUB_ACTION_REF", "v1")


def test_from_env(github_env):
    context = GitHubContext.from_env()
    assert context.server_url == "https://github.example.com"
    assert context.repository_owner == "test-org"
    assert context.repository_name == "test-repo"
    assert context.sha == "abcdef123456"
    assert context.get_commit_url() == "https://github.example.com/test-org/test-repo/commit/abcdef123456"
    assert not context.is_pinned_to_head()


def test_from_env_missing_variables(monkeypatch):
    monkeypatch.delenv("GITHUB_SERVER_URL", raising=False)
    monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)
    with pytest.raises(ValueError, match="missing required environment variables: GITHUB_REPOSITORY, GITHUB_SERVER_URL"):
        GitHubContext.from_env()


def test_sha_falls_back_to_git_checkout(github_env, monkeypatch, tmp_path):
    monkeypatch.delenv("GITHUB_SHA")
    repo = Repo.init(tmp_path)
    (tmp_path / "README.md").write_text("readme\n")
    repo.index.add(["README.md"])
    actor = Actor("github-actions", "github-actions@github.com")
    commit = repo.index.commit("initial commit", author=actor, committer=actor)

    assert GitHubContext.from_env(workspace=str(tmp_path)).sha == commit.hexsha


def test_sha_without_git_checkout(github_env, monkeypatch, tmp_path):
    monkeypatch.delenv("GITHUB_SHA")
    with pytest.raises(ValueError, match="GITHUB_SHA is not set"):
        GitHubContext.from_env(workspace=str(tmp_path / "missing"))


@pytest.mark.parametrize("ref, pinned", [("main", True), ("master", True), ("v1", False), ("", False)])
def test_is_pinned_to_head(ref, pinned):
    context = GitHubContext("https://github.com", "o/r", "o", "sha", action_ref=ref)
    assert context.is_pinned_to_head() is pinned


def test_default_annotations(github_context):
    assert default_annotations(github_context) == {
        "commit": "https://github.com/test-org/test-repo/commit/abcdef123456",
        "git-sha": "abcdef123456",
    }


def test_default_labels_are_lowercase(monkeypatch):
    monkeypatch.setattr(defaults, "DEFAULT_LABELS", {"managed-by": "GitHub-Actions", "empty": ""})
    assert default_labels() == {"managed-by": "github-actions"}


def test_default_labels():
    labels = default_labels()
    assert labels == {"managed-by": "github-actions"}
    assert all(value == value.lower() for value in labels.values())


def test_scoped_environment_restores_values(monkeypatch):
    monkeypatch.setenv("CLOUDSDK_METRICS_ENVIRONMENT", "previous")

    with pytest.raises(RuntimeError):
        with ScopedEnvironment() as values:
            assert values == METRICS_ENVIRONMENT
            for key, value in METRICS_ENVIRONMENT.items():
                assert os.environ[key] == value
            raise RuntimeError("boom")

    assert os.environ["CLOUDSDK_METRICS_ENVIRONMENT"] == "previous"
    assert "CLOUDSDK_METRICS_ENVIRONMENT_VERSION" not in os.environ


def test_scoped_environment_custom_values(monkeypatch):
    monkeypatch.delenv("CUSTOM_MARKER", raising=False)
    with ScopedEnvironment({"CUSTOM_MARKER": "1"}):
        assert os.environ["CUSTOM_MARKER"] == "1"
    assert "CUSTOM_MARKER" not in os.environ
