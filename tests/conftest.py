from argparse import Namespace
from typing import Dict, List, Optional

import pytest

from cloud_deploy_release.input_output.input import CreateCloudDeployReleaseArgumentParser
from cloud_deploy_release.utils.cmd import GCloudCommand, ToolExecutionResult
from cloud_deploy_release.utils.github_environment_variables import GitHubContext
from cloud_deploy_release.utils.install_gcloud import GCloudInstaller

RELEASE_NAME = "projects/my-project/locations/us-central1/deliveryPipelines/delivery-pipeline/releases/release-001"

FAKE_INPUTS = {
    "name": "release-001",
    "delivery_pipeline": "delivery-pipeline",
    "region": "us-central1",
    "source": "src",
    "build_artifacts": "artifacts.json",
}


class FakeGCloud(GCloudCommand):
    def __init__(self, results: Optional[List[ToolExecutionResult]] = None):
        super().__init__("gcloud")
        self.results = list(results or [])
        self.calls: List[List[str]] = []
        self.envs: List[Dict[str, str]] = []

    def run(self, args: List[str], env: Optional[Dict[str, str]] = None) -> ToolExecutionResult:
        self.calls.append(list(args))
        self.envs.append(dict(env or {}))
        if self.results:
            return self.results.pop(0)
        return ToolExecutionResult(exit_code=0, stdout=f'{{"name": "{RELEASE_NAME}"}}', stderr="")


class FakeInstaller(GCloudInstaller):
    def __init__(self, runner: GCloudCommand, installed: bool = True):
        super().__init__(runner, tool_cache="/nonexistent")
        self.installed = installed
        self.calls: List[tuple] = []

    def get_latest_version(self) -> str:
        self.calls.append(("get_latest_version",))
        return "1.2.3"

    def is_installed(self, version: str) -> bool:
        return self.installed

    def install(self, version: str) -> str:
        self.calls.append(("install", version))
        return f"/tool-cache/gcloud/{version}"

    def use_cached(self, version: str) -> str:
        self.calls.append(("use_cached", version))
        return f"/tool-cache/gcloud/{version}"


def make_args(**overrides: str) -> Namespace:
    inputs: Dict[str, str] = {**FAKE_INPUTS, **overrides}
    argv = [f"--{key.replace('_', '-')}={value}" for key, value in inputs.items()]
    return CreateCloudDeployReleaseArgumentParser().parse_args(argv)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    for name in CreateCloudDeployReleaseArgumentParser.INPUTS:
        monkeypatch.delenv(f"INPUT_{name.upper()}", raising=False)
    for name in ("GITHUB_OUTPUT", "GITHUB_PATH", "GOOGLE_GHA_CREDS_PATH",
                 "CLOUDSDK_METRICS_ENVIRONMENT", "CLOUDSDK_METRICS_ENVIRONMENT_VERSION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def github_context() -> GitHubContext:
    return GitHubContext(
        server_url="https://github.com",
        repository="test-org/test-repo",
        repository_owner="test-org",
        sha="abcdef123456",
    )


@pytest.fixture()
def gcloud() -> FakeGCloud:
    return FakeGCloud()


@pytest.fixture()
def installer(gcloud: FakeGCloud) -> FakeInstaller:
    return FakeInstaller(gcloud)
