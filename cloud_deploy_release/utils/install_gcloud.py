import os
import platform
import shutil
import tarfile
import tempfile

from typing import Dict, Optional

import requests

from packaging import version as versions

from cloud_deploy_release.input_output.output import add_path, log_info
from cloud_deploy_release.utils.cmd import GCloudCommand
from cloud_deploy_release.utils.errors import AuthenticationError, ToolInstallError, ValidationError


class GCloudInstaller:
    TOOL_NAME = "gcloud"
    VERSION_URL = "https://dl.google.com/dl/cloudsdk/channels/rapid/components-2.json"
    DOWNLOAD_URL = "https://dl.google.com/dl/cloudsdk/channels/rapid/downloads"

    def __init__(self, runner: Optional[GCloudCommand] = None, tool_cache: Optional[str] = None):
        self.runner = runner or GCloudCommand()
        self.tool_cache = tool_cache or os.environ.get("RUNNER_TOOL_CACHE") \
            or os.path.join(os.path.expanduser("~"), ".cache", "gcloud-tool-cache")

    @staticmethod
    def platform_name() -> str:
        system = platform.system()
        match system:
            case "Linux":
                return "linux"
            case "Darwin":
                return "darwin"
            case _:
                raise ToolInstallError(f"unsupported platform for gcloud installation: {system}")

    @staticmethod
    def arch_name() -> str:
        machine = platform.machine().lower()
        match machine:
            case "x86_64" | "amd64":
                return "x86_64"
            case "arm64" | "aarch64":
                return "arm"
            case "i386" | "i686" | "x86":
                return "x86"
            case _:
                raise ToolInstallError(f"unsupported architecture for gcloud installation: {machine}")

    def get_latest_version(self) -> str:
        log_info("Resolving latest gcloud version...")
        try:
            response = requests.get(self.VERSION_URL)
            response.raise_for_status()
            latest = response.json()["version"]
        except requests.RequestException as err:
            raise ToolInstallError(f"error fetching latest gcloud version:\n{err}")
        except (KeyError, ValueError) as err:
            raise ToolInstallError(f"unexpected response from {self.VERSION_URL}: {err}")

        log_info(f"Latest gcloud version is {latest}")
        return latest

    def resolve_version(self, requested: Optional[str]) -> str:
        requested = (requested or "").strip()
        if requested in ("", "latest"):
            return self.get_latest_version()

        try:
            versions.Version(requested)
        except versions.InvalidVersion:
            raise ValidationError(f"invalid input received for gcloud_version: {requested}")
        return requested

    def install_dir(self, version: str) -> str:
        return os.path.join(self.tool_cache, self.TOOL_NAME, version, self.arch_name())

    def find_cached(self, version: str) -> Optional[str]:
        path = self.install_dir(version)
        if os.path.isdir(path) and os.path.isfile(f"{path}.complete"):
            return path
        return None

    def is_installed(self, version: str) -> bool:
        return self.find_cached(version) is not None

    def use_cached(self, version: str) -> str:
        path = self.find_cached(version)
        if not path:
            raise ToolInstallError(f"gcloud {version} is not in the tool cache")

        log_info(f"Using cached gcloud {version} from {path}")
        add_path(os.path.join(path, "bin"))
        return path

    def download_url(self, version: str) -> str:
        return f"{self.DOWNLOAD_URL}/google-cloud-sdk-{version}-{self.platform_name()}-{self.arch_name()}.tar.gz"

    def install(self, version: str) -> str:
        url = self.download_url(version)
        log_info(f"Installing gcloud {version} from {url}")
        destination = self.install_dir(version)

        with tempfile.TemporaryDirectory() as workdir:
            archive = os.path.join(workdir, "google-cloud-sdk.tar.gz")
            try:
                with requests.get(url, stream=True) as response:
                    response.raise_for_status()
                    with open(archive, "wb") as f:
                        for chunk in response.iter_content(chunk_size=1024 * 1024):
                            f.write(chunk)
            except requests.RequestException as err:
                raise ToolInstallError(f"error downloading gcloud {version}:\n{err}")

            try:
                with tarfile.open(archive) as tar:
                    tar.extractall(workdir, filter="data")
            except (tarfile.TarError, OSError) as err:
                raise ToolInstallError(f"error extracting gcloud {version}:\n{err}")

            extracted = os.path.join(workdir, "google-cloud-sdk")
            if not os.path.isdir(extracted):
                raise ToolInstallError(f"gcloud archive {url} has no google-cloud-sdk directory")

            shutil.rmtree(destination, ignore_errors=True)
            os.makedirs(os.path.dirname(destination), exist_ok=True)
            shutil.move(extracted, destination)

        with open(f"{destination}.complete", "w"):
            pass

        add_path(os.path.join(destination, "bin"))
        return destination

    def install_component(self, component: str, env: Optional[Dict[str, str]] = None):
        log_info(f"Installing gcloud component: {component}")
        result = self.runner.run(["--quiet", "components", "install", component], env=env)
        if result.exit_code != 0:
            raise ToolInstallError(f"failed to install gcloud component {component}: "
                                   f"{result.stderr or f'command exited {result.exit_code}'}")

    def authenticate(self, cred_file: str, env: Optional[Dict[str, str]] = None):
        result = self.runner.run(["--quiet", "auth", "login", "--cred-file", cred_file], env=env)
        if result.exit_code != 0:
            raise AuthenticationError(f"failed to authenticate gcloud with {cred_file}: "
                                      f"{result.stderr or f'command exited {result.exit_code}'}")
