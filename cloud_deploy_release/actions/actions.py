import os

from argparse import Namespace
from enum import Enum
from typing import Dict, List, Optional

from cloud_deploy_release.actions.output_parser import ReleaseOutcome, parse_create_release_response
from cloud_deploy_release.actions.release import ReleaseRequest, build_create_release_command
from cloud_deploy_release.input_output.output import GitHubOutput, log_error, log_info, log_warning
from cloud_deploy_release.utils.cmd import CMDInterface, GCloudCommand
from cloud_deploy_release.utils.environment import APP_NAME, ScopedEnvironment
from cloud_deploy_release.utils.errors import ExecutionError
from cloud_deploy_release.utils.github_environment_variables import GitHubContext
from cloud_deploy_release.utils.install_gcloud import GCloudInstaller

CREDENTIALS_ENV = "GOOGLE_GHA_CREDS_PATH"


class State(Enum):
    INIT = "init"
    VALIDATING = "validating"
    RESOLVING_TOOL = "resolving_tool"
    AUTHENTICATING = "authenticating"
    EXECUTING = "executing"
    PARSING = "parsing"
    PUBLISHING_OUTPUTS = "publishing_outputs"
    DONE = "done"
    FAILED = "failed"


class CreateReleaseExecutor(CMDInterface):
    def __init__(self, args: Namespace, github_context: Optional[GitHubContext] = None,
                 installer: Optional[GCloudInstaller] = None, runner: Optional[GCloudCommand] = None,
                 output: Optional[GitHubOutput] = None):
        self.args = args
        self.github_context = github_context
        self.runner = runner or GCloudCommand()
        self.installer = installer or GCloudInstaller(self.runner)
        self.output = output or GitHubOutput()
        self.state = State.INIT
        self.failed_state: Optional[State] = None
        self.tool_env: Dict[str, str] = {}

    def _transition(self, state: State):
        self.state = state

    def execute(self) -> ReleaseOutcome:
        try:
            with ScopedEnvironment() as self.tool_env:
                self._transition(State.VALIDATING)
                request = self.validate()

                self._transition(State.RESOLVING_TOOL)
                self.setup_gcloud(request)

                self._transition(State.AUTHENTICATING)
                self.authenticate()

                self._transition(State.EXECUTING)
                stdout = self.create_release(build_create_release_command(request))

                self._transition(State.PARSING)
                outcome = parse_create_release_response(stdout)

                self._transition(State.PUBLISHING_OUTPUTS)
                self.output.output_dict(outcome.to_dict())
        except Exception:
            self.failed_state = self.state
            self._transition(State.FAILED)
            raise
        finally:
            self.tool_env = {}

        self._transition(State.DONE)
        return outcome

    def validate(self) -> ReleaseRequest:
        # required inputs are reported before anything is read from the runner environment
        ReleaseRequest.check_inputs(self.args)
        if self.github_context is None:
            self.github_context = GitHubContext.from_env()

        if self.github_context.is_pinned_to_head():
            log_warning(f"{APP_NAME} is pinned at HEAD. We strongly advise against pinning to "
                        f"\"@{self.github_context.action_ref}\" as it may be unstable. "
                        f"Please update your GitHub Action YAML from \"@{self.github_context.action_ref}\" "
                        f"to \"@v1\".")

        return ReleaseRequest.from_args(self.args, self.github_context)

    def setup_gcloud(self, request: ReleaseRequest):
        gcloud_version = self.installer.resolve_version(self.args.gcloud_version)

        if not self.installer.is_installed(gcloud_version):
            self.installer.install(gcloud_version)
        else:
            self.installer.use_cached(gcloud_version)

        if request.component:
            self.installer.install_component(request.component, env=self.tool_env)

    def authenticate(self):
        cred_file = os.environ.get(CREDENTIALS_ENV)
        if cred_file:
            self.installer.authenticate(cred_file, env=self.tool_env)
            log_info("Successfully authenticated")
        else:
            log_warning("No authentication found, authenticate with `google-github-actions/auth`.")

    def create_release(self, cmd: List[str]) -> str:
        command_string = self.runner.command_string(cmd)
        log_info(f"Running: {command_string}")

        result = self.runner.run(cmd, env=self.tool_env)
        if result.exit_code != 0:
            message = result.stderr or f"command exited {result.exit_code}, but stderr had no output"
            raise ExecutionError(f"failed to execute gcloud command `{command_string}`: {message}")

        return result.stdout


def run(args: Namespace, **kwargs) -> int:
    """Execute the action and report any failure as a single message. Returns the process exit code."""
    try:
        CreateReleaseExecutor(args, **kwargs).execute()
    except Exception as err:
        log_error(f"{APP_NAME} failed with: {err}")
        return 1
    return 0
