import os
import sys

from typing import Dict, Optional


def log_info(message: str):
    print(message)


def log_warning(message: str):
    print(f"::warning::{message}")


def log_error(message: str):
    print(f"::error::{message}", file=sys.stderr)


def add_path(path: str):
    """Prepend a directory to PATH for this process and for the following workflow steps."""
    os.environ["PATH"] = os.pathsep.join([path, os.environ.get("PATH", "")])
    if "GITHUB_PATH" in os.environ:
        with open(os.environ["GITHUB_PATH"], "a") as f:
            print(path, file=f)


class GitHubOutput:
    def __init__(self):
        self.is_github_actions_runner = "GITHUB_OUTPUT" in os.environ

    def output_dict(self, body: Dict[str, Optional[str]]):
        if self.is_github_actions_runner:
            with open(os.environ["GITHUB_OUTPUT"], "a") as f:
                for key, value in body.items():
                    if value is None:
                        continue
                    log_info(f"Setting output key {key}")
                    print(f"{key}={value}", file=f)
        else:
            print("Skip output as GitHub Actions outputs.")
            for key, value in body.items():
                print(f"{key}: {value}")
