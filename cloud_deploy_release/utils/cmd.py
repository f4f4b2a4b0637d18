import os
import platform
import shlex
import subprocess

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence


class CMDInterface(ABC):
    @abstractmethod
    def execute(self):
        pass


@dataclass(frozen=True)
class ToolExecutionResult:
    exit_code: int
    stdout: str
    stderr: str


def get_tool_command() -> str:
    return "gcloud.cmd" if platform.system() == "Windows" else "gcloud"


class GCloudCommand:
    """Runs gcloud and captures its output. A non-zero exit code is returned, never raised."""

    def __init__(self, tool_command: Optional[str] = None):
        self.tool_command = tool_command or get_tool_command()

    def command_string(self, args: Sequence[str]) -> str:
        return " ".join([self.tool_command, *[shlex.quote(arg) for arg in args]])

    def run(self, args: List[str], env: Optional[Dict[str, str]] = None) -> ToolExecutionResult:
        """env is layered over the current process environment."""
        try:
            result = subprocess.run([self.tool_command, *args], check=False, text=True,
                                    env={**os.environ, **(env or {})},
                                    stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except OSError as err:
            return ToolExecutionResult(exit_code=127, stdout="", stderr=f"{err}")

        return ToolExecutionResult(exit_code=result.returncode, stdout=result.stdout, stderr=result.stderr)
