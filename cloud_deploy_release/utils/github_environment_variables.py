# GITHUB_ACTION_REF=v1
# GITHUB_REPOSITORY=octocat/Hello-World
# GITHUB_REPOSITORY_OWNER=octocat
# GITHUB_SERVER_URL=https://github.com
# GITHUB_SHA=ffac537e6cbbf934b08745a378932722df287a53

import os

from dataclasses import dataclass
from typing import Optional

from git import Repo, InvalidGitRepositoryError, NoSuchPathError


@dataclass
class GitHubContext:
    server_url: str
    repository: str
    repository_owner: str
    sha: str
    action_ref: str = ""

    @staticmethod
    def from_env(workspace: Optional[str] = None) -> "GitHubContext":
        required_env_vars = [
            "GITHUB_REPOSITORY",
            "GITHUB_SERVER_URL",
        ]

        missing_vars = [var for var in required_env_vars if not os.getenv(var)]
        if missing_vars:
            raise ValueError(f"missing required environment variables: {', '.join(missing_vars)}")

        repository = os.getenv("GITHUB_REPOSITORY")
        return GitHubContext(
            server_url=os.getenv("GITHUB_SERVER_URL").rstrip("/"),
            repository=repository,
            repository_owner=os.getenv("GITHUB_REPOSITORY_OWNER") or repository.split("/")[0],
            sha=os.getenv("GITHUB_SHA") or GitHubContext.head_commit_sha(workspace or os.getenv("GITHUB_WORKSPACE", ".")),
            action_ref=os.getenv("GITHUB_ACTION_REF", ""),
        )

    @staticmethod
    def head_commit_sha(path: str) -> str:
        """Read the checked out commit when the runner did not export GITHUB_SHA."""
        try:
            return Repo(path, search_parent_directories=True).head.commit.hexsha
        except (InvalidGitRepositoryError, NoSuchPathError, ValueError) as err:
            raise ValueError(f"GITHUB_SHA is not set and no git commit found in '{path}': {err}")

    def validate_repository_format(self) -> bool:
        """Check if the repository follows the format 'owner/repo'."""
        return "/" in self.repository and len(self.repository.split("/")) == 2

    @property
    def repository_name(self) -> str:
        if self.validate_repository_format():
            return self.repository.split("/")[1]
        return self.repository

    def get_github_url(self) -> str:
        return f"{self.server_url}/{self.repository_owner}/{self.repository_name}"

    def get_commit_url(self) -> str:
        return f"{self.get_github_url()}/commit/{self.sha}"

    def is_pinned_to_head(self) -> bool:
        """The action is referenced by a branch head instead of a tag."""
        return self.action_ref in ("main", "master")
