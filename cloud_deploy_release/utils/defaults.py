from typing import Dict

from cloud_deploy_release.utils.github_environment_variables import GitHubContext

DEFAULT_LABELS = {
    "managed-by": "github-actions",
}


def default_annotations(github_context: GitHubContext) -> Dict[str, str]:
    """Annotations linking the release back to the commit it was created from."""
    return {
        "commit": github_context.get_commit_url(),
        "git-sha": github_context.sha,
    }


def default_labels() -> Dict[str, str]:
    # Cloud Deploy only accepts lowercase label values
    return {key: value.lower() for key, value in DEFAULT_LABELS.items() if value}
