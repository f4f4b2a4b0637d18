class CloudDeployReleaseError(ValueError):
    """Base class for every failure reported by the action."""


class ValidationError(CloudDeployReleaseError):
    """Action inputs are missing, conflicting or malformed."""


class MalformedPairError(ValidationError):
    """A KEY=VALUE list or a flags string could not be parsed."""


class ToolInstallError(CloudDeployReleaseError):
    """The gcloud SDK or one of its components could not be installed."""


class AuthenticationError(CloudDeployReleaseError):
    """gcloud rejected the credentials file."""


class ExecutionError(CloudDeployReleaseError):
    """gcloud exited with a non-zero code."""


class ParseError(CloudDeployReleaseError):
    """The output of the create release command could not be understood."""
