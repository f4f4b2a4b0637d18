from argparse import Namespace
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from cloud_deploy_release.utils.defaults import default_annotations, default_labels
from cloud_deploy_release.utils.errors import ValidationError
from cloud_deploy_release.utils.github_environment_variables import GitHubContext
from cloud_deploy_release.utils.kv import kv_to_string, parse_flags, parse_kv_string

GCLOUD_COMPONENTS = ("alpha", "beta")

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


@dataclass(frozen=True)
class BuildArtifacts:
    path: str


@dataclass(frozen=True)
class Images:
    images: Dict[str, str]


ReleaseSource = Union[BuildArtifacts, Images]


def parse_boolean_input(name: str, value: Optional[str]) -> bool:
    """Booleans follow the YAML 1.2 core schema, the same rule GitHub applies to action inputs."""
    value = (value or "").strip()
    if not value or value in FALSE_VALUES:
        return False
    if value in TRUE_VALUES:
        return True
    raise ValidationError(f"invalid input received for {name}: {value}, expected one of: true, false")


@dataclass(frozen=True)
class ReleaseRequest:
    name: str
    delivery_pipeline: str
    region: str
    release_source: ReleaseSource
    project_id: str = ""
    source: str = ""
    disable_initial_rollout: bool = False
    source_staging_dir: str = ""
    skaffold_file: str = ""
    annotations: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    description: str = ""
    deploy_parameters: Dict[str, str] = field(default_factory=dict)
    flags: Tuple[str, ...] = ()
    component: Optional[str] = None

    @staticmethod
    def check_inputs(args: Namespace) -> Tuple[str, Dict[str, str]]:
        """
        Run the required input checks in a fixed order, the first failing one is
        reported. Returns the build artifacts path and the parsed images.
        """
        build_artifacts = (args.build_artifacts or "").strip()
        component = (args.gcloud_component or "").strip()

        if not (args.name or "").strip():
            raise ValidationError("No release name set.")
        if not (args.delivery_pipeline or "").strip():
            raise ValidationError("No delivery pipeline set.")
        if not (args.region or "").strip():
            raise ValidationError("No region set.")

        images = parse_kv_string(args.images)
        if not build_artifacts and not images:
            raise ValidationError("One of `build_artifacts` and `images` inputs must be supplied.")
        if build_artifacts and images:
            raise ValidationError("Both `build_artifacts` and `images` inputs set - please select only one.")
        if component and component not in GCLOUD_COMPONENTS:
            raise ValidationError(f"invalid input received for gcloud_component: {component}")

        return build_artifacts, images

    @staticmethod
    def from_args(args: Namespace, github_context: Optional[GitHubContext] = None) -> "ReleaseRequest":
        """
        Validate raw action inputs. The CI context is only read from the
        environment once the required inputs are known to be valid.
        """
        build_artifacts, images = ReleaseRequest.check_inputs(args)
        release_source = BuildArtifacts(build_artifacts) if build_artifacts else Images(images)

        if github_context is None:
            github_context = GitHubContext.from_env()

        user_labels = {key.lower(): value.lower() for key, value in parse_kv_string(args.labels).items()}

        return ReleaseRequest(
            name=args.name.strip(),
            delivery_pipeline=args.delivery_pipeline.strip(),
            region=args.region.strip(),
            release_source=release_source,
            project_id=(args.project_id or "").strip(),
            source=(args.source or "").strip(),
            disable_initial_rollout=parse_boolean_input("disable_initial_rollout", args.disable_initial_rollout),
            source_staging_dir=(args.gcs_source_staging_dir or "").strip(),
            skaffold_file=(args.skaffold_file or "").strip(),
            annotations={**default_annotations(github_context), **parse_kv_string(args.annotations)},
            labels={**default_labels(), **user_labels},
            description=args.description or "",
            deploy_parameters=parse_kv_string(args.deploy_parameters),
            flags=tuple(parse_flags(args.flags)),
            component=(args.gcloud_component or "").strip() or None,
        )


def build_create_release_command(request: ReleaseRequest) -> List[str]:
    """Arguments for gcloud, without the executable itself."""
    cmd = ["deploy", "releases", "create", request.name,
           "--delivery-pipeline", request.delivery_pipeline]

    if request.project_id:
        cmd.extend(["--project", request.project_id])
    cmd.extend(["--region", request.region])

    match request.release_source:
        case BuildArtifacts(path=path):
            cmd.extend(["--build-artifacts", path])
        case Images(images=images):
            cmd.extend(["--images", kv_to_string(images)])

    if request.source:
        cmd.extend(["--source", request.source])
    if request.disable_initial_rollout:
        cmd.append("--disable-initial-rollout")
    if request.source_staging_dir:
        cmd.extend(["--gcs-source-staging-dir", request.source_staging_dir])
    if request.skaffold_file:
        cmd.extend(["--skaffold-file", request.skaffold_file])
    if request.deploy_parameters:
        cmd.extend(["--deploy-parameters", kv_to_string(request.deploy_parameters)])

    cmd.extend(["--annotations", kv_to_string(request.annotations)])
    cmd.extend(["--labels", kv_to_string(request.labels)])

    if request.description:
        cmd.extend(["--description", request.description])

    cmd.extend(request.flags)

    # Output is parsed as JSON, so this must stay last to win over user flags
    cmd.extend(["--format", "json"])

    if request.component:
        cmd.insert(0, request.component)

    return cmd
