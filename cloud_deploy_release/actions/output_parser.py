import json

from dataclasses import dataclass
from typing import Any, Dict, Optional

from cloud_deploy_release.utils.errors import ParseError

CONSOLE_LINK_PREFIX = "https://console.cloud.google.com/deploy/delivery-pipelines"

# projects/{project}/locations/{location}/deliveryPipelines/{pipeline}/releases/{release}
RELEASE_NAME_NUM_FIELDS = 8


@dataclass(frozen=True)
class ReleaseOutcome:
    name: str
    link: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "link": self.link}


def _first_release(payload: Any) -> Optional[Dict[str, Any]]:
    """
    gcloud prints a single release object, or a list whose first element is the
    release when a rollout object follows it. Anything after the release is ignored.
    """
    match payload:
        case [first, *_]:
            return first if isinstance(first, dict) else None
        case dict():
            return payload
        case _:
            return None


def _parse(stdout: str) -> ReleaseOutcome:
    text = (stdout or "").strip()
    if not text or text in ("{}", "[]"):
        raise ValueError("no output from create release command")

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as err:
        raise ValueError(f"invalid JSON output: {err}")

    if payload in ({}, []):
        raise ValueError("no output from create release command")

    release = _first_release(payload)
    name = release.get("name") if release else None
    if not name or not isinstance(name, str):
        raise ValueError("couldn't parse release name")

    fields = name.split("/")
    if len(fields) != RELEASE_NAME_NUM_FIELDS:
        raise ValueError(f"couldn't parse release name, unexpected format: {name}")

    project, location, pipeline, release_id = fields[1], fields[3], fields[5], fields[7]
    link = f"{CONSOLE_LINK_PREFIX}/{location}/{pipeline}/releases/{release_id}?project={project}"
    return ReleaseOutcome(name=name, link=link)


def parse_create_release_response(stdout: Optional[str]) -> ReleaseOutcome:
    try:
        return _parse(stdout)
    except ValueError as err:
        raise ParseError(f"failed to parse create release response: {err}, stdout: {stdout}")
