import re
import shlex

from typing import Dict, List

from cloud_deploy_release.utils.errors import MalformedPairError

KV_SEPARATORS = re.compile(r"[\r\n,]")


def parse_kv_string(text: str) -> Dict[str, str]:
    """
    Parse "KEY1=VALUE1,KEY2=VALUE2" (or one pair per line) into a dict.
    Values may contain "=", keys may not. Commas inside values are not supported.
    """
    pairs = {}
    for segment in KV_SEPARATORS.split(text or ""):
        segment = segment.strip()
        if not segment:
            continue

        key, sep, value = segment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise MalformedPairError(f"failed to parse KEY=VALUE pair, got: {segment}")

        pairs[key] = value.strip()

    return pairs


def kv_to_string(kv: Dict[str, str], separator: str = ",") -> str:
    """Join a dict into the KEY=VALUE list format gcloud expects."""
    return separator.join(f"{key}={value}" for key, value in kv.items())


def parse_flags(text: str) -> List[str]:
    """
    Split a flags string the way a POSIX shell would, without running one.
    "--flag=value" tokens become ["--flag", "value"].
    """
    try:
        tokens = shlex.split(text or "")
    except ValueError as err:
        raise MalformedPairError(f"failed to parse flags '{text}': {err}")

    result = []
    for token in tokens:
        if token.startswith("--") and "=" in token:
            flag, _, value = token.partition("=")
            result.extend([flag, value])
        else:
            result.append(token)

    return result
