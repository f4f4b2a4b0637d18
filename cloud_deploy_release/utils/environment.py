import os

from typing import Dict, Optional

APP_NAME = "create-cloud-deploy-release"
APP_VERSION = "1.1.2"

METRICS_ENVIRONMENT = {
    "CLOUDSDK_METRICS_ENVIRONMENT": f"github-actions-{APP_NAME}",
    "CLOUDSDK_METRICS_ENVIRONMENT_VERSION": APP_VERSION,
}


class ScopedEnvironment:
    """
    Set process environment variables for the duration of a with-block and
    put the previous values back on exit, including on error.
    """

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values = dict(METRICS_ENVIRONMENT if values is None else values)
        self._saved: Dict[str, Optional[str]] = {}

    def __enter__(self) -> Dict[str, str]:
        for key, value in self.values.items():
            self._saved[key] = os.environ.get(key)
            os.environ[key] = value
        return dict(self.values)

    def __exit__(self, exc_type, exc_value, traceback):
        self.restore()
        return False

    def restore(self):
        for key, value in self._saved.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        self._saved = {}
