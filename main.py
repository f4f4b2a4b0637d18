#!/usr/bin/env python3

import sys

from cloud_deploy_release.actions.actions import run
from cloud_deploy_release.input_output.input import CreateCloudDeployReleaseArgumentParser

if __name__ == "__main__":
    """Parse action inputs"""
    args = CreateCloudDeployReleaseArgumentParser().parse_args()

    """Create the Cloud Deploy release"""
    sys.exit(run(args))
