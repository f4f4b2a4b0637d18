import os
import argparse


class ArgumentParser:
    class EnvDefault(argparse.Action):
        def __init__(self, envvar, required=True, default=None, **kwargs):
            if envvar:
                if envvar in os.environ:
                    default = os.environ.get(envvar, default)
            if required and default:
                required = False
            super(ArgumentParser.EnvDefault, self).__init__(default=default, required=required, metavar=envvar, **kwargs)

        def __call__(self, parser, namespace, values, option_string=None):
            setattr(namespace, self.dest, values)

    def __init__(self):
        self.parser = argparse.ArgumentParser()
        self.setup_arguments()

    def add_input(self, name: str, default: str = ""):
        """Register an action input, readable from INPUT_<NAME> or --<name-with-dashes>."""
        self.parser.add_argument(f"--{name.replace('_', '-')}",
                                 action=self.EnvDefault, envvar=f"INPUT_{name.upper()}",
                                 type=str, required=False, default=default)

    def setup_arguments(self):
        pass

    def parse_args(self, args=None):
        return self.parser.parse_args(args)


class CreateCloudDeployReleaseArgumentParser(ArgumentParser):
    INPUTS = [
        "name",
        "delivery_pipeline",
        "project_id",
        "region",
        "source",
        "build_artifacts",
        "images",
        "disable_initial_rollout",
        "gcs_source_staging_dir",
        "skaffold_file",
        "annotations",
        "labels",
        "description",
        "deploy_parameters",
        "flags",
        "gcloud_component",
        "gcloud_version",
    ]

    def setup_arguments(self):
        for name in self.INPUTS:
            self.add_input(name)
