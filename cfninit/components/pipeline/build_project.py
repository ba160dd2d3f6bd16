"""
CodeBuild project for the Build stage.

Runs the BuildRecipe inside an ephemeral Linux container. Source and
artifacts are both CODEPIPELINE: the project receives the SourceArtifact and
hands the files matched by the recipe's globs back as the BuildArtifact.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from cfninit.configs.constants import BUILD_COMPUTE_TYPE
from cfninit.configs.topology import BuildRecipe
from cfninit.utils.buildspec import render_buildspec
from cfninit.utils.tags import create_tags


@dataclass
class BuildProjectOutputs:
    """Output values from build project component."""
    project_name: pulumi.Output[str]
    project_arn: pulumi.Output[str]


class BuildProjectComponent(pulumi.ComponentResource):
    """CodeBuild project driven by a BuildRecipe."""

    def __init__(
        self,
        name: str,
        environment: str,
        recipe: BuildRecipe,
        service_role_arn: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:pipeline:BuildProject", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        self.buildspec = render_buildspec(recipe)

        self.project = aws.codebuild.Project(
            f"{name}-build",
            name=f"{name}-build",
            service_role=service_role_arn,
            artifacts=aws.codebuild.ProjectArtifactsArgs(
                type="CODEPIPELINE",
            ),
            environment=aws.codebuild.ProjectEnvironmentArgs(
                compute_type=BUILD_COMPUTE_TYPE,
                image=recipe.image,
                type="LINUX_CONTAINER",
            ),
            source=aws.codebuild.ProjectSourceArgs(
                type="CODEPIPELINE",
                buildspec=self.buildspec,
            ),
            tags=create_tags(environment, f"{name}-build"),
            opts=child_opts,
        )

        self.register_outputs({
            "project_name": self.project.name,
            "project_arn": self.project.arn,
        })

    def get_outputs(self) -> BuildProjectOutputs:
        """Get build project output values."""
        return BuildProjectOutputs(
            project_name=self.project.name,
            project_arn=self.project.arn,
        )
