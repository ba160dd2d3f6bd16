"""
Pipeline components for the release process.

Components:
- BuildProjectComponent: CodeBuild project for the Build stage
- DeploymentGroupComponent: CodeDeploy application + group for the Deploy stage
- ReleasePipelineComponent: CodePipeline wiring Source, Build and Deploy
"""

from cfninit.components.pipeline.build_project import BuildProjectComponent, BuildProjectOutputs
from cfninit.components.pipeline.deployment_group import (
    DeploymentGroupComponent,
    DeploymentGroupOutputs,
)
from cfninit.components.pipeline.release_pipeline import (
    ReleasePipelineComponent,
    ReleasePipelineOutputs,
)

__all__ = [
    "BuildProjectComponent",
    "BuildProjectOutputs",
    "DeploymentGroupComponent",
    "DeploymentGroupOutputs",
    "ReleasePipelineComponent",
    "ReleasePipelineOutputs",
]
