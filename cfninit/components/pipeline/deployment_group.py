"""
CodeDeploy application and deployment group for the Deploy stage.

The deployment group targets the compute pool's auto scaling group, so new
instances launched by the group also receive the last successful revision.
Deployments roll one instance at a time (CodeDeployDefault.OneAtATime); no
rollback beyond CodeDeploy's defaults is configured.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from cfninit.configs.constants import DEPLOYMENT_CONFIG
from cfninit.utils.tags import create_tags


@dataclass
class DeploymentGroupOutputs:
    """Output values from deployment group component."""
    application_name: pulumi.Output[str]
    deployment_group_name: pulumi.Output[str]


class DeploymentGroupComponent(pulumi.ComponentResource):
    """Server-platform CodeDeploy target for an auto scaling group."""

    def __init__(
        self,
        name: str,
        environment: str,
        auto_scaling_group_name: pulumi.Input[str],
        service_role_arn: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:pipeline:DeploymentGroup", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.application = aws.codedeploy.Application(
            f"{name}-app",
            name=f"{name}-app",
            compute_platform="Server",
            tags=create_tags(environment, f"{name}-app"),
            opts=child_opts,
        )

        self.deployment_group = aws.codedeploy.DeploymentGroup(
            f"{name}-deployment-group",
            app_name=self.application.name,
            deployment_group_name=f"{name}-deployment-group",
            service_role_arn=service_role_arn,
            autoscaling_groups=[auto_scaling_group_name],
            deployment_config_name=DEPLOYMENT_CONFIG,
            tags=create_tags(environment, f"{name}-deployment-group"),
            opts=child_opts,
        )

        self.register_outputs({
            "application_name": self.application.name,
            "deployment_group_name": self.deployment_group.deployment_group_name,
        })

    def get_outputs(self) -> DeploymentGroupOutputs:
        """Get deployment group output values."""
        return DeploymentGroupOutputs(
            application_name=self.application.name,
            deployment_group_name=self.deployment_group.deployment_group_name,
        )
