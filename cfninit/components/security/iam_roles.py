"""
IAM roles component for the web pool and the release pipeline.

Creates:
- Instance role + profile: SSM managed access, completing its own launch
  lifecycle action, reading deployment revisions from the artifact bucket
- Pipeline role: assumed by both CodePipeline and CodeBuild; artifact bucket
  read/write, build start/poll, CodeDeploy deployments, build logs
- CodeDeploy service role: AWS managed AWSCodeDeployRole
"""

import json
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from cfninit.configs.constants import CODEDEPLOY_SERVICE_POLICY
from cfninit.utils.tags import create_tags


def assume_role_policy(*services: str) -> str:
    """Trust policy letting the given AWS service principals assume a role."""
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [{
            "Effect": "Allow",
            "Principal": {"Service": list(services) if len(services) > 1 else services[0]},
            "Action": "sts:AssumeRole",
        }],
    })


@dataclass
class IamRoleOutputs:
    """Output values from IAM roles component."""
    instance_role_arn: pulumi.Output[str]
    instance_profile_name: pulumi.Output[str]
    pipeline_role_arn: pulumi.Output[str]
    codedeploy_role_arn: pulumi.Output[str]


class IamRolesComponent(pulumi.ComponentResource):
    """
    IAM roles for the compute pool, the pipeline and CodeDeploy.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        managed_policy_arns: tuple[str, ...],
        auto_scaling_group_name: str,
        artifact_bucket_arn: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:security:IamRoles", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        # Instance role
        self.instance_role = aws.iam.Role(
            f"{name}-instance-role",
            assume_role_policy=assume_role_policy("ec2.amazonaws.com"),
            tags=create_tags(environment, f"{name}-instance-role"),
            opts=child_opts,
        )

        for index, policy_arn in enumerate(managed_policy_arns, start=1):
            aws.iam.RolePolicyAttachment(
                f"{name}-instance-managed-{index}",
                role=self.instance_role.name,
                policy_arn=policy_arn,
                opts=child_opts,
            )

        aws.iam.RolePolicy(
            f"{name}-instance-policy",
            role=self.instance_role.id,
            policy=pulumi.Output.json_dumps({
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Effect": "Allow",
                        "Action": ["autoscaling:CompleteLifecycleAction"],
                        "Resource": [
                            "arn:aws:autoscaling:*:*:autoScalingGroup:*:"
                            f"autoScalingGroupName/{auto_scaling_group_name}",
                        ],
                    },
                    {
                        "Effect": "Allow",
                        "Action": ["s3:GetObject", "s3:GetObjectVersion"],
                        "Resource": [pulumi.Output.concat(artifact_bucket_arn, "/*")],
                    },
                ],
            }),
            opts=child_opts,
        )

        self.instance_profile = aws.iam.InstanceProfile(
            f"{name}-instance-profile",
            role=self.instance_role.name,
            tags=create_tags(environment, f"{name}-instance-profile"),
            opts=child_opts,
        )

        # Pipeline role (CodePipeline + CodeBuild)
        self.pipeline_role = aws.iam.Role(
            f"{name}-pipeline-role",
            assume_role_policy=assume_role_policy(
                "codebuild.amazonaws.com",
                "codepipeline.amazonaws.com",
            ),
            tags=create_tags(environment, f"{name}-pipeline-role"),
            opts=child_opts,
        )

        aws.iam.RolePolicy(
            f"{name}-pipeline-policy",
            role=self.pipeline_role.id,
            policy=pulumi.Output.json_dumps({
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Effect": "Allow",
                        "Action": [
                            "s3:GetObject",
                            "s3:GetObjectVersion",
                            "s3:GetBucketVersioning",
                            "s3:PutObject",
                            "s3:ListBucket",
                        ],
                        "Resource": [
                            artifact_bucket_arn,
                            pulumi.Output.concat(artifact_bucket_arn, "/*"),
                        ],
                    },
                    {
                        "Effect": "Allow",
                        "Action": [
                            "codebuild:StartBuild",
                            "codebuild:BatchGetBuilds",
                        ],
                        "Resource": ["*"],
                    },
                    {
                        "Effect": "Allow",
                        "Action": [
                            "codedeploy:CreateDeployment",
                            "codedeploy:GetApplication",
                            "codedeploy:GetApplicationRevision",
                            "codedeploy:GetDeployment",
                            "codedeploy:GetDeploymentConfig",
                            "codedeploy:RegisterApplicationRevision",
                        ],
                        "Resource": ["*"],
                    },
                    {
                        "Effect": "Allow",
                        "Action": [
                            "logs:CreateLogGroup",
                            "logs:CreateLogStream",
                            "logs:PutLogEvents",
                        ],
                        "Resource": ["arn:aws:logs:*:*:*"],
                    },
                ],
            }),
            opts=child_opts,
        )

        # CodeDeploy service role
        self.codedeploy_role = aws.iam.Role(
            f"{name}-codedeploy-role",
            assume_role_policy=assume_role_policy("codedeploy.amazonaws.com"),
            tags=create_tags(environment, f"{name}-codedeploy-role"),
            opts=child_opts,
        )

        aws.iam.RolePolicyAttachment(
            f"{name}-codedeploy-service",
            role=self.codedeploy_role.name,
            policy_arn=CODEDEPLOY_SERVICE_POLICY,
            opts=child_opts,
        )

        self.register_outputs({
            "instance_role_arn": self.instance_role.arn,
            "instance_profile_name": self.instance_profile.name,
            "pipeline_role_arn": self.pipeline_role.arn,
            "codedeploy_role_arn": self.codedeploy_role.arn,
        })

    def get_outputs(self) -> IamRoleOutputs:
        """Get IAM role output values."""
        return IamRoleOutputs(
            instance_role_arn=self.instance_role.arn,
            instance_profile_name=self.instance_profile.name,
            pipeline_role_arn=self.pipeline_role.arn,
            codedeploy_role_arn=self.codedeploy_role.arn,
        )
