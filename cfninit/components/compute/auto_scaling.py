"""
Compute Pool Component: auto scaling web tier with a first-boot recipe.

Key Components:
1. AMI: Newest Amazon-owned image matching the pool's name pattern
   (Amazon Linux 2023 by default).
2. User Data: The pool's BootstrapRecipe rendered to a bash script. It runs
   once per instance and ends by completing the launch lifecycle action.
3. Key Pair: The configured SSH public key, or a generated ED25519 key whose
   private half is kept in an SSM SecureString parameter.
4. Launch Template: Instance shape, security group, instance profile,
   key pair, IMDSv2 required.
5. Auto Scaling Group (public subnets):
   - initial lifecycle hook on EC2_INSTANCE_LAUNCHING: an instance stays
     Pending:Wait until it signals CONTINUE. No signal before the heartbeat
     timeout -> ABANDON, the instance is terminated and replaced.
   - wait_for_capacity_timeout: creation waits for every desired instance to
     be InService and fails after the signal timeout. The quorum does not
     relax this wait; with a pool of one both mean the same instance.
   - instance refresh (Rolling): replacements keep at least the quorum
     percentage of the pool healthy.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws
import pulumi_tls as tls

from cfninit.configs.topology import ComputePool
from cfninit.utils.tags import create_tags, propagated_tags
from cfninit.utils.user_data import LifecycleSignal, encode_user_data, render_user_data

LAUNCH_TRANSITION = "autoscaling:EC2_INSTANCE_LAUNCHING"


@dataclass
class ComputePoolOutputs:
    """Output values from compute pool component."""
    group_name: pulumi.Output[str]
    group_arn: pulumi.Output[str]
    launch_template_id: pulumi.Output[str]
    key_pair_name: pulumi.Output[str]


class ComputePoolComponent(pulumi.ComponentResource):
    """
    Self-healing instance pool that reports healthy only after bootstrap.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        pool: ComputePool,
        group_name: str,
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        instance_profile_name: pulumi.Input[str],
        ssh_public_key: str | None = None,
        private_key_parameter: str | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:ComputePool", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        self.pool = pool

        ami = aws.ec2.get_ami(
            most_recent=True,
            owners=["amazon"],
            filters=[
                aws.ec2.GetAmiFilterArgs(
                    name="name",
                    values=[pool.image_name_pattern],
                ),
                aws.ec2.GetAmiFilterArgs(
                    name="virtualization-type",
                    values=["hvm"],
                ),
            ],
        )

        self.signal = LifecycleSignal(
            hook_name=f"{group_name}-bootstrap",
            group_name=group_name,
        )
        self.user_data = render_user_data(pool.recipe, self.signal)

        self.private_key = None
        public_key = ssh_public_key
        if not public_key:
            self.private_key = tls.PrivateKey(
                f"{name}-ssh-key",
                algorithm="ED25519",
                opts=child_opts,
            )
            public_key = self.private_key.public_key_openssh

        self.key_pair = aws.ec2.KeyPair(
            f"{name}-key-pair",
            key_name=f"{name}-key-pair",
            public_key=public_key,
            tags=create_tags(environment, f"{name}-key-pair"),
            opts=child_opts,
        )

        if self.private_key is not None:
            aws.ssm.Parameter(
                f"{name}-key-pair-private",
                name=private_key_parameter or f"/ec2/keypair/{name}-key-pair",
                type="SecureString",
                value=self.private_key.private_key_openssh,
                description=f"Private key of {name}-key-pair",
                tags=create_tags(environment, f"{name}-key-pair-private"),
                opts=child_opts,
            )

        instance_tags = create_tags(environment, f"{name}-instance", Pool=pool.name)

        self.launch_template = aws.ec2.LaunchTemplate(
            f"{name}-lt",
            name_prefix=f"{name}-",
            image_id=ami.id,
            instance_type=pool.instance_type,
            vpc_security_group_ids=[security_group_id],
            iam_instance_profile=aws.ec2.LaunchTemplateIamInstanceProfileArgs(
                name=instance_profile_name,
            ),
            key_name=self.key_pair.key_name,
            user_data=encode_user_data(self.user_data),
            metadata_options=aws.ec2.LaunchTemplateMetadataOptionsArgs(
                http_tokens="required",  # IMDSv2
                http_endpoint="enabled",
            ),
            update_default_version=True,
            tag_specifications=[
                aws.ec2.LaunchTemplateTagSpecificationArgs(
                    resource_type="instance",
                    tags=instance_tags,
                ),
            ],
            tags=create_tags(environment, f"{name}-lt"),
            opts=child_opts,
        )

        self.group = aws.autoscaling.Group(
            f"{name}-asg",
            name=group_name,
            min_size=pool.min_capacity,
            max_size=pool.max_capacity,
            desired_capacity=pool.min_capacity,
            vpc_zone_identifiers=subnet_ids,
            launch_template=aws.autoscaling.GroupLaunchTemplateArgs(
                id=self.launch_template.id,
                version=self.launch_template.latest_version.apply(str),
            ),
            health_check_type="EC2",
            health_check_grace_period=pool.signal_timeout_seconds,
            wait_for_capacity_timeout=f"{pool.signal_timeout_minutes}m",
            initial_lifecycle_hooks=[
                aws.autoscaling.GroupInitialLifecycleHookArgs(
                    name=self.signal.hook_name,
                    lifecycle_transition=LAUNCH_TRANSITION,
                    heartbeat_timeout=pool.signal_timeout_seconds,
                    default_result="ABANDON",
                ),
            ],
            instance_refresh=aws.autoscaling.GroupInstanceRefreshArgs(
                strategy="Rolling",
                preferences=aws.autoscaling.GroupInstanceRefreshPreferencesArgs(
                    min_healthy_percentage=pool.min_success_percentage,
                    instance_warmup=str(pool.signal_timeout_seconds),
                ),
            ),
            tags=propagated_tags(create_tags(environment, f"{name}-asg", Pool=pool.name)),
            opts=child_opts,
        )

        self.register_outputs({
            "group_name": self.group.name,
            "group_arn": self.group.arn,
            "launch_template_id": self.launch_template.id,
            "key_pair_name": self.key_pair.key_name,
        })

    def get_outputs(self) -> ComputePoolOutputs:
        """Get compute pool output values."""
        return ComputePoolOutputs(
            group_name=self.group.name,
            group_arn=self.group.arn,
            launch_template_id=self.launch_template.id,
            key_pair_name=self.key_pair.key_name,
        )
