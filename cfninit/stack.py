"""
Stack wiring for the cfninit program.

Builds the layers strictly top-down, each consuming the outputs of the
previous ones:
1. Network: VPC, public subnet tier, NAT gateway
2. Security: Security group from the traffic filter
3. Storage + Identity: Artifact bucket, instance/pipeline/CodeDeploy roles
4. Compute: Auto scaling pool with bootstrap recipe and signal quorum
5. Pipeline: CodeBuild project, CodeDeploy group (targets layer 4), CodePipeline
"""

from typing import Any

import pulumi

from cfninit.configs.base import EnvironmentConfig
from cfninit.configs.constants import PROJECT
from cfninit.configs.topology import Topology
from cfninit.utils.naming import ResourceNamer

# Networking
from cfninit.components.networking.vpc import VpcComponent
from cfninit.components.networking.security_groups import SecurityGroupComponent

# Security
from cfninit.components.security.iam_roles import IamRolesComponent

# Storage
from cfninit.components.storage.artifact_bucket import ArtifactBucketComponent

# Compute
from cfninit.components.compute.auto_scaling import ComputePoolComponent

# Pipeline
from cfninit.components.pipeline.build_project import BuildProjectComponent
from cfninit.components.pipeline.deployment_group import DeploymentGroupComponent
from cfninit.components.pipeline.release_pipeline import ReleasePipelineComponent


def deploy(config: EnvironmentConfig, topology: Topology) -> dict[str, Any]:
    """
    Declare every resource of the topology.

    Args:
        config: Environment configuration
        topology: Network, security, compute and pipeline records

    Returns:
        Stack outputs keyed by export name
    """
    namer = ResourceNamer(project=PROJECT, environment=config.environment)
    base_name = namer.name("")

    # --- Layer 1: Network ---
    vpc = VpcComponent(
        name=base_name,
        environment=config.environment,
        network=topology.network,
    )
    vpc_outputs = vpc.get_outputs()

    # --- Layer 2: Security ---
    security_group = SecurityGroupComponent(
        name=base_name,
        environment=config.environment,
        vpc_id=vpc_outputs.vpc_id,
        traffic_filter=topology.traffic_filter,
    )
    sg_outputs = security_group.get_outputs()

    # --- Layer 3: Storage, Identity ---
    artifact_bucket = ArtifactBucketComponent(
        name=base_name,
        environment=config.environment,
        namer=namer,
    )
    bucket_outputs = artifact_bucket.get_outputs()

    group_name = namer.name(f"{topology.compute.name}-asg")

    iam_roles = IamRolesComponent(
        name=base_name,
        environment=config.environment,
        managed_policy_arns=topology.compute.identity_policies,
        auto_scaling_group_name=group_name,
        artifact_bucket_arn=bucket_outputs.bucket_arn,
    )
    iam_outputs = iam_roles.get_outputs()

    # --- Layer 4: Compute ---
    compute_pool = ComputePoolComponent(
        name=namer.name(topology.compute.name),
        environment=config.environment,
        pool=topology.compute,
        group_name=group_name,
        subnet_ids=vpc_outputs.public_subnet_ids,
        security_group_id=sg_outputs.security_group_id,
        instance_profile_name=iam_outputs.instance_profile_name,
        ssh_public_key=config.ssh_public_key,
        private_key_parameter=namer.secret_name("ssh-private-key"),
    )
    pool_outputs = compute_pool.get_outputs()

    # --- Layer 5: Pipeline ---
    build_project = BuildProjectComponent(
        name=base_name,
        environment=config.environment,
        recipe=topology.pipeline.build,
        service_role_arn=iam_outputs.pipeline_role_arn,
    )
    build_outputs = build_project.get_outputs()

    deployment_group = DeploymentGroupComponent(
        name=base_name,
        environment=config.environment,
        auto_scaling_group_name=pool_outputs.group_name,
        service_role_arn=iam_outputs.codedeploy_role_arn,
    )
    deploy_outputs = deployment_group.get_outputs()

    release_pipeline = ReleasePipelineComponent(
        name=base_name,
        environment=config.environment,
        pipeline=topology.pipeline,
        role_arn=iam_outputs.pipeline_role_arn,
        artifact_bucket_name=bucket_outputs.bucket_name,
        build_project_name=build_outputs.project_name,
        application_name=deploy_outputs.application_name,
        deployment_group_name=deploy_outputs.deployment_group_name,
    )
    pipeline_outputs = release_pipeline.get_outputs()

    return {
        "vpc_id": vpc_outputs.vpc_id,
        "public_subnet_ids": vpc_outputs.public_subnet_ids,
        "security_group_id": sg_outputs.security_group_id,
        "auto_scaling_group_name": pool_outputs.group_name,
        "launch_template_id": pool_outputs.launch_template_id,
        "key_pair_name": pool_outputs.key_pair_name,
        "artifact_bucket": bucket_outputs.bucket_name,
        "build_project": build_outputs.project_name,
        "codedeploy_application": deploy_outputs.application_name,
        "deployment_group": deploy_outputs.deployment_group_name,
        "pipeline_name": pipeline_outputs.pipeline_name,
    }
