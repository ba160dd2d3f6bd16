"""
cfninit Architecture Diagram.

Renders the topology (network, security group, web pool, release pipeline)
with labels taken from the Topology records.

Dependencies:
    pip install diagrams  (and Graphviz on PATH)

Usage:
    python -m cfninit.architecture_diagram [--environment dev] [--output cfninit_architecture]
    # Outputs: cfninit_architecture.png
"""

import argparse
import logging

from diagrams import Cluster, Diagram, Edge
from diagrams.aws.compute import EC2, EC2AutoScaling
from diagrams.aws.devtools import Codebuild, Codedeploy, Codepipeline
from diagrams.aws.general import Users
from diagrams.aws.network import InternetGateway, NATGateway, PrivateSubnet, PublicSubnet, VPC
from diagrams.aws.security import SecretsManager
from diagrams.aws.storage import S3
from diagrams.onprem.vcs import Github

from cfninit.configs.base import EnvironmentConfig
from cfninit.configs.constants import ANY_IPV4, DEFAULT_INSTANCE_TYPE, GITHUB_DEFAULTS
from cfninit.configs.defaults import default_topology
from cfninit.configs.topology import SubnetType, Topology

logger = logging.getLogger(__name__)

graph_attr = {
    "fontsize": "14",
    "bgcolor": "white",
    "pad": "0.5",
    "splines": "ortho",
    "nodesep": "0.8",
    "ranksep": "1.0",
}

node_attr = {
    "fontsize": "11",
}

edge_attr = {
    "fontsize": "9",
}


def rule_summary(topology: Topology) -> str:
    """One line per ingress rule, e.g. 'tcp/443 from 0.0.0.0/0'."""
    return "\n".join(
        f"{rule.protocol}/{rule.port} from {rule.source_cidr}"
        for rule in topology.traffic_filter.rules
    )


def pool_summary(topology: Topology) -> str:
    """Capacity, instance type and signal quorum of the compute pool."""
    pool = topology.compute
    return (
        f"{pool.min_capacity}-{pool.max_capacity} x {pool.instance_type}\n"
        f"quorum {pool.quorum_count()}/{pool.signal_count} "
        f"({pool.min_success_percentage}%) / {pool.signal_timeout_minutes} min"
    )


def render_diagram(topology: Topology, filename: str = "cfninit_architecture") -> str:
    """
    Render the architecture diagram to ``<filename>.png``.

    Args:
        topology: Topology to draw
        filename: Output path without extension

    Returns:
        Path of the written image
    """
    network = topology.network
    pool = topology.compute
    pipeline = topology.pipeline
    source = pipeline.source

    with Diagram(
        f"{pipeline.name}\n(VPC, Auto Scaling Pool, Release Pipeline)",
        filename=filename,
        show=False,
        direction="LR",
        graph_attr=graph_attr,
        node_attr=node_attr,
        edge_attr=edge_attr,
    ):
        users = Users("Users\n(Internet)")
        github = Github(f"{source.owner}/{source.repo}\n@{source.branch}")
        token = SecretsManager(f"Secret\n{source.token_secret_name}")

        with Cluster(f"VPC {network.name}\n{network.cidr}"):
            VPC("VPC")
            igw = InternetGateway("Internet Gateway")

            for tier in network.tiers:
                with Cluster(f"{tier.name} tier (/{tier.cidr_mask} x {network.max_azs} AZ)"):
                    subnet_node = PublicSubnet if tier.subnet_type is SubnetType.PUBLIC else PrivateSubnet
                    subnet_node(tier.name)

            nats = [NATGateway(f"NAT Gateway {i + 1}") for i in range(network.nat_gateways)]

            with Cluster(f"Security Group {topology.traffic_filter.name}\n{rule_summary(topology)}"):
                asg = EC2AutoScaling(f"Auto Scaling Group\n{pool_summary(topology)}")
                instance = EC2(
                    "Instance\n" + "\n".join(f"pkg: {name}" for name in pool.recipe.packages())
                )
                asg >> Edge(label="launches") >> instance

        with Cluster("Release Pipeline"):
            artifacts = S3("Artifact Bucket")
            codepipeline = Codepipeline(pipeline.name)
            build = Codebuild(f"Build\n{pipeline.build.image}")
            deploy = Codedeploy("Deploy\nOneAtATime")

        users >> Edge(label="HTTP/HTTPS") >> igw >> instance
        for nat in nats:
            igw - nat

        github >> Edge(label=pipeline.source_artifact) >> codepipeline
        token >> Edge(style="dashed", label="OAuth token") >> codepipeline
        codepipeline >> build >> Edge(label=pipeline.build_artifact) >> deploy
        codepipeline - Edge(style="dotted") - artifacts
        deploy >> Edge(label="rolling") >> asg

    path = f"{filename}.png"
    logger.info("Wrote architecture diagram to %s", path)
    return path


def main() -> None:
    parser = argparse.ArgumentParser(description="Render the cfninit architecture diagram")
    parser.add_argument("--environment", default="dev")
    parser.add_argument("--output", default="cfninit_architecture")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = EnvironmentConfig(
        environment=args.environment,
        instance_type=DEFAULT_INSTANCE_TYPE,
        github_owner=GITHUB_DEFAULTS["owner"],
        github_repo=GITHUB_DEFAULTS["repo"],
        github_branch=GITHUB_DEFAULTS["branch"],
        github_token_secret=GITHUB_DEFAULTS["token_secret"],
        github_trigger=GITHUB_DEFAULTS["trigger"],
        ssh_public_key=None,
        ssh_ingress_cidr=ANY_IPV4,
    )
    render_diagram(default_topology(config), args.output)


if __name__ == "__main__":
    main()
