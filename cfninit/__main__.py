"""
Pulumi program entry point for the cfninit stack.

Instantiates all component resources in dependency order:
1. Configuration and topology
2. VPC -> Security Group
3. Artifact Bucket, IAM Roles
4. Compute Pool (auto scaling group + bootstrap recipe)
5. CodeBuild, CodeDeploy, CodePipeline
"""

import pulumi

from cfninit.configs.defaults import default_topology
from cfninit.configs.environment import get_config
from cfninit.stack import deploy
from cfninit.utils.outputs import write_outputs_to_env


def main() -> None:
    """Deploy the Laravel web tier and its release pipeline."""
    config = get_config()
    topology = default_topology(config)

    outputs = deploy(config, topology)

    # Write single-valued outputs to .env file for local tooling
    write_outputs_to_env(
        {key: value for key, value in outputs.items() if not isinstance(value, list)},
        "infrastructure.env",
    )

    # Export to Pulumi stack
    for key, value in outputs.items():
        pulumi.export(key, value)

    pulumi.log.info(
        f"Pool '{topology.compute.name}' needs "
        f"{topology.compute.quorum_count()} of {topology.compute.signal_count} signal(s) "
        f"({topology.compute.min_success_percentage}%) within "
        f"{topology.compute.signal_timeout_minutes} min"
    )


# Execute
main()
