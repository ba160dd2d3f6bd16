"""
Environment configuration loader.

Loads and validates configuration from Pulumi stack config files.
"""

import pulumi

from cfninit.configs.base import EnvironmentConfig
from cfninit.configs.constants import ANY_IPV4, DEFAULT_INSTANCE_TYPE, GITHUB_DEFAULTS


def get_config() -> EnvironmentConfig:
    """
    Load environment configuration from Pulumi stack config.

    Returns:
        EnvironmentConfig: Validated configuration object

    Raises:
        pulumi.ConfigMissingError: If required config values are missing
    """
    config = pulumi.Config()

    return EnvironmentConfig(
        environment=config.require("environment"),
        instance_type=config.get("instance_type") or DEFAULT_INSTANCE_TYPE,
        github_owner=config.get("github_owner") or GITHUB_DEFAULTS["owner"],
        github_repo=config.get("github_repo") or GITHUB_DEFAULTS["repo"],
        github_branch=config.get("github_branch") or GITHUB_DEFAULTS["branch"],
        github_token_secret=config.get("github_token_secret") or GITHUB_DEFAULTS["token_secret"],
        github_trigger=(config.get("github_trigger") or GITHUB_DEFAULTS["trigger"]).upper(),
        ssh_public_key=config.get("ssh_public_key"),
        ssh_ingress_cidr=config.get("ssh_ingress_cidr") or ANY_IPV4,
    )
