"""
Base configuration dataclass for environment settings.

Provides type-safe configuration structure loaded from Pulumi stack configs.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Environment-specific configuration for infrastructure deployment.

    Attributes:
        environment: Deployment environment (dev, staging, prod)
        instance_type: EC2 instance type for the web pool
        github_owner: Owner of the application repository
        github_repo: Application repository name
        github_branch: Branch the pipeline follows
        github_token_secret: Secrets Manager name holding the GitHub token
        github_trigger: How pushes start the pipeline (WEBHOOK or POLL)
        ssh_public_key: Public key registered as the pool's key pair, if any
        ssh_ingress_cidr: Source range of the administrative ingress rule
    """
    environment: str
    instance_type: str
    github_owner: str
    github_repo: str
    github_branch: str
    github_token_secret: str
    github_trigger: str
    ssh_public_key: str | None
    ssh_ingress_cidr: str

