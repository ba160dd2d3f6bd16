"""
Resource naming conventions for consistent AWS resource names.

Follows pattern: {project}-{environment}-{resource}
Stored secrets: /{project}/{environment}/{name}
"""

from dataclasses import dataclass


@dataclass
class ResourceNamer:
    """
    Generates consistent resource names for AWS resources.

    Attributes:
        project: Project identifier
        environment: Deployment environment (dev, staging, prod)
    """
    project: str
    environment: str

    def name(self, resource: str) -> str:
        """
        Generate a resource name.

        Args:
            resource: Resource identifier (e.g., 'vpc', 'web-asg')

        Returns:
            Formatted resource name
        """
        if not resource:
            return f"{self.project}-{self.environment}"
        return f"{self.project}-{self.environment}-{resource}"

    def bucket_name(self, suffix: str) -> str:
        """
        Generate an S3 bucket name (lowercase, globally unique per account).

        Args:
            suffix: Bucket suffix (e.g., 'artifacts')

        Returns:
            Bucket name
        """
        return self.name(suffix).lower()

    def secret_name(self, name: str) -> str:
        """
        Generate a hierarchical SSM parameter name for a stored secret.

        Args:
            name: Secret identifier (e.g., 'ssh-private-key')

        Returns:
            Parameter path with project and environment prefix
        """
        return f"/{self.project}/{self.environment}/{name}"
