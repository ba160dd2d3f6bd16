"""
Infrastructure constants for the cfninit stack.

Contains CIDR blocks, ports, image references, and default configurations.
"""

from typing import Final

# Project identifier used for naming and tagging
PROJECT: Final[str] = "cfninit"

# VPC Configuration
VPC_CIDR: Final[str] = "10.0.0.0/16"
VPC_NAME: Final[str] = "cfninit-vpc"
PUBLIC_SUBNET_MASK: Final[int] = 24

# Unrestricted IPv4 source range
ANY_IPV4: Final[str] = "0.0.0.0/0"

# Port configurations
PORTS: Final[dict[str, int]] = {
    "http": 80,
    "https": 443,
    "ssh": 22,
}

# Ports treated as administrative access (flagged when open to the world)
ADMIN_PORTS: Final[frozenset[int]] = frozenset({PORTS["ssh"]})

# Compute pool defaults
DEFAULT_INSTANCE_TYPE: Final[str] = "t2.micro"
AMAZON_LINUX_2023_AMI: Final[str] = "al2023-ami-2023.*-x86_64"
SSM_MANAGED_POLICY: Final[str] = "arn:aws:iam::aws:policy/AmazonSSMManagedInstanceCore"

SIGNAL_DEFAULTS: Final[dict[str, int]] = {
    "count": 1,
    "min_success_percentage": 80,
    "timeout_minutes": 5,
}

# Bootstrap file shipped with the package and placed on every instance
NGINX_VHOST_PATH: Final[str] = "/etc/nginx/conf.d/laravel.conf"
NGINX_VHOST_ASSET: Final[str] = "laravel.conf"

# Build environment
BUILD_IMAGE: Final[str] = "aws/codebuild/amazonlinux2-x86_64-standard:5.0"
BUILD_COMPUTE_TYPE: Final[str] = "BUILD_GENERAL1_SMALL"
BUILDSPEC_VERSION: Final[str] = "0.2"
RUNTIME_VERSIONS: Final[dict[str, str]] = {
    "nodejs": "20.x",
    "php": "8.3",
}

# Pipeline
PIPELINE_NAME: Final[str] = "Laravel-pipeline"
STAGE_NAMES: Final[tuple[str, str, str]] = ("Source", "Build", "Deploy")
SOURCE_ARTIFACT: Final[str] = "SourceArtifact"
BUILD_ARTIFACT: Final[str] = "BuildArtifact"
DEPLOYMENT_CONFIG: Final[str] = "CodeDeployDefault.OneAtATime"
CODEDEPLOY_SERVICE_POLICY: Final[str] = "arn:aws:iam::aws:policy/service-role/AWSCodeDeployRole"

# Source repository defaults
GITHUB_DEFAULTS: Final[dict[str, str]] = {
    "owner": "RizaHKhan",
    "repo": "laravel-app-for-cdk",
    "branch": "master",
    "token_secret": "github-token",
    "trigger": "WEBHOOK",
}

# How a push reaches the Source stage
SOURCE_TRIGGERS: Final[tuple[str, str]] = ("WEBHOOK", "POLL")

# Default tags applied to all resources
DEFAULT_TAGS: Final[dict[str, str]] = {
    "Project": PROJECT,
    "ManagedBy": "pulumi",
}
