"""
Default topology for the Laravel web tier.

One public /24 in a single AZ behind one NAT gateway, a web security group,
a single-instance nginx + PHP pool, and the GitHub → CodeBuild → CodeDeploy
release pipeline.
"""

from cfninit.configs.base import EnvironmentConfig
from cfninit.configs.constants import (
    AMAZON_LINUX_2023_AMI,
    ANY_IPV4,
    BUILD_IMAGE,
    NGINX_VHOST_ASSET,
    NGINX_VHOST_PATH,
    PIPELINE_NAME,
    PORTS,
    PROJECT,
    PUBLIC_SUBNET_MASK,
    RUNTIME_VERSIONS,
    SIGNAL_DEFAULTS,
    SSM_MANAGED_POLICY,
    VPC_CIDR,
    VPC_NAME,
)
from cfninit.configs.topology import (
    BootstrapRecipe,
    BuildRecipe,
    CommandStep,
    ComputePool,
    FileStep,
    IngressRule,
    NetworkBlock,
    PackageStep,
    ReleasePipeline,
    ServiceStep,
    SourceSettings,
    SubnetTier,
    SubnetType,
    Topology,
    TrafficFilter,
)

PHP_PACKAGES = (
    "php php-fpm php-xml php-mbstring php-zip php-bcmath php-tokenizer "
    "ruby wget sqlite"
)


def default_recipe() -> BootstrapRecipe:
    """nginx, PHP toolchain, Laravel vhost, then nginx enabled and restarted."""
    return BootstrapRecipe(steps=(
        PackageStep("nginx"),
        CommandStep(f"sudo yum install {PHP_PACKAGES} -y"),
        FileStep.from_asset(NGINX_VHOST_PATH, NGINX_VHOST_ASSET),
        ServiceStep("nginx", enabled=True, restart=True),
    ))


def default_build_recipe() -> BuildRecipe:
    return BuildRecipe(
        image=BUILD_IMAGE,
        runtime_versions=dict(RUNTIME_VERSIONS),
        install_commands=(
            "npm install",
            "curl -sS https://getcomposer.org/installer | php",
            "php composer.phar install --no-dev --optimize-autoloader",
        ),
        build_commands=("npm run build",),
        artifact_files=("**/*",),
        base_directory="./",
    )


def default_topology(
    config: EnvironmentConfig,
    recipe: BootstrapRecipe | None = None,
) -> Topology:
    """
    Build the Laravel topology for an environment.

    Args:
        config: Loaded environment configuration
        recipe: Override for the instance bootstrap recipe

    Returns:
        Topology with network, security, compute and pipeline layers
    """
    network = NetworkBlock(
        name=VPC_NAME,
        cidr=VPC_CIDR,
        max_azs=1,
        nat_gateways=1,
        tiers=(SubnetTier("Public", SubnetType.PUBLIC, PUBLIC_SUBNET_MASK),),
    )

    traffic_filter = TrafficFilter(
        name=f"{PROJECT}-sg",
        description="Web and SSH access for the Laravel pool",
        rules=(
            IngressRule("tcp", PORTS["https"], ANY_IPV4, "allow https access"),
            IngressRule("tcp", PORTS["http"], ANY_IPV4, "allow http access"),
            IngressRule("tcp", PORTS["ssh"], config.ssh_ingress_cidr, "allow ssh access"),
        ),
        allow_all_outbound=True,
    )

    compute = ComputePool(
        name="web",
        instance_type=config.instance_type,
        image_name_pattern=AMAZON_LINUX_2023_AMI,
        identity_policies=(SSM_MANAGED_POLICY,),
        recipe=recipe or default_recipe(),
        min_capacity=1,
        max_capacity=1,
        signal_count=SIGNAL_DEFAULTS["count"],
        min_success_percentage=SIGNAL_DEFAULTS["min_success_percentage"],
        signal_timeout_minutes=SIGNAL_DEFAULTS["timeout_minutes"],
    )

    pipeline = ReleasePipeline(
        name=PIPELINE_NAME,
        source=SourceSettings(
            owner=config.github_owner,
            repo=config.github_repo,
            branch=config.github_branch,
            token_secret_name=config.github_token_secret,
            trigger=config.github_trigger,
        ),
        build=default_build_recipe(),
    )

    return Topology(
        network=network,
        traffic_filter=traffic_filter,
        compute=compute,
        pipeline=pipeline,
    )
