"""
Topology records for the cfninit stack.

Each record describes one layer of the deployment before any Pulumi resource
exists:

1. NetworkBlock: address space, subnet tiers, AZ count, NAT gateway count.
2. TrafficFilter: ordered allow-only ingress rules plus outbound policy.
3. ComputePool: image, shape, identity, bootstrap recipe and signal quorum.
4. ReleasePipeline: source settings, build recipe and the fixed stage order.

Invariants are checked in ``__post_init__`` so that a broken topology fails
at synthesis time with ``TopologyConfigError`` instead of half-way through a
deployment.
"""

import ipaddress
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

from cfninit.configs.constants import (
    BUILD_ARTIFACT,
    BUILDSPEC_VERSION,
    SOURCE_ARTIFACT,
    SOURCE_TRIGGERS,
    STAGE_NAMES,
)

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"


class TopologyConfigError(ValueError):
    """Raised when a topology record violates one of its invariants."""


class SubnetType(str, Enum):
    """Routing class of a subnet tier."""
    PUBLIC = "public"
    PRIVATE_WITH_EGRESS = "private"
    ISOLATED = "isolated"


@dataclass(frozen=True)
class SubnetTier:
    """A subnet tier replicated once per availability zone."""
    name: str
    subnet_type: SubnetType
    cidr_mask: int


@dataclass(frozen=True)
class SubnetPlan:
    """One concrete subnet: a tier placed in a single availability zone."""
    tier: SubnetTier
    az_index: int
    availability_zone: str
    cidr: str

    @property
    def resource_suffix(self) -> str:
        return f"{self.tier.name.lower()}-subnet-{self.az_index + 1}"


@dataclass(frozen=True)
class NetworkBlock:
    """
    Isolated address space with its subnet tiers.

    Attributes:
        name: VPC name tag
        cidr: Address range of the whole block
        max_azs: Number of availability zones each tier is replicated into
        nat_gateways: Number of managed outbound gateways
        tiers: Subnet tiers, carved from the block in declared order
    """
    name: str
    cidr: str
    max_azs: int
    nat_gateways: int
    tiers: tuple[SubnetTier, ...]

    def __post_init__(self) -> None:
        try:
            network = ipaddress.ip_network(self.cidr)
        except ValueError as exc:
            raise TopologyConfigError(f"Invalid VPC CIDR {self.cidr!r}: {exc}") from exc

        if not self.tiers:
            raise TopologyConfigError("NetworkBlock needs at least one subnet tier")
        if self.max_azs < 1:
            raise TopologyConfigError(f"max_azs must be >= 1, got {self.max_azs}")
        if not 0 <= self.nat_gateways <= self.max_azs:
            raise TopologyConfigError(
                f"nat_gateways must be between 0 and max_azs ({self.max_azs}), "
                f"got {self.nat_gateways}"
            )

        names = [tier.name for tier in self.tiers]
        if len(set(names)) != len(names):
            raise TopologyConfigError(f"Duplicate subnet tier names: {names}")

        for tier in self.tiers:
            if not network.prefixlen <= tier.cidr_mask <= network.max_prefixlen:
                raise TopologyConfigError(
                    f"Tier {tier.name!r} mask /{tier.cidr_mask} does not fit in {self.cidr}"
                )

        if self.nat_gateways and not self.public_tiers:
            raise TopologyConfigError("NAT gateways require a PUBLIC subnet tier")

        egress_tiers = [t for t in self.tiers if t.subnet_type is SubnetType.PRIVATE_WITH_EGRESS]
        if egress_tiers and not self.nat_gateways:
            raise TopologyConfigError(
                f"Tier {egress_tiers[0].name!r} needs egress but nat_gateways is 0"
            )

    @property
    def public_tiers(self) -> list[SubnetTier]:
        return [t for t in self.tiers if t.subnet_type is SubnetType.PUBLIC]

    def subnet_layout(self, zones: list[str]) -> list[SubnetPlan]:
        """
        Carve one subnet per tier per availability zone out of the block.

        Subnets are allocated sequentially, tier by tier, so their ranges
        never overlap.

        Args:
            zones: Available zones in the target region

        Returns:
            Ordered subnet plans (tier-major, zone-minor)

        Raises:
            TopologyConfigError: Too few zones, or the block is exhausted
        """
        if len(zones) < self.max_azs:
            raise TopologyConfigError(
                f"Need {self.max_azs} availability zones, region offers {len(zones)}"
            )

        network = ipaddress.ip_network(self.cidr)
        cursor = int(network.network_address)
        end = int(network.broadcast_address)
        plans: list[SubnetPlan] = []

        for tier in self.tiers:
            size = 2 ** (network.max_prefixlen - tier.cidr_mask)
            for az_index in range(self.max_azs):
                # Align the cursor to the subnet size
                cursor = -(-cursor // size) * size
                if cursor + size - 1 > end:
                    raise TopologyConfigError(
                        f"{self.cidr} has no room left for tier {tier.name!r}"
                    )
                subnet = ipaddress.ip_network((cursor, tier.cidr_mask))
                plans.append(SubnetPlan(
                    tier=tier,
                    az_index=az_index,
                    availability_zone=zones[az_index],
                    cidr=str(subnet),
                ))
                cursor += size

        return plans


@dataclass(frozen=True)
class IngressRule:
    """A single allow rule: protocol, port, source range, label."""
    protocol: str
    port: int
    source_cidr: str
    description: str

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            raise TopologyConfigError(f"Port out of range: {self.port}")
        try:
            ipaddress.ip_network(self.source_cidr)
        except ValueError as exc:
            raise TopologyConfigError(
                f"Invalid source range {self.source_cidr!r} for {self.description!r}"
            ) from exc

    @property
    def ip_version(self) -> int:
        return ipaddress.ip_network(self.source_cidr).version

    @property
    def open_to_world(self) -> bool:
        """True if this rule admits every IPv4 or every IPv6 address."""
        return ipaddress.ip_network(self.source_cidr).prefixlen == 0


@dataclass(frozen=True)
class TrafficFilter:
    """Additive allow-list attached to the network. No deny rules exist."""
    name: str
    description: str
    rules: tuple[IngressRule, ...]
    allow_all_outbound: bool = True

    def ports(self) -> list[int]:
        return [rule.port for rule in self.rules]

    def open_to_world(self, port: int) -> bool:
        """True if any rule exposes the port to every address."""
        return any(rule.port == port and rule.open_to_world for rule in self.rules)


@dataclass(frozen=True)
class PackageStep:
    """Install a system package."""
    name: str
    manager: str = "yum"


@dataclass(frozen=True)
class CommandStep:
    """Run a shell command as root."""
    command: str


@dataclass(frozen=True)
class FileStep:
    """Place a file on the instance."""
    path: str
    content: str
    mode: str = "0644"

    @classmethod
    def from_asset(cls, path: str, asset: str, mode: str = "0644") -> "FileStep":
        """Build a file step from a file shipped in ``cfninit/assets``."""
        return cls(path=path, content=(ASSETS_DIR / asset).read_text(), mode=mode)


@dataclass(frozen=True)
class ServiceStep:
    """Enable a system service and optionally restart it."""
    name: str
    enabled: bool = True
    restart: bool = True


BootstrapStep = Union[PackageStep, CommandStep, FileStep, ServiceStep]


@dataclass(frozen=True)
class BootstrapRecipe:
    """Ordered first-boot setup applied to every instance of a pool."""
    steps: tuple[BootstrapStep, ...]

    def __post_init__(self) -> None:
        seen_packages: set[str] = set()
        later_packages = {s.name for s in self.steps if isinstance(s, PackageStep)}
        for step in self.steps:
            if isinstance(step, PackageStep):
                seen_packages.add(step.name)
            elif isinstance(step, ServiceStep):
                if step.name in later_packages and step.name not in seen_packages:
                    raise TopologyConfigError(
                        f"Service {step.name!r} is enabled before its package is installed"
                    )

    def packages(self) -> list[str]:
        return [s.name for s in self.steps if isinstance(s, PackageStep)]

    def files(self) -> list[FileStep]:
        return [s for s in self.steps if isinstance(s, FileStep)]

    def services(self) -> list[ServiceStep]:
        return [s for s in self.steps if isinstance(s, ServiceStep)]


@dataclass(frozen=True)
class ComputePool:
    """
    Elastic group of identical instances.

    Attributes:
        name: Logical name of the pool
        instance_type: EC2 instance shape
        image_name_pattern: AMI name filter (newest Amazon-owned match wins)
        identity_policies: Managed policy ARNs granted to each instance
        recipe: Bootstrap recipe run once per instance at first boot
        min_capacity: Minimum instance count
        max_capacity: Maximum instance count
        signal_count: Instances expected to signal during a rollout
        min_success_percentage: Share of signals required for success
        signal_timeout_minutes: How long the platform waits for signals
    """
    name: str
    instance_type: str
    image_name_pattern: str
    identity_policies: tuple[str, ...]
    recipe: BootstrapRecipe
    min_capacity: int = 1
    max_capacity: int = 1
    signal_count: int = 1
    min_success_percentage: int = 100
    signal_timeout_minutes: int = 5

    def __post_init__(self) -> None:
        if not 0 <= self.min_success_percentage <= 100:
            raise TopologyConfigError(
                f"min_success_percentage must be within [0, 100], "
                f"got {self.min_success_percentage}"
            )
        if self.signal_timeout_minutes <= 0:
            raise TopologyConfigError(
                f"signal_timeout_minutes must be > 0, got {self.signal_timeout_minutes}"
            )
        if not 1 <= self.min_capacity <= self.max_capacity:
            raise TopologyConfigError(
                f"Capacity must satisfy 1 <= min <= max, "
                f"got min={self.min_capacity} max={self.max_capacity}"
            )
        if not 1 <= self.signal_count <= self.max_capacity:
            raise TopologyConfigError(
                f"signal_count must be within [1, {self.max_capacity}], got {self.signal_count}"
            )

    @property
    def signal_timeout_seconds(self) -> int:
        return self.signal_timeout_minutes * 60

    def quorum_count(self) -> int:
        """Number of instance signals needed before the rollout is healthy."""
        return math.ceil(self.signal_count * self.min_success_percentage / 100)


@dataclass(frozen=True)
class BuildRecipe:
    """Command sequence executed in an ephemeral build container."""
    image: str
    runtime_versions: dict[str, str]
    install_commands: tuple[str, ...]
    build_commands: tuple[str, ...]
    artifact_files: tuple[str, ...] = ("**/*",)
    base_directory: str = "./"

    def __post_init__(self) -> None:
        if not self.install_commands and not self.build_commands:
            raise TopologyConfigError("BuildRecipe declares no commands")
        if not self.artifact_files:
            raise TopologyConfigError("BuildRecipe must capture at least one file glob")

    def to_buildspec(self) -> dict[str, Any]:
        """Return the CodeBuild buildspec (v0.2) for this recipe."""
        install: dict[str, Any] = {}
        if self.runtime_versions:
            install["runtime-versions"] = dict(self.runtime_versions)
        if self.install_commands:
            install["commands"] = list(self.install_commands)

        phases: dict[str, Any] = {}
        if install:
            phases["install"] = install
        if self.build_commands:
            phases["build"] = {"commands": list(self.build_commands)}

        return {
            "version": BUILDSPEC_VERSION,
            "phases": phases,
            "artifacts": {
                "base-directory": self.base_directory,
                "files": list(self.artifact_files),
            },
        }


@dataclass(frozen=True)
class SourceSettings:
    """
    Where the pipeline pulls source from.

    Attributes:
        owner: Repository owner
        repo: Repository name
        branch: Branch whose pushes start the pipeline
        token_secret_name: Secrets Manager name of the OAuth token
        trigger: WEBHOOK (GitHub pushes to CodePipeline) or POLL
    """
    owner: str
    repo: str
    branch: str
    token_secret_name: str
    trigger: str = "WEBHOOK"

    def __post_init__(self) -> None:
        if self.trigger not in SOURCE_TRIGGERS:
            raise TopologyConfigError(
                f"Source trigger must be one of {SOURCE_TRIGGERS}, got {self.trigger!r}"
            )

    @property
    def branch_ref(self) -> str:
        return f"refs/heads/{self.branch}"


@dataclass(frozen=True)
class ReleasePipeline:
    """Three-stage release process: Source, Build, Deploy."""
    name: str
    source: SourceSettings
    build: BuildRecipe
    stage_names: tuple[str, ...] = STAGE_NAMES
    source_artifact: str = SOURCE_ARTIFACT
    build_artifact: str = BUILD_ARTIFACT

    def __post_init__(self) -> None:
        if tuple(self.stage_names) != STAGE_NAMES:
            raise TopologyConfigError(
                f"Stage order is fixed to {STAGE_NAMES}, got {tuple(self.stage_names)}"
            )
        if self.source_artifact == self.build_artifact:
            raise TopologyConfigError("Source and build artifacts must be distinct")


@dataclass(frozen=True)
class Topology:
    """The four layers, in construction order."""
    network: NetworkBlock
    traffic_filter: TrafficFilter
    compute: ComputePool
    pipeline: ReleasePipeline
