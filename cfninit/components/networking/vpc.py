"""
VPC Component Resource for Network Infrastructure.

Steps & Architecture:
1. VPC (10.0.0.0/16 by default): The isolated network container.
2. Internet Gateway (IGW): The "door" for public subnets.
3. Subnets: One per tier per availability zone, carved sequentially from the
   VPC CIDR by NetworkBlock.subnet_layout() so ranges never overlap.
   - PUBLIC tiers map public IPs on launch (the web pool lives here).
   - PRIVATE_WITH_EGRESS tiers reach the internet through a NAT gateway.
   - ISOLATED tiers have no default route at all.
4. NAT Gateways: One per requested count, each with an Elastic IP, placed in
   the public subnets of the first AZs.
5. Route Tables:
   - Public RT: 0.0.0.0/0 -> IGW, shared by every public subnet.
   - Egress RT (per AZ): 0.0.0.0/0 -> NAT in the same AZ, round-robin when
     there are fewer NAT gateways than AZs.
   - Isolated RT: local route only.
"""

from dataclasses import dataclass, field

import pulumi
import pulumi_aws as aws

from cfninit.configs.constants import ANY_IPV4
from cfninit.configs.topology import NetworkBlock, SubnetType
from cfninit.utils.tags import create_tags


@dataclass
class VpcOutputs:
    """Output values from VPC component."""
    vpc_id: pulumi.Output[str]
    public_subnet_ids: list[pulumi.Output[str]]
    private_subnet_ids: list[pulumi.Output[str]] = field(default_factory=list)
    isolated_subnet_ids: list[pulumi.Output[str]] = field(default_factory=list)
    nat_gateway_ids: list[pulumi.Output[str]] = field(default_factory=list)


class VpcComponent(pulumi.ComponentResource):
    """
    VPC component with tiered subnets and NAT gateways.

    Replicates every tier of the NetworkBlock across ``max_azs`` zones of
    the current region.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        network: NetworkBlock,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:Vpc", name, None, opts)
        self.environment = environment
        self.network = network

        child_opts = pulumi.ResourceOptions(parent=self)

        zones = aws.get_availability_zones(state="available").names
        self.layout = network.subnet_layout(list(zones))

        # Create VPC
        self.vpc = aws.ec2.Vpc(
            f"{name}-vpc",
            cidr_block=network.cidr,
            enable_dns_hostnames=True,
            enable_dns_support=True,
            tags=create_tags(environment, network.name),
            opts=child_opts,
        )

        self.igw = aws.ec2.InternetGateway(
            f"{name}-igw",
            vpc_id=self.vpc.id,
            tags=create_tags(environment, f"{name}-igw"),
            opts=child_opts,
        )

        self.subnets: dict[SubnetType, list[aws.ec2.Subnet]] = {
            subnet_type: [] for subnet_type in SubnetType
        }
        self._subnet_azs: dict[SubnetType, list[int]] = {
            subnet_type: [] for subnet_type in SubnetType
        }

        for plan in self.layout:
            subnet_name = f"{name}-{plan.resource_suffix}"
            subnet = aws.ec2.Subnet(
                subnet_name,
                vpc_id=self.vpc.id,
                cidr_block=plan.cidr,
                availability_zone=plan.availability_zone,
                map_public_ip_on_launch=plan.tier.subnet_type is SubnetType.PUBLIC,
                tags=create_tags(
                    environment,
                    subnet_name,
                    SubnetTier=plan.tier.name,
                    SubnetType=plan.tier.subnet_type.value,
                ),
                opts=child_opts,
            )
            self.subnets[plan.tier.subnet_type].append(subnet)
            self._subnet_azs[plan.tier.subnet_type].append(plan.az_index)

        self.nat_gateways = self._create_nat_gateways(name, child_opts)
        self._create_route_tables(name, child_opts)

        self.register_outputs({
            "vpc_id": self.vpc.id,
            "public_subnet_ids": [s.id for s in self.public_subnets],
            "nat_gateway_ids": [n.id for n in self.nat_gateways],
        })

    @property
    def public_subnets(self) -> list[aws.ec2.Subnet]:
        return self.subnets[SubnetType.PUBLIC]

    def _create_nat_gateways(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> list[aws.ec2.NatGateway]:
        """Create NAT gateways in the public subnets of the first AZs."""
        nat_gateways = []
        for index in range(self.network.nat_gateways):
            eip = aws.ec2.Eip(
                f"{name}-nat-eip-{index + 1}",
                domain="vpc",
                tags=create_tags(self.environment, f"{name}-nat-eip-{index + 1}"),
                opts=opts,
            )
            nat_gateways.append(aws.ec2.NatGateway(
                f"{name}-nat-{index + 1}",
                allocation_id=eip.id,
                subnet_id=self.public_subnets[index].id,
                tags=create_tags(self.environment, f"{name}-nat-{index + 1}"),
                opts=pulumi.ResourceOptions.merge(
                    opts, pulumi.ResourceOptions(depends_on=[self.igw]),
                ),
            ))
        return nat_gateways

    def _create_route_tables(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create route tables for public, egress and isolated subnets."""
        public_rt = aws.ec2.RouteTable(
            f"{name}-public-rt",
            vpc_id=self.vpc.id,
            routes=[
                aws.ec2.RouteTableRouteArgs(
                    cidr_block=ANY_IPV4,
                    gateway_id=self.igw.id,
                ),
            ],
            tags=create_tags(self.environment, f"{name}-public-rt"),
            opts=opts,
        )

        for index, subnet in enumerate(self.public_subnets, start=1):
            aws.ec2.RouteTableAssociation(
                f"{name}-public-rt-assoc-{index}",
                subnet_id=subnet.id,
                route_table_id=public_rt.id,
                opts=opts,
            )

        # One egress route table per AZ, pointing at a NAT gateway
        egress_rts: dict[int, aws.ec2.RouteTable] = {}
        private = zip(
            self.subnets[SubnetType.PRIVATE_WITH_EGRESS],
            self._subnet_azs[SubnetType.PRIVATE_WITH_EGRESS],
        )
        for index, (subnet, az_index) in enumerate(private, start=1):
            if az_index not in egress_rts:
                nat = self.nat_gateways[az_index % len(self.nat_gateways)]
                egress_rts[az_index] = aws.ec2.RouteTable(
                    f"{name}-private-rt-{az_index + 1}",
                    vpc_id=self.vpc.id,
                    routes=[
                        aws.ec2.RouteTableRouteArgs(
                            cidr_block=ANY_IPV4,
                            nat_gateway_id=nat.id,
                        ),
                    ],
                    tags=create_tags(self.environment, f"{name}-private-rt-{az_index + 1}"),
                    opts=opts,
                )
            aws.ec2.RouteTableAssociation(
                f"{name}-private-rt-assoc-{index}",
                subnet_id=subnet.id,
                route_table_id=egress_rts[az_index].id,
                opts=opts,
            )

        isolated = self.subnets[SubnetType.ISOLATED]
        if isolated:
            isolated_rt = aws.ec2.RouteTable(
                f"{name}-isolated-rt",
                vpc_id=self.vpc.id,
                routes=[],
                tags=create_tags(self.environment, f"{name}-isolated-rt"),
                opts=opts,
            )
            for index, subnet in enumerate(isolated, start=1):
                aws.ec2.RouteTableAssociation(
                    f"{name}-isolated-rt-assoc-{index}",
                    subnet_id=subnet.id,
                    route_table_id=isolated_rt.id,
                    opts=opts,
                )

    def get_outputs(self) -> VpcOutputs:
        """Get VPC output values."""
        return VpcOutputs(
            vpc_id=self.vpc.id,
            public_subnet_ids=[s.id for s in self.public_subnets],
            private_subnet_ids=[s.id for s in self.subnets[SubnetType.PRIVATE_WITH_EGRESS]],
            isolated_subnet_ids=[s.id for s in self.subnets[SubnetType.ISOLATED]],
            nat_gateway_ids=[n.id for n in self.nat_gateways],
        )
