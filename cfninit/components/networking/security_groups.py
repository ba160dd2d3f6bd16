"""
Security Group Component for Network Access Control.

Architectural Steps & Flow:
1. Create the "Shell" Security Group in the VPC without inline rules, so the
   compute pool can reference it by ID.
2. Attach one ingress rule per TrafficFilter rule, in declared order. Rules
   are additive allow rules; security groups have no deny. IPv6 ranges are
   sent as cidr_ipv6, IPv4 ranges as cidr_ipv4.
3. Egress: one allow-all rule when the filter allows all outbound traffic.

Administrative-port rules open to every address (0.0.0.0/0 or ::/0) are
reported as Pulumi warnings on every run. The rule is still created as declared.

Remember: Security Groups are stateful. Allowing an inbound request
automatically allows the reply.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from cfninit.configs.constants import ADMIN_PORTS, ANY_IPV4
from cfninit.configs.topology import TrafficFilter
from cfninit.utils.tags import create_tags


@dataclass
class SecurityGroupOutputs:
    """Output values from security group component."""
    security_group_id: pulumi.Output[str]
    security_group_arn: pulumi.Output[str]


class SecurityGroupComponent(pulumi.ComponentResource):
    """
    Single security group built from a TrafficFilter.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        vpc_id: pulumi.Input[str],
        traffic_filter: TrafficFilter,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:SecurityGroup", name, None, opts)
        self.environment = environment

        child_opts = pulumi.ResourceOptions(parent=self)

        self.security_group = aws.ec2.SecurityGroup(
            f"{name}-sg",
            name=traffic_filter.name,
            description=traffic_filter.description,
            vpc_id=vpc_id,
            tags=create_tags(environment, traffic_filter.name),
            opts=child_opts,
        )

        self.ingress_rules = self._create_rules(name, traffic_filter, child_opts)

        self.register_outputs({
            "security_group_id": self.security_group.id,
        })

    def _create_rules(
        self,
        name: str,
        traffic_filter: TrafficFilter,
        opts: pulumi.ResourceOptions,
    ) -> list[aws.vpc.SecurityGroupIngressRule]:
        """Create ingress rules in declared order plus the outbound rule."""
        ingress_rules = []
        seen: dict[str, int] = {}
        for rule in traffic_filter.rules:
            if rule.port in ADMIN_PORTS and rule.open_to_world:
                pulumi.log.warn(
                    f"Port {rule.port} ({rule.description}) is open to {rule.source_cidr}",
                    resource=self,
                )

            # Repeated protocol/port pairs get a numeric suffix
            resource_name = f"{name}-ingress-{rule.protocol}-{rule.port}"
            seen[resource_name] = seen.get(resource_name, 0) + 1
            if seen[resource_name] > 1:
                resource_name = f"{resource_name}-{seen[resource_name]}"

            ingress_rules.append(aws.vpc.SecurityGroupIngressRule(
                resource_name,
                security_group_id=self.security_group.id,
                ip_protocol=rule.protocol,
                from_port=rule.port,
                to_port=rule.port,
                cidr_ipv4=rule.source_cidr if rule.ip_version == 4 else None,
                cidr_ipv6=rule.source_cidr if rule.ip_version == 6 else None,
                description=rule.description,
                opts=opts,
            ))

        if traffic_filter.allow_all_outbound:
            aws.vpc.SecurityGroupEgressRule(
                f"{name}-egress-all",
                security_group_id=self.security_group.id,
                ip_protocol="-1",
                cidr_ipv4=ANY_IPV4,
                description="All outbound traffic",
                opts=opts,
            )

        return ingress_rules

    def get_outputs(self) -> SecurityGroupOutputs:
        """Get security group output values."""
        return SecurityGroupOutputs(
            security_group_id=self.security_group.id,
            security_group_arn=self.security_group.arn,
        )
