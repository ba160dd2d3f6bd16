"""
Networking components for VPC infrastructure.

Components:
- VpcComponent: VPC with tiered subnets, NAT gateways, route tables
- SecurityGroupComponent: Security group built from a TrafficFilter
"""

from cfninit.components.networking.vpc import VpcComponent, VpcOutputs
from cfninit.components.networking.security_groups import (
    SecurityGroupComponent,
    SecurityGroupOutputs,
)

__all__ = [
    "VpcComponent",
    "VpcOutputs",
    "SecurityGroupComponent",
    "SecurityGroupOutputs",
]
