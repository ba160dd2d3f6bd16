"""
Configuration module for the cfninit Pulumi program.

Provides type-safe configuration loading from Pulumi stack config files and
the topology records the components are built from.
"""

from cfninit.configs.base import EnvironmentConfig
from cfninit.configs.environment import get_config
from cfninit.configs.defaults import default_topology
from cfninit.configs.topology import Topology, TopologyConfigError
from cfninit.configs.constants import (
    VPC_CIDR,
    PORTS,
    DEFAULT_TAGS,
)

__all__ = [
    "EnvironmentConfig",
    "get_config",
    "default_topology",
    "Topology",
    "TopologyConfigError",
    "VPC_CIDR",
    "PORTS",
    "DEFAULT_TAGS",
]
