"""
Compute components.

Components:
- ComputePoolComponent: Auto scaling group with launch template and
  lifecycle-hook bootstrap signalling
"""

from cfninit.components.compute.auto_scaling import ComputePoolComponent, ComputePoolOutputs

__all__ = [
    "ComputePoolComponent",
    "ComputePoolOutputs",
]
