"""
Security components for IAM.

Components:
- IamRolesComponent: Instance, pipeline and CodeDeploy roles
"""

from cfninit.components.security.iam_roles import IamRolesComponent, IamRoleOutputs

__all__ = [
    "IamRolesComponent",
    "IamRoleOutputs",
]
