"""
Storage components.

Components:
- ArtifactBucketComponent: S3 bucket holding pipeline artifacts
"""

from cfninit.components.storage.artifact_bucket import (
    ArtifactBucketComponent,
    ArtifactBucketOutputs,
)

__all__ = [
    "ArtifactBucketComponent",
    "ArtifactBucketOutputs",
]
