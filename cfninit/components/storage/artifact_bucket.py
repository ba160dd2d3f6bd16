"""
Artifact Bucket Component for the release pipeline.

Holds the SourceArtifact and BuildArtifact zips passed between stages.

Features:
- force_destroy: The bucket and its objects are removed with the stack.
- Encryption (AES256) and PublicAccessBlock: artifacts are only reachable
  through IAM (pipeline role, instance role for CodeDeploy revisions).
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from cfninit.utils.naming import ResourceNamer
from cfninit.utils.tags import create_tags


@dataclass
class ArtifactBucketOutputs:
    """Output values from artifact bucket component."""
    bucket_name: pulumi.Output[str]
    bucket_arn: pulumi.Output[str]


class ArtifactBucketComponent(pulumi.ComponentResource):
    """
    Private S3 bucket for pipeline artifacts.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        namer: ResourceNamer,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:storage:ArtifactBucket", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.bucket = aws.s3.Bucket(
            f"{name}-artifacts",
            bucket_prefix=f"{namer.bucket_name('artifacts')}-",
            force_destroy=True,
            tags=create_tags(environment, f"{name}-artifacts"),
            opts=child_opts,
        )

        aws.s3.BucketServerSideEncryptionConfiguration(
            f"{name}-artifacts-encryption",
            bucket=self.bucket.id,
            rules=[aws.s3.BucketServerSideEncryptionConfigurationRuleArgs(
                apply_server_side_encryption_by_default=aws.s3.BucketServerSideEncryptionConfigurationRuleApplyServerSideEncryptionByDefaultArgs(
                    sse_algorithm="AES256",
                ),
            )],
            opts=child_opts,
        )

        aws.s3.BucketPublicAccessBlock(
            f"{name}-artifacts-public-block",
            bucket=self.bucket.id,
            block_public_acls=True,
            block_public_policy=True,
            ignore_public_acls=True,
            restrict_public_buckets=True,
            opts=child_opts,
        )

        self.register_outputs({
            "bucket_name": self.bucket.bucket,
            "bucket_arn": self.bucket.arn,
        })

    def get_outputs(self) -> ArtifactBucketOutputs:
        """Get artifact bucket output values."""
        return ArtifactBucketOutputs(
            bucket_name=self.bucket.bucket,
            bucket_arn=self.bucket.arn,
        )
