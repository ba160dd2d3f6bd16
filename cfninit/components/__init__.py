"""
Pulumi component resources for the cfninit stack.

Each submodule provides reusable ComponentResource classes:
- networking: VPC, subnets, NAT gateways, security group
- security: IAM roles for instances, the pipeline and CodeDeploy
- compute: Auto scaling web pool with first-boot recipe
- storage: Pipeline artifact bucket
- pipeline: CodeBuild project, CodeDeploy group, CodePipeline
"""
