"""
Pulumi infrastructure-as-code for the Laravel web tier (cfninit).

This package defines AWS infrastructure including:
- VPC with a public subnet tier and a NAT gateway
- Security group allowing HTTPS, HTTP and SSH
- Auto scaling EC2 pool bootstrapped with nginx + PHP on first boot
- CodePipeline: GitHub source, CodeBuild build, CodeDeploy rolling deploy
"""
