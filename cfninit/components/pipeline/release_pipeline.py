"""
Release Pipeline Component: Source -> Build -> Deploy.

Stage Flow:
1. Source: GitHub (v1 action) pulls the configured branch. The OAuth token
   is read from Secrets Manager when Pulumi runs and is stored only as an
   encrypted Pulumi secret. Output: SourceArtifact.
   - WEBHOOK trigger: a CodePipeline webhook (HMAC-authenticated, filtered
     on the branch ref) registered on the repository through the GitHub
     provider, using the same OAuth token.
   - POLL trigger: CodePipeline polls the branch, no webhook.
2. Build: CodeBuild runs the build recipe on SourceArtifact.
   Output: BuildArtifact.
3. Deploy: CodeDeploy rolls BuildArtifact onto the compute pool.

Stage transitions, failure halting and retries belong to CodePipeline.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws
import pulumi_github as github
import pulumi_random as random

from cfninit.configs.topology import ReleasePipeline
from cfninit.utils.tags import create_tags


SOURCE_ACTION = "Source"


@dataclass
class ReleasePipelineOutputs:
    """Output values from release pipeline component."""
    pipeline_name: pulumi.Output[str]
    pipeline_arn: pulumi.Output[str]
    webhook_url: pulumi.Output[str] | None


class ReleasePipelineComponent(pulumi.ComponentResource):
    """
    CodePipeline with a fixed Source, Build, Deploy stage order.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        pipeline: ReleasePipeline,
        role_arn: pulumi.Input[str],
        artifact_bucket_name: pulumi.Input[str],
        build_project_name: pulumi.Input[str],
        application_name: pulumi.Input[str],
        deployment_group_name: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:pipeline:ReleasePipeline", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        source_stage, build_stage, deploy_stage = pipeline.stage_names
        source = pipeline.source

        token = aws.secretsmanager.get_secret_version_output(
            secret_id=source.token_secret_name,
        ).secret_string

        self.pipeline = aws.codepipeline.Pipeline(
            f"{name}-pipeline",
            name=pipeline.name,
            role_arn=role_arn,
            artifact_stores=[
                aws.codepipeline.PipelineArtifactStoreArgs(
                    location=artifact_bucket_name,
                    type="S3",
                ),
            ],
            stages=[
                aws.codepipeline.PipelineStageArgs(
                    name=source_stage,
                    actions=[
                        aws.codepipeline.PipelineStageActionArgs(
                            name=SOURCE_ACTION,
                            category="Source",
                            owner="ThirdParty",
                            provider="GitHub",
                            version="1",
                            output_artifacts=[pipeline.source_artifact],
                            configuration={
                                "Owner": source.owner,
                                "Repo": source.repo,
                                "Branch": source.branch,
                                "OAuthToken": pulumi.Output.secret(token),
                                "PollForSourceChanges": "true" if source.trigger == "POLL" else "false",
                            },
                        ),
                    ],
                ),
                aws.codepipeline.PipelineStageArgs(
                    name=build_stage,
                    actions=[
                        aws.codepipeline.PipelineStageActionArgs(
                            name="Build",
                            category="Build",
                            owner="AWS",
                            provider="CodeBuild",
                            version="1",
                            input_artifacts=[pipeline.source_artifact],
                            output_artifacts=[pipeline.build_artifact],
                            configuration={
                                "ProjectName": build_project_name,
                            },
                        ),
                    ],
                ),
                aws.codepipeline.PipelineStageArgs(
                    name=deploy_stage,
                    actions=[
                        aws.codepipeline.PipelineStageActionArgs(
                            name="DeployToEc2",
                            category="Deploy",
                            owner="AWS",
                            provider="CodeDeploy",
                            version="1",
                            input_artifacts=[pipeline.build_artifact],
                            configuration={
                                "ApplicationName": application_name,
                                "DeploymentGroupName": deployment_group_name,
                            },
                        ),
                    ],
                ),
            ],
            tags=create_tags(environment, pipeline.name),
            opts=child_opts,
        )

        self.webhook = None
        if source.trigger == "WEBHOOK":
            self._create_webhook(name, environment, pipeline, token)

        self.register_outputs({
            "pipeline_name": self.pipeline.name,
            "pipeline_arn": self.pipeline.arn,
            "webhook_url": self.webhook.url if self.webhook else None,
        })

    def _create_webhook(
        self,
        name: str,
        environment: str,
        pipeline: ReleasePipeline,
        token: pulumi.Output[str],
    ) -> None:
        """
        Start the pipeline on pushes to the source branch.

        CodePipeline verifies each delivery with a shared HMAC secret and
        ignores pushes to other branches.
        """
        child_opts = pulumi.ResourceOptions(parent=self)
        source = pipeline.source

        secret = random.RandomPassword(
            f"{name}-webhook-secret",
            length=32,
            special=False,
            opts=child_opts,
        )

        self.webhook = aws.codepipeline.Webhook(
            f"{name}-webhook",
            authentication="GITHUB_HMAC",
            authentication_configuration=aws.codepipeline.WebhookAuthenticationConfigurationArgs(
                secret_token=secret.result,
            ),
            filters=[
                aws.codepipeline.WebhookFilterArgs(
                    json_path="$.ref",
                    match_equals=source.branch_ref,
                ),
            ],
            target_action=SOURCE_ACTION,
            target_pipeline=self.pipeline.name,
            tags=create_tags(environment, f"{pipeline.name}-webhook"),
            opts=child_opts,
        )

        provider = github.Provider(
            f"{name}-github",
            owner=source.owner,
            token=pulumi.Output.secret(token),
            opts=child_opts,
        )

        github.RepositoryWebhook(
            f"{name}-github-webhook",
            repository=source.repo,
            events=["push"],
            configuration=github.RepositoryWebhookConfigurationArgs(
                url=self.webhook.url,
                content_type="json",
                secret=secret.result,
                insecure_ssl=False,
            ),
            opts=pulumi.ResourceOptions(parent=self, provider=provider),
        )

    def get_outputs(self) -> ReleasePipelineOutputs:
        """Get release pipeline output values."""
        return ReleasePipelineOutputs(
            pipeline_name=self.pipeline.name,
            pipeline_arn=self.pipeline.arn,
            webhook_url=self.webhook.url if self.webhook else None,
        )
