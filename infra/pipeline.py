"""
Release pipeline for the app:
* Source - GitHub checkout triggered by webhook on the configured branch
* DeployBackend - CodeBuild running ampx pipeline-deploy in custom pipeline mode
* DeployFrontend - CodeBuild building the site, syncing it to the hosting bucket
  and invalidating the distribution
"""
import logging

from aws_cdk import Stack, CfnOutput
from aws_cdk.aws_codebuild import PipelineProject, BuildEnvironment, BuildEnvironmentVariable, \
    BuildSpec, LinuxBuildImage, ComputeType
from aws_cdk.aws_codepipeline import Pipeline, Artifact
from aws_cdk.aws_codepipeline_actions import GitHubSourceAction, GitHubTrigger, CodeBuildAction
from aws_cdk.aws_iam import PolicyStatement, Effect
from aws_cdk.aws_secretsmanager import Secret
from constructs import Construct

from infra.config import PipelineConfig
from infra.s3_cloudfront import FrontendStack

logger = logging.getLogger(__name__)

BUILD_SPEC_VERSION = "0.2"
NODEJS_VERSION = 20
OUTPUTS_FILE = "amplify_outputs.json"

SOURCE_ARTIFACT = "SourceOutput"
BACKEND_ARTIFACT = "BackendOutput"

# the deployment tool decides at run time which resources it provisions
BACKEND_DEPLOY_ACTIONS = [
    "cloudformation:*",
    "iam:*",
    "cognito-idp:*",
    "appsync:*",
    "dynamodb:*",
    "lambda:*",
    "s3:*",
    "ssm:*",
    "secretsmanager:GetSecretValue",
    "logs:*",
    "sts:AssumeRole",
]


def environment_variables(**values) -> dict:
    """
    returns codebuild environment variables keyed by the upper cased names
    """
    return {
        name.upper(): BuildEnvironmentVariable(value=value)
        for name, value in values.items()
    }


def backend_build_spec() -> dict:
    return {
        "version": BUILD_SPEC_VERSION,
        "phases": {
            "install": {
                "runtime-versions": {"nodejs": NODEJS_VERSION},
                "commands": ["npm ci", "npx ampx --version"],
            },
            "build": {
                "commands": [
                    'echo "Deploying backend with --custom-pipeline..."',
                    "npx ampx pipeline-deploy --branch $BRANCH_NAME --custom-pipeline "
                    "--stack-name $STACK_NAME --outputs-out-dir . --outputs-format json",
                    f"cat {OUTPUTS_FILE}",
                ],
            },
        },
        "artifacts": {"files": [OUTPUTS_FILE]},
        "cache": {"paths": ["node_modules/**/*"]},
    }


def frontend_build_spec(backend_artifact: str = BACKEND_ARTIFACT) -> dict:
    """
    returns the build spec for the frontend, the backend outputs file is read
    from the secondary source directory codebuild creates for backend_artifact
    """
    return {
        "version": BUILD_SPEC_VERSION,
        "phases": {
            "install": {
                "runtime-versions": {"nodejs": NODEJS_VERSION},
                "commands": ["npm ci"],
            },
            "pre_build": {
                "commands": [
                    f"cp $CODEBUILD_SRC_DIR_{backend_artifact}/{OUTPUTS_FILE} .",
                    f"cat {OUTPUTS_FILE}",
                ],
            },
            "build": {
                "commands": ["npm run build"],
            },
            "post_build": {
                "commands": [
                    "aws s3 sync dist/ s3://$BUCKET_NAME/ --delete",
                    'aws cloudfront create-invalidation --distribution-id $DISTRIBUTION_ID --paths "/*"',
                ],
            },
        },
    }


class PipelineStack(Stack):
    """
    returns the release pipeline deploying the backend and then the frontend
    """

    def __init__(self, scope: Construct, construct_id: str, config: PipelineConfig,
                 frontend: FrontendStack, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.prefix: str = config.stack_name
        logger.info("defining pipeline %s-pipeline for %s/%s@%s",
                    self.prefix, config.github_owner, config.github_repo, config.github_branch)

        # resolved by CodePipeline at execution time, nothing is read here
        self.github_token = Secret.from_secret_name_v2(self, "GitHubToken", config.github_token_secret_name)

        self.source_output = Artifact(SOURCE_ARTIFACT)
        self.backend_output = Artifact(BACKEND_ARTIFACT)

        self.backend_project: PipelineProject = self.create_project(
            "BackendBuild", "backend",
            environment_variables(branch_name=config.github_branch, stack_name=config.stack_name),
            backend_build_spec()
        )
        self.backend_project.add_to_role_policy(PolicyStatement(
            effect=Effect.ALLOW,
            actions=BACKEND_DEPLOY_ACTIONS,
            resources=["*"]
        ))

        self.frontend_project: PipelineProject = self.create_project(
            "FrontendBuild", "frontend",
            environment_variables(bucket_name=frontend.bucket.bucket_name,
                                  distribution_id=frontend.distribution.distribution_id),
            frontend_build_spec(self.backend_output.artifact_name)
        )
        frontend.bucket.grant_read_write(self.frontend_project)
        self.frontend_project.add_to_role_policy(PolicyStatement(
            effect=Effect.ALLOW,
            actions=["cloudfront:CreateInvalidation"],
            resources=[self.format_arn(
                service="cloudfront",
                region="",
                resource="distribution",
                resource_name=frontend.distribution.distribution_id
            )]
        ))

        self.pipeline: Pipeline = Pipeline(self, "Pipeline", pipeline_name=f"{self.prefix}-pipeline")
        self.pipeline.add_stage(
            stage_name="Source",
            actions=[GitHubSourceAction(
                action_name="GitHub",
                owner=config.github_owner,
                repo=config.github_repo,
                branch=config.github_branch,
                oauth_token=self.github_token.secret_value,
                output=self.source_output,
                trigger=GitHubTrigger.WEBHOOK
            )]
        )
        self.pipeline.add_stage(
            stage_name="DeployBackend",
            actions=[CodeBuildAction(
                action_name="Backend",
                project=self.backend_project,
                input=self.source_output,
                outputs=[self.backend_output]
            )]
        )
        self.pipeline.add_stage(
            stage_name="DeployFrontend",
            actions=[CodeBuildAction(
                action_name="Frontend",
                project=self.frontend_project,
                input=self.source_output,
                extra_inputs=[self.backend_output]
            )]
        )

        CfnOutput(self, "PipelineName", value=self.pipeline.pipeline_name)

    def create_project(self, construct_id: str, suffix: str, variables: dict, build_spec: dict) -> PipelineProject:
        return PipelineProject(
            self, construct_id,
            project_name=f"{self.prefix}-{suffix}",
            environment=BuildEnvironment(
                build_image=LinuxBuildImage.STANDARD_7_0,
                compute_type=ComputeType.MEDIUM
            ),
            environment_variables=variables,
            build_spec=BuildSpec.from_object(build_spec)
        )
