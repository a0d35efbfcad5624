import pytest
from aws_cdk import App

from infra.config import FrontendConfig, PipelineConfig
from infra.pipeline import PipelineStack
from infra.s3_cloudfront import FrontendStack

ACME = {
    "github_owner": "acme",
    "github_repo": "site",
    "github_branch": "main",
    "github_token_secret_name": "github-token",
    "stack_name": "acme-site",
}


def define_stacks(bucket_name=None, pipeline_context=None):
    app = App()
    frontend = FrontendStack(app, "Frontend", FrontendConfig(bucket_name=bucket_name))
    pipeline = PipelineStack(app, "Pipeline", PipelineConfig.from_context(pipeline_context or ACME), frontend)
    return frontend, pipeline


@pytest.fixture
def acme_context() -> dict:
    return dict(ACME)


@pytest.fixture
def stacks():
    return define_stacks()


@pytest.fixture
def frontend_stack(stacks):
    return stacks[0]


@pytest.fixture
def pipeline_stack(stacks):
    return stacks[1]
