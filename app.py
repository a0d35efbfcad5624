#!/usr/bin/env python3
import logging
import os
from typing import Optional

from aws_cdk import App, Environment

from infra.config import FrontendConfig, PipelineConfig
from infra.pipeline import PipelineStack
from infra.s3_cloudfront import FrontendStack

logger = logging.getLogger(__name__)


def build(app: App, env: Optional[Environment] = None):
    """
    defines the frontend hosting first, the pipeline deploys into its bucket and distribution
    """
    frontend = FrontendStack(
        app, "Frontend",
        FrontendConfig.from_context(app.node.try_get_context("frontend")),
        env=env
    )
    pipeline = PipelineStack(
        app, "Pipeline",
        PipelineConfig.from_context(app.node.try_get_context("pipeline")),
        frontend,
        env=env
    )
    pipeline.add_dependency(frontend)
    return frontend, pipeline


def default_environment():
    account = os.getenv("CDK_DEFAULT_ACCOUNT")
    region = os.getenv("CDK_DEFAULT_REGION")
    if account is None and region is None:
        return None
    return Environment(account=account, region=region)


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    app = App()
    build(app, default_environment())
    logger.info("synthesizing to %s", app.outdir)
    app.synth()
