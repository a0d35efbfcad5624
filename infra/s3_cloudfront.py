import logging
from typing import Optional

from aws_cdk import RemovalPolicy, Stack, CfnOutput
from aws_cdk.aws_cloudfront import Distribution, BehaviorOptions, ViewerProtocolPolicy, ErrorResponse
from aws_cdk.aws_cloudfront_origins import S3BucketOrigin
from aws_cdk.aws_s3 import Bucket, BlockPublicAccess
from constructs import Construct

from infra.config import FrontendConfig

logger = logging.getLogger(__name__)


class FrontendStack(Stack):
    """
    private S3 bucket fronted by a CloudFront distribution, served as a single page app
    """

    def __init__(self, scope: Construct, construct_id: str, config: Optional[FrontendConfig] = None, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        config = config or FrontendConfig()
        logger.info("defining frontend hosting in %s (bucket name: %s)",
                    construct_id, config.bucket_name or "generated")

        self.bucket: Bucket = self.create_bucket(config.bucket_name)
        self.distribution: Distribution = self.create_distribution()
        self.url: str = f"https://{self.distribution.distribution_domain_name}"

        CfnOutput(self, "CloudFrontURL", value=self.url)
        CfnOutput(self, "BucketName", value=self.bucket.bucket_name)

    def create_bucket(self, bucket_name):
        return Bucket(
            self,
            "FrontendBucket",
            bucket_name=bucket_name,
            block_public_access=BlockPublicAccess.BLOCK_ALL,
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=True
        )

    def create_distribution(self):
        return Distribution(
            self, "Distribution",
            default_behavior=BehaviorOptions(
                origin=S3BucketOrigin.with_origin_access_control(self.bucket),
                viewer_protocol_policy=ViewerProtocolPolicy.REDIRECT_TO_HTTPS
            ),
            default_root_object="index.html",
            error_responses=[self.get_spa_error_response()]
        )

    @staticmethod
    def get_spa_error_response():
        """
        returns the 404 rewrite that hands unknown paths to the client side router
        """
        return ErrorResponse(
            http_status=404,
            response_http_status=200,
            response_page_path="/index.html"
        )
