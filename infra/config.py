"""
Configuration records built from the cdk context blocks
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FrontendConfig:
    # bucket name is generated by CloudFormation when left empty
    bucket_name: Optional[str] = None

    @classmethod
    def from_context(cls, context: Optional[dict]) -> "FrontendConfig":
        context = dict(context or {})
        return cls(bucket_name=context.get("bucket_name") or None)


@dataclass(frozen=True)
class PipelineConfig:
    github_owner: str
    github_repo: str
    github_branch: str
    github_token_secret_name: str
    stack_name: str

    @classmethod
    def from_context(cls, context: Optional[dict]) -> "PipelineConfig":
        """
        returns a pipeline config, raises KeyError for any missing field
        """
        if context is None:
            raise KeyError("pipeline")
        context = dict(context)
        return cls(
            github_owner=context["github_owner"],
            github_repo=context["github_repo"],
            github_branch=context["github_branch"],
            github_token_secret_name=context["github_token_secret_name"],
            stack_name=context["stack_name"],
        )
