"""Entry point for the ECS web service infrastructure deployment.

This module loads deployment settings once, builds the CDK application around
them and synthesizes it. The CDK CLI (``cdk synth``, ``cdk diff``,
``cdk deploy``) runs this module through ``cdk.json``.

Required Environment Variables (or ``.env`` entries):
    CERTIFICATE_ARN: ACM certificate for the HTTPS listener
    PORT: Application port passed to the container
    DATABASE_URL or DATABASE_URL_SECRET_NAME: Database connection string source
    ECR_REPO: ECR repository ARN holding the application image

Environment Configuration Options:
    1. AWS Named Profile:
       AWS_PROFILE: Named profile from AWS credentials file

    2. Direct Environment Variables:
       AWS_DEFAULT_REGION: Target AWS region for deployment
       CDK_DEFAULT_ACCOUNT: Target AWS account for deployment
"""

import logging
import os
from dataclasses import dataclass

import boto3
from aws_cdk import App, Environment

from stacks.configs import WebServiceSettings, get_settings
from stacks.web_service import WebServiceStack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StackConfiguration:
    """Configuration settings for stack deployment.

    Attributes:
        app_name: Base name for stack resources and identifiers.
        environment: Optional deployment environment name.
        aws_profile: Optional AWS credentials profile name.
    """

    app_name: str = "MyEcsConstruct"
    environment: str | None = None
    aws_profile: str | None = None

    @property
    def stack_name(self) -> str:
        """Generate stack name with environment suffix when applicable."""
        if self.environment:
            return f"{self.app_name}Stack-{self.environment}"
        return f"{self.app_name}Stack"


def create_deployment_environment(config: StackConfiguration) -> Environment:
    """Creates CDK Environment from configuration.

    Args:
        config: Stack configuration containing environment details.

    Returns:
        CDK Environment with account and region resolved.
    """
    if config.aws_profile:
        session = boto3.Session(profile_name=config.aws_profile)
        sts = session.client("sts")
        account = sts.get_caller_identity()["Account"]
        return Environment(
            account=account,
            region=session.region_name or "us-east-1",
        )

    return Environment(
        account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
        region=os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
    )


def initialize_app(
    settings: WebServiceSettings,
    environment: str | None = None,
    aws_profile: str | None = None,
) -> App:
    """Initializes and configures the CDK application.

    Args:
        settings: Deployment settings passed through to the stack.
        environment: Optional deployment environment name.
        aws_profile: Optional AWS credentials profile to use.

    Returns:
        Configured CDK App instance ready for synthesis.
    """
    config = StackConfiguration(environment=environment, aws_profile=aws_profile)
    env = create_deployment_environment(config)
    app = App()

    logger.info("Building %s for %s/%s", config.stack_name, env.account, env.region)
    WebServiceStack(
        app,
        config.stack_name,
        settings=settings,
        env=env,
        description="Fargate web service behind an HTTPS Application Load Balancer",
        tags={
            "Environment": environment or "dev",
            "Application": config.app_name,
            "ManagedBy": "AWS-CDK",
        },
    )
    return app


def main() -> None:
    """Main execution entry point."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    app = initialize_app(
        settings=settings,
        environment=os.environ.get("ENVIRONMENT"),
        aws_profile=os.environ.get("AWS_PROFILE"),
    )
    app.synth()


if __name__ == "__main__":
    main()
