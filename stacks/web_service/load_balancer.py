"""Application Load Balancer fronting the web service.

Terminates TLS with an imported ACM certificate on port 443 and forwards to a
health-checked target group bound to the Fargate service. Port 80 only ever
answers with a permanent redirect to HTTPS.
"""

import logging

from aws_cdk import Duration
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_ecs as ecs
from aws_cdk import aws_elasticloadbalancingv2 as elbv2
from constructs import Construct

from .constants import (
    CONTAINER_PORT,
    HEALTH_CHECK_INTERVAL_SECONDS,
    HEALTH_CHECK_PATH,
    HEALTH_CHECK_TIMEOUT_SECONDS,
    HEALTHY_THRESHOLD_COUNT,
    HTTP_PORT,
    HTTPS_PORT,
    UNHEALTHY_THRESHOLD_COUNT,
)

logger = logging.getLogger(__name__)


class LoadBalancerConstruct(Construct):
    """Internet-facing ALB with HTTPS forwarding and HTTP redirection.

    Attributes:
        load_balancer: The Application Load Balancer.
        target_group: Target group registering the Fargate service tasks.
        certificate: Imported ACM certificate used by the HTTPS listener.
        https_listener: Listener on 443 forwarding to the target group.
        http_listener: Listener on 80 redirecting to HTTPS.
    """

    load_balancer: elbv2.ApplicationLoadBalancer
    target_group: elbv2.ApplicationTargetGroup
    certificate: acm.ICertificate
    https_listener: elbv2.ApplicationListener
    http_listener: elbv2.ApplicationListener

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        vpc: ec2.IVpc,
        security_group: ec2.ISecurityGroup,
        service: ecs.FargateService,
        certificate_arn: str,
    ) -> None:
        """Declare the load balancer, target group and both listeners.

        Args:
            scope: CDK construct scope for resource creation.
            construct_id: Unique identifier for this construct.
            vpc: VPC the load balancer and target group live in.
            security_group: Security group shared with the Fargate service.
            service: Fargate service registered in the target group.
            certificate_arn: ARN of an existing ACM certificate.
        """
        super().__init__(scope, construct_id)

        self.vpc = vpc
        self.security_group = security_group
        self.service = service

        self._create_load_balancer()
        self._create_target_group()
        self._create_https_listener(certificate_arn)
        self._create_http_redirect_listener()

    def _create_load_balancer(self) -> None:
        self.load_balancer = elbv2.ApplicationLoadBalancer(
            self,
            "MyALB",
            vpc=self.vpc,
            internet_facing=True,
            security_group=self.security_group,
        )

    def _create_target_group(self) -> None:
        """Create the HTTP target group polling the application health endpoint."""
        self.target_group = elbv2.ApplicationTargetGroup(
            self,
            "MyhttpsTargetGroup",
            vpc=self.vpc,
            protocol=elbv2.ApplicationProtocol.HTTP,
            port=CONTAINER_PORT,
            targets=[self.service],
            health_check=elbv2.HealthCheck(
                path=HEALTH_CHECK_PATH,
                interval=Duration.seconds(HEALTH_CHECK_INTERVAL_SECONDS),
                timeout=Duration.seconds(HEALTH_CHECK_TIMEOUT_SECONDS),
                healthy_threshold_count=HEALTHY_THRESHOLD_COUNT,
                unhealthy_threshold_count=UNHEALTHY_THRESHOLD_COUNT,
            ),
        )

    def _create_https_listener(self, certificate_arn: str) -> None:
        """Terminate TLS on 443 and forward to the target group."""
        self.certificate = acm.Certificate.from_certificate_arn(
            self,
            "MyCertificate",
            certificate_arn,
        )
        self.https_listener = self.load_balancer.add_listener(
            "HTTPSListener",
            port=HTTPS_PORT,
            protocol=elbv2.ApplicationProtocol.HTTPS,
            certificates=[
                elbv2.ListenerCertificate.from_certificate_manager(self.certificate),
            ],
            default_target_groups=[self.target_group],
        )

    def _create_http_redirect_listener(self) -> None:
        """Answer plain HTTP with a 301 to the HTTPS listener."""
        logger.info("Declaring HTTP listener redirecting %d -> %d", HTTP_PORT, HTTPS_PORT)
        self.http_listener = self.load_balancer.add_listener(
            "HTTPListener",
            port=HTTP_PORT,
            protocol=elbv2.ApplicationProtocol.HTTP,
            default_action=elbv2.ListenerAction.redirect(
                protocol="HTTPS",
                port=str(HTTPS_PORT),
                permanent=True,
            ),
        )
