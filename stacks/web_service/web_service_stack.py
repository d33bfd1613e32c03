"""ECS Fargate web service infrastructure.

This module declares the complete desired state of the web service: a public
VPC, an ECS cluster, a single Fargate task definition pulling its image from
an existing ECR repository, a shared security group, the Fargate service and
an internet-facing Application Load Balancer terminating TLS in front of it.

All deployment inputs arrive through an explicit ``WebServiceSettings``
instance. Nothing in this module reads the process environment.
"""

import logging
from typing import Any

import cdk_nag
from aws_cdk import Aspects, RemovalPolicy, Stack
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_ecr as ecr
from aws_cdk import aws_ecs as ecs
from aws_cdk import aws_logs as logs
from aws_cdk import aws_secretsmanager as secretsmanager
from cdk_nag import NagSuppressions
from constructs import Construct

from stacks.configs.service_config import WebServiceSettings
from stacks.network import NetworkStack, NetworkStackProps

from .constants import (
    CONTAINER_PORT,
    DESIRED_COUNT,
    HTTP_PORT,
    HTTPS_PORT,
    LOG_RETENTION_DAYS,
    LOG_STREAM_PREFIX,
    SSH_PORT,
    TASK_CPU,
    TASK_MEMORY_MIB,
)
from .load_balancer import LoadBalancerConstruct
from .outputs import OutputManager

logger = logging.getLogger(__name__)


class WebServiceStack(Stack):
    """Fargate web service behind an HTTPS Application Load Balancer.

    Attributes:
        settings: Deployment settings the stack was built from.
        network: Network construct owning the VPC.
        vpc: VPC instance for resource deployment.
        cluster: ECS cluster for container orchestration.
        repository: Imported ECR repository holding the application image.
        container_log_group: CloudWatch log group for container logs.
        task_definition: Task definition for the application container.
        container: The single application container definition.
        security_group: Security group shared by the service and the ALB.
        service: ECS service keeping the desired task count running.
        load_balancer: Load balancer construct with target group and listeners.
        output_manager: Manager for consistent output creation.
    """

    settings: WebServiceSettings
    network: NetworkStack
    vpc: ec2.IVpc
    cluster: ecs.Cluster
    repository: ecr.IRepository
    container_log_group: logs.LogGroup
    task_definition: ecs.FargateTaskDefinition
    container: ecs.ContainerDefinition
    security_group: ec2.SecurityGroup
    service: ecs.FargateService
    load_balancer: LoadBalancerConstruct
    output_manager: OutputManager

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: WebServiceSettings,
        network_props: NetworkStackProps | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the web service stack.

        Args:
            scope: CDK construct scope for resource creation.
            construct_id: Unique identifier for this stack.
            settings: Deployment settings (certificate, port, database, image).
            network_props: Optional overrides for the VPC layout.
            **kwargs: Additional arguments passed to parent Stack.
        """
        super().__init__(scope, construct_id, **kwargs)

        self.settings = settings
        self.output_manager = OutputManager(self, self.stack_name)

        self._create_network(network_props)
        self._create_cluster()
        self._import_repository()
        self._create_log_group()
        self._create_task_definition()
        self._create_security_group()
        self._create_service()
        self._create_load_balancer()
        self._create_outputs()
        self._configure_security_checks()

    def _create_network(self, network_props: NetworkStackProps | None) -> None:
        self.network = NetworkStack(self, "Network", props=network_props)
        self.vpc = self.network.vpc

    def _create_cluster(self) -> None:
        """Create the ECS cluster with Container Insights enabled."""
        self.cluster = ecs.Cluster(
            self,
            "MyCluster",
            vpc=self.vpc,
            container_insights_v2=ecs.ContainerInsights.ENABLED,
        )

    def _import_repository(self) -> None:
        """Reference the existing ECR repository by ARN."""
        self.repository = ecr.Repository.from_repository_arn(
            self,
            "sgroup-devops",
            self.settings.ecr_repo,
        )

    def _create_log_group(self) -> None:
        self.container_log_group = logs.LogGroup(
            self,
            "ContainerLogGroup",
            retention=LOG_RETENTION_DAYS,
            removal_policy=RemovalPolicy.DESTROY,
        )

    def _create_task_definition(self) -> None:
        """Create the Fargate task definition and its single container.

        The connection string is either injected verbatim as ``DATABASE_URL``
        or, when a secret name is configured, referenced from Secrets Manager
        and resolved by ECS when the container starts.
        """
        self.task_definition = ecs.FargateTaskDefinition(
            self,
            "MyTaskDefinition",
            cpu=TASK_CPU,
            memory_limit_mib=TASK_MEMORY_MIB,
        )

        logger.info(
            "Declaring container from %s:%s",
            self.settings.ecr_repo,
            self.settings.image_tag,
        )
        self.container = self.task_definition.add_container(
            "MyContainer",
            image=ecs.ContainerImage.from_ecr_repository(
                self.repository,
                self.settings.image_tag,
            ),
            logging=ecs.LogDrivers.aws_logs(
                stream_prefix=LOG_STREAM_PREFIX,
                log_group=self.container_log_group,
            ),
            environment=self._get_environment_variables(),
            secrets=self._get_secrets() or None,
        )
        self.container.add_port_mappings(
            ecs.PortMapping(container_port=CONTAINER_PORT),
        )

    def _get_environment_variables(self) -> dict[str, str]:
        """Get plain environment variables for the container."""
        env_vars = {}
        if not self.settings.uses_database_secret:
            env_vars["DATABASE_URL"] = self.settings.database_url
        env_vars["PORT"] = self.settings.port
        return env_vars

    def _get_secrets(self) -> dict[str, ecs.Secret]:
        """Get secret references resolved by ECS at container start."""
        if not self.settings.uses_database_secret:
            return {}

        database_secret = secretsmanager.Secret.from_secret_name_v2(
            self,
            "DatabaseUrlSecret",
            secret_name=self.settings.database_url_secret_name,
        )
        return {"DATABASE_URL": ecs.Secret.from_secrets_manager(database_secret)}

    def _create_security_group(self) -> None:
        """Create the security group shared by the service and the load balancer."""
        self.security_group = ec2.SecurityGroup(
            self,
            "EcsSecurityGroup",
            vpc=self.vpc,
            description="Security group for the web service and its load balancer",
            allow_all_outbound=True,
        )

        self.security_group.add_ingress_rule(
            peer=ec2.Peer.any_ipv4(),
            connection=ec2.Port.tcp(CONTAINER_PORT),
            description=f"Allow traffic on port {CONTAINER_PORT}",
        )
        self.security_group.add_ingress_rule(
            peer=ec2.Peer.any_ipv4(),
            connection=ec2.Port.tcp(HTTP_PORT),
            description=f"Allow inbound HTTP traffic on port {HTTP_PORT}",
        )
        self.security_group.add_ingress_rule(
            peer=ec2.Peer.any_ipv4(),
            connection=ec2.Port.tcp(HTTPS_PORT),
            description=f"Allow inbound HTTPS traffic on port {HTTPS_PORT}",
        )

        # Fargate tasks expose no SSH daemon; the rule is kept only on request.
        if self.settings.allow_ssh_ingress:
            logger.warning(
                "Security group %s allows SSH on port %d from 0.0.0.0/0",
                self.security_group.node.path,
                SSH_PORT,
            )
            self.security_group.add_ingress_rule(
                peer=ec2.Peer.any_ipv4(),
                connection=ec2.Port.tcp(SSH_PORT),
                description=f"Allow inbound SSH traffic on port {SSH_PORT}",
            )

    def _create_service(self) -> None:
        """Create the Fargate service in the public subnets."""
        self.service = ecs.FargateService(
            self,
            "MyService",
            cluster=self.cluster,
            task_definition=self.task_definition,
            desired_count=DESIRED_COUNT,
            assign_public_ip=True,
            security_groups=[self.security_group],
            min_healthy_percent=100,
            max_healthy_percent=200,
        )

    def _create_load_balancer(self) -> None:
        self.load_balancer = LoadBalancerConstruct(
            self,
            "LoadBalancer",
            vpc=self.vpc,
            security_group=self.security_group,
            service=self.service,
            certificate_arn=self.settings.certificate_arn,
        )

    def _create_outputs(self) -> None:
        """Publish load balancer and service identifiers."""
        self.output_manager.add_output_with_ssm(
            "LoadBalancerDnsName",
            self.load_balancer.load_balancer.load_balancer_dns_name,
            "Public DNS name of the Application Load Balancer",
        )
        self.output_manager.add_output_with_ssm(
            "ClusterName",
            self.cluster.cluster_name,
            "Name of the ECS cluster",
        )
        self.output_manager.add_output_with_ssm(
            "ServiceName",
            self.service.service_name,
            "Name of the ECS Fargate service",
        )

    def _configure_security_checks(self) -> None:
        """Run AWS Solutions checks with suppressions for accepted findings."""
        Aspects.of(self).add(cdk_nag.AwsSolutionsChecks())
        NagSuppressions.add_stack_suppressions(
            stack=self,
            suppressions=[
                {
                    "id": "AwsSolutions-EC23",
                    "reason": "Public web service; the load balancer and tasks accept traffic from any IPv4 source.",
                },
                {
                    "id": "AwsSolutions-ECS2",
                    "reason": "Container reads its port and connection string from environment variables.",
                },
                {
                    "id": "AwsSolutions-ELB2",
                    "reason": "Load balancer access logging is not configured for this service.",
                },
                {
                    "id": "AwsSolutions-IAM5",
                    "reason": "ECR authorization token and log stream permissions require wildcards.",
                },
            ],
        )
