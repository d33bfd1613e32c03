"""Network infrastructure for the web service.

Provides a VPC with a single public subnet tier spread over two availability
zones. There is no private or isolated tier and no NAT gateway: Fargate tasks
receive public IPs and are reachable from the internet subject to the security
group rules declared by the web service stack.

VPC Flow Logs capture rejected traffic into CloudWatch for security review.
"""

import logging
from dataclasses import dataclass
from typing import cast

from aws_cdk import RemovalPolicy
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_iam as iam
from aws_cdk import aws_logs as logs
from cdk_nag import NagSuppressions
from constructs import Construct

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkStackProps:
    """Configuration properties for the network construct.

    Attributes:
        vpc_cidr: CIDR block for the VPC.
        max_azs: Number of availability zones to spread public subnets over.
        subnet_cidr_mask: Prefix length of each public subnet.
        flow_logs_retention: CloudWatch retention for VPC Flow Logs.
    """

    vpc_cidr: str = "10.0.0.0/16"
    max_azs: int = 2
    subnet_cidr_mask: int = 24
    flow_logs_retention: logs.RetentionDays = logs.RetentionDays.ONE_MONTH


class NetworkStack(Construct):
    """Public-only VPC for the web service.

    Attributes:
        vpc: VPC holding the public subnets.
        flow_logs_role: IAM role used by VPC Flow Logs.
        flow_logs: VPC Flow Logs configuration.
    """

    vpc: ec2.Vpc
    flow_logs_role: iam.Role
    flow_logs: ec2.FlowLog

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        props: NetworkStackProps | None = None,
    ) -> None:
        """Initialize the VPC and its flow logs.

        Args:
            scope: CDK construct scope for resource creation.
            construct_id: Unique identifier for this construct.
            props: Optional configuration properties for the network.
        """
        super().__init__(scope, construct_id)

        self._props = props or NetworkStackProps()

        self._create_vpc()
        self._create_flow_logs()

    def _create_vpc(self) -> None:
        """Create the VPC with public subnets only."""
        logger.info(
            "Declaring VPC %s across %d AZs with public subnets",
            self._props.vpc_cidr,
            self._props.max_azs,
        )
        self.vpc = ec2.Vpc(
            self,
            "Vpc",
            ip_addresses=ec2.IpAddresses.cidr(self._props.vpc_cidr),
            max_azs=self._props.max_azs,
            nat_gateways=0,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name="public-subnet",
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=self._props.subnet_cidr_mask,
                ),
            ],
        )

    def _create_flow_logs(self) -> None:
        """Send rejected VPC traffic to a CloudWatch log group."""
        flow_logs_log_group = logs.LogGroup(
            self,
            "VpcFlowLogsGroup",
            retention=self._props.flow_logs_retention,
            removal_policy=RemovalPolicy.DESTROY,
        )

        self.flow_logs_role = iam.Role(
            self,
            "VpcFlowLogsRole",
            assumed_by=cast(
                "iam.IPrincipal",
                iam.ServicePrincipal("vpc-flow-logs.amazonaws.com"),
            ),
            inline_policies={
                "FlowLogsDeliveryRolePolicy": iam.PolicyDocument(
                    statements=[
                        iam.PolicyStatement(
                            effect=iam.Effect.ALLOW,
                            actions=[
                                "logs:CreateLogStream",
                                "logs:PutLogEvents",
                                "logs:DescribeLogGroups",
                                "logs:DescribeLogStreams",
                            ],
                            resources=[
                                flow_logs_log_group.log_group_arn,
                                f"{flow_logs_log_group.log_group_arn}:*",
                            ],
                        ),
                    ],
                ),
            },
        )
        NagSuppressions.add_resource_suppressions(
            self.flow_logs_role,
            [
                {
                    "id": "AwsSolutions-IAM5",
                    "reason": "Flow Logs write to streams under the log group ARN wildcard.",
                },
            ],
            apply_to_children=True,
        )

        self.flow_logs = ec2.FlowLog(
            self,
            "VpcFlowLogs",
            resource_type=ec2.FlowLogResourceType.from_vpc(self.vpc),
            destination=ec2.FlowLogDestination.to_cloud_watch_logs(
                flow_logs_log_group,
                self.flow_logs_role,
            ),
            traffic_type=ec2.FlowLogTrafficType.REJECT,
        )
