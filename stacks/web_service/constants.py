"""Configuration constants for the web service deployment.

This module defines the fixed shape of the Fargate task, the ports exposed by
the container and the load balancer, and the target group health check.
"""

from aws_cdk import aws_logs as logs

TASK_CPU: int = 256
TASK_MEMORY_MIB: int = 512
CONTAINER_PORT: int = 3000
DESIRED_COUNT: int = 1

HTTP_PORT: int = 80
HTTPS_PORT: int = 443
SSH_PORT: int = 22

HEALTH_CHECK_PATH: str = "/health"
HEALTH_CHECK_INTERVAL_SECONDS: int = 30
HEALTH_CHECK_TIMEOUT_SECONDS: int = 5
HEALTHY_THRESHOLD_COUNT: int = 2
UNHEALTHY_THRESHOLD_COUNT: int = 2

LOG_STREAM_PREFIX: str = "my-container"
LOG_RETENTION_DAYS: logs.RetentionDays = logs.RetentionDays.ONE_MONTH
