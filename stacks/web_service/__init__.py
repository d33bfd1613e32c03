"""ECS Fargate web service module.

This module provides the cluster, task definition, service and load balancer
infrastructure for a single containerised web application.
"""

from .load_balancer import LoadBalancerConstruct
from .outputs import OutputManager
from .web_service_stack import WebServiceStack

__all__ = [
    "LoadBalancerConstruct",
    "OutputManager",
    "WebServiceStack",
]
