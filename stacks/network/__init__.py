"""Network infrastructure module for the web service.

This module provides the public-only VPC the Fargate service and the
Application Load Balancer are placed in.
"""

from .network_stack import NetworkStack, NetworkStackProps

__all__ = ["NetworkStack", "NetworkStackProps"]
