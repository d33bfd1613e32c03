"""Deployment configuration models."""

from .service_config import WebServiceSettings, get_settings, reset_settings

__all__ = ["WebServiceSettings", "get_settings", "reset_settings"]
