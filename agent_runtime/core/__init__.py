"""
Core utilities and configuration for the agent runtime.

This package provides the settings model and the logging configuration
shared by the policy, usage and runtime subpackages.
"""

from agent_runtime.core.config import Settings, get_settings
from agent_runtime.core.logging_config import get_logger, setup_logging

__all__ = ["Settings", "get_settings", "get_logger", "setup_logging"]
