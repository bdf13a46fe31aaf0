"""
Remote User Service Module
Provides the connector for the remote user API and its configuration
"""

from .base_connector import BaseAPIConnector, APIConfig
from .config_manager import APIConfigManager
from .user_connector import UserAPIConnector

__all__ = [
    "BaseAPIConnector",
    "APIConfig",
    "APIConfigManager",
    "UserAPIConnector",
]
