"""
API Configuration Manager
Centralized configuration of the remote user service and the local data directory
"""
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import logging

import streamlit as st
from dotenv import load_dotenv

from racf_core.errors import ConfigurationError

from .base_connector import APIConfig

logger = logging.getLogger(__name__)


class APIConfigManager:
    """
    Loads the user-service configuration.

    Sources, first match wins:
    1. Streamlit secrets, ``[api.users]`` table
    2. Environment variables (a ``.env`` file is loaded first)

    Usage:
        config_manager = APIConfigManager()
        api_config = config_manager.get_user_api_config()
    """

    ENV_VARS = {
        "base_url": "RACF_API_URL",
        "api_key": "RACF_API_KEY",
        "timeout": "RACF_API_TIMEOUT",
        "health_timeout": "RACF_HEALTH_TIMEOUT",
        "data_dir": "RACF_DATA_DIR",
    }

    DEFAULTS = {
        "base_url": "",
        "api_key": None,
        "timeout": 30,
        "health_timeout": 2.0,
        "data_dir": "local_data",
    }

    def __init__(
        self,
        secrets: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            secrets: Mapping shaped like ``st.secrets``; read from Streamlit when None
            environ: Environment mapping; ``os.environ`` (after loading .env) when None
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        self.configs = self._load_configs_from_secrets(secrets)
        if self.configs is None:
            self.configs = self._load_configs_from_env(environ)

        self.configs = {**self.DEFAULTS, **{k: v for k, v in self.configs.items() if v not in (None, "")}}

    def _load_configs_from_secrets(self, secrets: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        """
        Expected secrets.toml format:
        [api.users]
        base_url = "http://localhost:4000/api"
        api_key = "optional-token"
        timeout = 30
        health_timeout = 2.0
        data_dir = "local_data"
        """
        try:
            if secrets is None:
                secrets = st.secrets
            if "api" in secrets and "users" in secrets["api"]:
                return dict(secrets["api"]["users"])
        except Exception as e:
            # No secrets.toml: Streamlit raises when the mapping is touched
            logger.debug(f"Streamlit secrets unavailable: {e}")
        return None

    def _load_configs_from_env(self, environ: Mapping[str, str]) -> Dict[str, Any]:
        return {key: environ.get(var) for key, var in self.ENV_VARS.items()}

    def _number(self, key: str) -> float:
        value = self.configs[key]
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid value for {key}: {value!r}",
                config_key=key,
                expected_type="number",
            ) from e
        if number <= 0:
            raise ConfigurationError(
                f"{key} must be positive, got {value!r}",
                config_key=key,
                expected_type="positive number",
            )
        return number

    @property
    def is_remote_configured(self) -> bool:
        return bool(str(self.configs["base_url"]).strip())

    @property
    def data_dir(self) -> Path:
        return Path(self.configs["data_dir"])

    def get_user_api_config(self) -> APIConfig:
        """Build the APIConfig for the user service connector."""
        return APIConfig(
            api_name="User Service",
            base_url=str(self.configs["base_url"]).strip(),
            api_key=self.configs["api_key"],
            headers={"Content-Type": "application/json"},
            timeout=self._number("timeout"),
            health_timeout=self._number("health_timeout"),
        )
