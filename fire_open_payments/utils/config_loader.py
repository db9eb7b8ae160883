"""
Configuration loader for the fire.com client
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
import logging

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from fire_open_payments.error_handler import ConfigurationError, MissingFieldError
from fire_open_payments.integrations.contracts.interfaces import FireEndpoints, FireMode
from fire_open_payments.utils.params import check_required_params

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("client_id", "client_key", "refresh_token", "mode")

SANDBOX_ENDPOINTS = FireEndpoints(
    api_base_url="https://api-preprod.fire.com/",
    redirect_base_url="https://payments-preprod.fire.com/",
)
LIVE_ENDPOINTS = FireEndpoints(
    api_base_url="https://api.fire.com/",
    redirect_base_url="https://payments.fire.com/",
)

_ENV_VARS = {
    "client_id": "FIRE_CLIENT_ID",
    "client_key": "FIRE_CLIENT_KEY",
    "refresh_token": "FIRE_REFRESH_TOKEN",
    "mode": "FIRE_MODE",
    "webhook_secret": "FIRE_WEBHOOK_SECRET",
    "timeout_seconds": "FIRE_TIMEOUT_SECONDS",
}


class FireConfig(BaseModel):
    """Validated fire.com credentials plus the URLs derived from ``mode``"""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(min_length=1)
    client_key: str = Field(min_length=1, repr=False)
    refresh_token: str = Field(min_length=1, repr=False)
    mode: FireMode
    api_base_url: str = ""
    redirect_base_url: str = ""
    webhook_secret: Optional[str] = Field(default=None, repr=False)
    timeout_seconds: float = Field(default=20.0, gt=0)
    token_ttl_seconds: int = Field(default=900, ge=60)

    @model_validator(mode="before")
    @classmethod
    def _derive_urls(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("mode") is not None:
            endpoints = resolve_endpoints(data["mode"])
            data = {**data, "api_base_url": endpoints.api_base_url, "redirect_base_url": endpoints.redirect_base_url}
        return data

    @property
    def endpoints(self) -> FireEndpoints:
        return FireEndpoints(api_base_url=self.api_base_url, redirect_base_url=self.redirect_base_url)


def resolve_endpoints(mode: Union[str, FireMode]) -> FireEndpoints:
    """Only "live" selects production; every other value selects the sandbox hosts."""
    value = mode.value if isinstance(mode, FireMode) else str(mode)
    return LIVE_ENDPOINTS if value == FireMode.LIVE.value else SANDBOX_ENDPOINTS


def parse_mode(raw_mode: Any, strict_mode: bool = True) -> FireMode:
    if isinstance(raw_mode, FireMode):
        return raw_mode
    value = str(raw_mode).strip().lower()
    try:
        return FireMode(value)
    except ValueError:
        if strict_mode:
            raise ConfigurationError(
                f"mode must be one of {', '.join(m.value for m in FireMode)}; got {raw_mode!r}"
            ) from None
    logger.warning(f"Unrecognised fire.com mode {raw_mode!r}, falling back to sandbox")
    return FireMode.SANDBOX


def check_required_fields(config: Union[Mapping[str, Any], FireConfig], strict_mode: bool = True) -> FireConfig:
    """
    Validate credentials and derive the API and redirect base URLs

    Args:
        config: Mapping holding at least client_id, client_key, refresh_token and mode
        strict_mode: Reject unknown modes instead of silently using the sandbox

    Returns:
        Frozen FireConfig with api_base_url and redirect_base_url filled in

    Raises:
        MissingFieldError: For the first absent field, in REQUIRED_FIELDS order
        ConfigurationError: If a present value is unusable
    """
    if isinstance(config, FireConfig):
        return config

    _, missing = check_required_params(REQUIRED_FIELDS, config)
    if missing:
        raise MissingFieldError(missing[0])

    data: Dict[str, Any] = {key: value for key, value in config.items() if value is not None}
    data["mode"] = parse_mode(data["mode"], strict_mode=strict_mode)

    try:
        return FireConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid fire.com configuration: {e}") from e


def load_fire_config(config_path: Optional[Path] = None, strict_mode: bool = True) -> FireConfig:
    """
    Load and validate fire.com configuration from a YAML file or the environment

    Args:
        config_path: YAML file, either flat or nested under a top-level ``fire`` key.
            When omitted, FIRE_* environment variables (and a .env file) are used.

    Returns:
        Validated FireConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If config is incomplete or invalid
    """
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
        if isinstance(config_data.get("fire"), dict):
            config_data = config_data["fire"]
        source = str(config_path)
    else:
        load_dotenv()
        config_data = {key: os.getenv(env_var) for key, env_var in _ENV_VARS.items()}
        source = "environment"

    try:
        config = check_required_fields(config_data, strict_mode=strict_mode)
    except ConfigurationError as e:
        logger.error(f"Config validation failed: {e}")
        raise

    logger.info(f"Successfully loaded fire.com {config.mode.value} config from {source}")
    return config
