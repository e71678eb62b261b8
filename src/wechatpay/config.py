"""Client configuration."""

from pathlib import Path
from typing import Optional

import pydantic
import yaml
from pydantic import BaseModel, Field, field_validator

from .core.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.mch.weixin.qq.com"


class WechatPayConfig(BaseModel):
    """Merchant settings needed to build a WechatPay client."""

    mchid: str = Field(description="Merchant ID")
    api_v3_key: str = Field(description="API v3 key (32 characters)")
    private_key_path: Path = Field(description="Merchant private key, apiclient_key.pem")
    certificate_path: Path = Field(description="Merchant certificate, apiclient_cert.pem")
    platform_certificate_paths: list[Path] = Field(
        default_factory=list, description="Bootstrap platform certificates"
    )
    base_url: str = Field(default=DEFAULT_BASE_URL)
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    timestamp_tolerance: int = Field(
        default=300, gt=0, description="Allowed response clock skew in seconds"
    )
    user_agent: Optional[str] = Field(default=None)

    @field_validator("mchid")
    @classmethod
    def check_mchid(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("mchid must not be empty")
        return v.strip()

    @field_validator("api_v3_key")
    @classmethod
    def check_api_v3_key(cls, v: str) -> str:
        if len(v.encode("utf-8")) != 32:
            raise ValueError("api_v3_key must be 32 bytes")
        return v

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "WechatPayConfig":
        """Load configuration from a YAML file.

        Relative key and certificate paths are resolved against the file's
        directory.

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            config = cls.model_validate(data)
        except (yaml.YAMLError, pydantic.ValidationError) as e:
            raise ConfigurationError(f"Failed to load config {config_path}: {e}") from e

        base = config_path.parent
        return config.model_copy(
            update={
                "private_key_path": _resolve(base, config.private_key_path),
                "certificate_path": _resolve(base, config.certificate_path),
                "platform_certificate_paths": [
                    _resolve(base, p) for p in config.platform_certificate_paths
                ],
            }
        )


def _resolve(base: Path, path: Path) -> Path:
    return path if path.is_absolute() else base / path
