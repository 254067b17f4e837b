"""
Configuration module for the content migration tool.

This module loads the migration settings (store endpoints, credentials,
admin API locations and run tuning) from a YAML or JSON file into a typed
configuration object that is built once and passed to every component.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from content_migrator.constants import (
    DEFAULT_COPY_TIMEOUT,
    DEFAULT_DEST_BUCKET,
    DEFAULT_PAGE_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
)
from content_migrator.exceptions import ConfigError
from content_migrator.utils.logging import log_with_context


@dataclass
class StoreConfig:
    """Connection settings for one side of the migration."""

    endpoint_url: str | None = None
    region_name: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    admin_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> StoreConfig:
        """Build from either snake_case keys or the S3 client style keys.

        The S3 client style (``endpoint``, ``region``, ``credentials`` with
        ``accessKeyId``/``secretAccessKey``, ``daAdminUrl``) is what existing
        ``.dev.vars`` files contain.
        """
        if not data:
            return cls()
        credentials = data.get("credentials") or {}
        return cls(
            endpoint_url=data.get("endpoint_url", data.get("endpoint")),
            region_name=data.get("region_name", data.get("region")),
            access_key_id=data.get(
                "access_key_id", credentials.get("accessKeyId")
            ),
            secret_access_key=data.get(
                "secret_access_key", credentials.get("secretAccessKey")
            ),
            admin_url=data.get("admin_url", data.get("daAdminUrl")),
        )

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for creating an S3 client against this store."""
        kwargs: dict[str, Any] = {}
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        if self.region_name:
            kwargs["region_name"] = self.region_name
        if self.access_key_id:
            kwargs["aws_access_key_id"] = self.access_key_id
        if self.secret_access_key:
            kwargs["aws_secret_access_key"] = self.secret_access_key
        return kwargs


@dataclass
class MigrationConfig:
    """Typed configuration for the migration tool."""

    source: StoreConfig = field(default_factory=StoreConfig)
    dest: StoreConfig = field(default_factory=StoreConfig)

    # Admin API
    bearer: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    # Content copy
    dest_bucket: str = DEFAULT_DEST_BUCKET
    page_size: int = DEFAULT_PAGE_SIZE
    copy_timeout: float = DEFAULT_COPY_TIMEOUT

    # Status documents
    results_dir: str = "."

    def __post_init__(self) -> None:
        if not isinstance(self.page_size, int) or self.page_size < 1:
            raise ConfigError(f"page_size must be a positive integer, got {self.page_size!r}")
        if self.copy_timeout <= 0:
            raise ConfigError(f"copy_timeout must be positive, got {self.copy_timeout!r}")
        if self.request_timeout <= 0:
            raise ConfigError(
                f"request_timeout must be positive, got {self.request_timeout!r}"
            )
        if not self.dest_bucket:
            raise ConfigError("dest_bucket must not be empty")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MigrationConfig:
        """Create a MigrationConfig from a raw config dictionary."""
        return cls(
            source=StoreConfig.from_dict(data.get("source")),
            dest=StoreConfig.from_dict(data.get("dest")),
            bearer=data.get("bearer") or None,
            request_timeout=data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT),
            dest_bucket=data.get("dest_bucket", DEFAULT_DEST_BUCKET),
            page_size=data.get("page_size", DEFAULT_PAGE_SIZE),
            copy_timeout=data.get("copy_timeout", DEFAULT_COPY_TIMEOUT),
            results_dir=data.get("results_dir", "."),
        )


def load_config(config_path: Path) -> MigrationConfig:
    """
    Load configuration from a YAML (or JSON) file and apply default values.

    Unlike optional tuning values, the store settings cannot be guessed, so a
    missing or unreadable file is an error rather than a fallback to defaults.

    Args:
        config_path: Path to the config file

    Returns:
        MigrationConfig with all necessary defaults applied

    Raises:
        ConfigError: If the file is missing, unreadable or holds invalid values
    """
    if not config_path.exists():
        raise ConfigError(f"Config file {config_path} not found")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"Failed to load config file {config_path}: {e}") from e

    # Handle None result from empty file
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    try:
        config = MigrationConfig.from_dict(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in config file {config_path}: {e}") from e
    log_with_context(logging.INFO, f"Loaded configuration from {config_path}")
    return config


def create_default_config(output_path: Path) -> bool:
    """
    Create a default configuration file with placeholder settings.

    The function will not overwrite an existing configuration file.

    Args:
        output_path: Path where the default config should be saved

    Returns:
        True if the config file was created successfully, False otherwise
    """
    if output_path.exists():
        log_with_context(
            logging.WARNING,
            f"Config file {output_path} already exists, not overwriting",
        )
        return False

    default_config = {
        "source": {
            "endpoint_url": "https://source.example.com",
            "region_name": "auto",
            "access_key_id": "SOURCE_KEY_ID",
            "secret_access_key": "SOURCE_SECRET",
            "admin_url": "https://admin.source.example.com",
        },
        "dest": {
            "endpoint_url": "https://dest.example.com",
            "region_name": "auto",
            "access_key_id": "DEST_KEY_ID",
            "secret_access_key": "DEST_SECRET",
            "admin_url": "https://admin.dest.example.com",
        },
        "bearer": "",
        "dest_bucket": DEFAULT_DEST_BUCKET,
        "page_size": DEFAULT_PAGE_SIZE,
        "copy_timeout": DEFAULT_COPY_TIMEOUT,
        "request_timeout": DEFAULT_REQUEST_TIMEOUT,
        "results_dir": ".",
    }

    try:
        with open(output_path, "w") as f:
            yaml.safe_dump(default_config, f, default_flow_style=False, sort_keys=False)
        log_with_context(logging.INFO, f"Created default config file at {output_path}")
        return True
    except OSError as e:
        log_with_context(logging.ERROR, f"Failed to create default config file: {e}")
        return False
