"""
Stack configuration loaded from pulumi.Config().

Provides a typed, immutable view of stack settings. All settings are read from
Pulumi config (e.g. Pulumi.<stack>.yaml or pulumi config set). Every key is
required. Used by __main__.main() to name resources, locate the site files,
toggle Azure soft-delete and AWS public access block, and configure the
Route 53 health checks and failover records.
"""

from dataclasses import dataclass
from typing import Any, Callable

import pulumi

from components._helpers import validate_health_check


class ConfigError(ValueError):
    """A stack config value is present but invalid."""


def _require_bool(config: pulumi.Config, key: str) -> bool:
    raw = config.require(key)
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in ("1", "true", "yes")


def _require_int(config: pulumi.Config, key: str) -> int:
    raw = config.require(key)
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{key}: expected an integer, got {raw!r}") from None


def _require_str(config: pulumi.Config, key: str) -> str:
    return config.require(key)


# (key, parser); parser receives (config, key) and returns value.
_CONFIG_SPEC: list[tuple[str, Callable[[pulumi.Config, str], Any]]] = [
    ("domain_name", _require_str),
    ("environment", _require_str),
    ("project_name", _require_str),
    ("aws_bucket_name", _require_str),
    ("enable_public_access_block", _require_bool),
    ("enable_azure_backup", _require_bool),
    ("backup_retention_days", _require_int),
    ("site_dir", _require_str),
    ("health_check_path", _require_str),
    ("health_check_interval", _require_int),
    ("health_check_failure_threshold", _require_int),
    ("secondary_ttl", _require_int),
]


@dataclass(frozen=True)
class StackConfig:
    """
    Stack configuration from Pulumi config.

    Attributes:
        domain_name: Zone apex for Route 53 and the failover record name (required).
        environment: Environment label used in resource naming (required).
        project_name: Project name used in resource naming (required).
        aws_bucket_name: AWS S3 bucket name (required; must be globally unique).
        enable_public_access_block: Whether to enable S3 Block Public Access (required).
        enable_azure_backup: Whether to enable Azure blob/container soft-delete (required).
        backup_retention_days: Azure blob/container soft-delete retention in days (required).
        site_dir: Directory holding the static site, relative to the project (required).
        health_check_path: Path probed on both origins, e.g. "/" (required).
        health_check_interval: Seconds between Route 53 probes, 10 or 30 (required).
        health_check_failure_threshold: Consecutive failures before unhealthy, 1-10 (required).
        secondary_ttl: TTL in seconds of the secondary CNAME record (required).
    """

    domain_name: str
    environment: str
    project_name: str
    aws_bucket_name: str
    enable_public_access_block: bool
    enable_azure_backup: bool
    backup_retention_days: int
    site_dir: str
    health_check_path: str
    health_check_interval: int
    health_check_failure_threshold: int
    secondary_ttl: int

    def __post_init__(self):
        try:
            validate_health_check(
                self.health_check_interval, self.health_check_failure_threshold
            )
        except ValueError as e:
            raise ConfigError(str(e)) from None
        if not self.health_check_path.startswith("/"):
            raise ConfigError(
                f"health_check_path: must start with '/', got {self.health_check_path!r}"
            )
        if self.secondary_ttl < 0:
            raise ConfigError(f"secondary_ttl: must not be negative, got {self.secondary_ttl}")
        if self.backup_retention_days < 1:
            raise ConfigError(
                f"backup_retention_days: must be at least 1, got {self.backup_retention_days}"
            )

    @classmethod
    def from_pulumi_config(cls, config: pulumi.Config) -> "StackConfig":
        """
        Build StackConfig from pulumi.Config(). All keys in _CONFIG_SPEC are required.
        """
        kwargs = {key: parser(config, key) for key, parser in _CONFIG_SPEC}
        return cls(**kwargs)
