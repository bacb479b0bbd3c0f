"""
Data model for DNS health-based failover.

Endpoints, health-check settings, record templates and the policy that pairs
a PRIMARY with a SECONDARY are immutable: they are configured once, at
deployment time. The only mutable entity is the health status, which lives in
``failover.health.HealthState`` and is owned by exactly one monitor.

ResolvedAnswer is derived on every query from the current health status and
never stored.
"""

from dataclasses import dataclass
from enum import Enum

from failover.errors import PolicyError


class Protocol(str, Enum):
    HTTPS = "HTTPS"
    HTTP = "HTTP"


class HealthStatus(str, Enum):
    HEALTHY = "HEALTHY"
    UNHEALTHY = "UNHEALTHY"


class FailoverRole(str, Enum):
    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"


def normalize_name(name: str) -> str:
    """
    Return a DNS name in canonical form: lower case with one trailing dot.

    DNS names compare case-insensitively; the trailing dot makes the name
    fully qualified. Idempotent.
    """
    name = name.strip().lower()
    return name if name.endswith(".") else f"{name}."


@dataclass(frozen=True)
class Endpoint:
    """
    A probe target.

    Attributes:
        fqdn: Host name of the origin (e.g. "d111111abcdef8.cloudfront.net").
        port: TCP port; 443 for HTTPS origins.
        protocol: HTTPS in production. HTTP is accepted for local testing.
    """

    fqdn: str
    port: int = 443
    protocol: Protocol = Protocol.HTTPS

    def __post_init__(self):
        if not self.fqdn:
            raise PolicyError("endpoint fqdn must not be empty")
        if not 0 < self.port < 65536:
            raise PolicyError(f"invalid port for {self.fqdn}: {self.port}")

    @property
    def host(self) -> str:
        return self.fqdn.rstrip(".")

    @property
    def url(self) -> str:
        scheme = self.protocol.value.lower()
        return f"{scheme}://{self.host}:{self.port}"


@dataclass(frozen=True)
class HealthCheckConfig:
    """
    How one endpoint is probed and how quickly a failure is declared.

    Attributes:
        name: Health-check identity. Two members of a policy must never share it.
        target: Endpoint to probe.
        probe_interval_seconds: Fixed cadence between probes (no backoff).
        failure_threshold: Consecutive failed probes before UNHEALTHY.
        resource_path: Path requested on the endpoint.
        timeout_seconds: Upper bound for a single probe.
    """

    name: str
    target: Endpoint
    probe_interval_seconds: float = 30
    failure_threshold: int = 3
    resource_path: str = "/"
    timeout_seconds: float = 10

    def __post_init__(self):
        if not self.name:
            raise PolicyError("health check name must not be empty")
        if self.probe_interval_seconds <= 0:
            raise PolicyError(
                f"{self.name}: probe_interval_seconds must be positive"
            )
        if self.failure_threshold < 1:
            raise PolicyError(f"{self.name}: failure_threshold must be at least 1")
        if self.timeout_seconds <= 0:
            raise PolicyError(f"{self.name}: timeout_seconds must be positive")
        if not self.resource_path.startswith("/"):
            raise PolicyError(f"{self.name}: resource_path must start with '/'")

    @property
    def url(self) -> str:
        return f"{self.target.url}{self.resource_path}"


@dataclass(frozen=True)
class AliasRecord:
    """
    Alias A record bound to a CDN distribution.

    With ``evaluate_target_health`` the DNS layer re-verifies the target
    before answering, a second gate independent of the member's own health
    check. ``target_health_check`` names the check that reports the target's
    health; without one the target is taken as healthy.
    """

    target: str
    evaluate_target_health: bool = True
    target_health_check: str | None = None
    record_type: str = "A"


@dataclass(frozen=True)
class CnameRecord:
    """Plain CNAME with a fixed TTL. CNAMEs cannot evaluate target health."""

    target: str
    ttl: int = 300
    record_type: str = "CNAME"

    def __post_init__(self):
        if self.ttl < 0:
            raise PolicyError(f"CNAME ttl must not be negative: {self.ttl}")


RecordTemplate = AliasRecord | CnameRecord


@dataclass(frozen=True)
class FailoverMember:
    role: FailoverRole
    health_check: HealthCheckConfig
    record: RecordTemplate


@dataclass(frozen=True)
class FailoverPolicy:
    """
    A PRIMARY and a SECONDARY answering for one record name.

    Construction fails with PolicyError unless the primary slot holds the
    PRIMARY member, the secondary slot holds the SECONDARY member, and the
    two members use different health-check identities.
    """

    name: str
    primary: FailoverMember
    secondary: FailoverMember

    def __post_init__(self):
        if self.primary.role is not FailoverRole.PRIMARY:
            raise PolicyError(f"{self.name}: primary member has role {self.primary.role.value}")
        if self.secondary.role is not FailoverRole.SECONDARY:
            raise PolicyError(
                f"{self.name}: secondary member has role {self.secondary.role.value}"
            )
        if self.primary.health_check.name == self.secondary.health_check.name:
            raise PolicyError(
                f"{self.name}: primary and secondary share health check "
                f"{self.primary.health_check.name!r}"
            )
        object.__setattr__(self, "name", normalize_name(self.name))

    def member(self, role: FailoverRole) -> FailoverMember:
        return self.primary if role is FailoverRole.PRIMARY else self.secondary


@dataclass(frozen=True)
class ResolvedAnswer:
    """
    The record that answers a query right now.

    ``ttl`` is None for alias answers; alias records take the TTL of the
    resource they point at.
    """

    query_name: str
    role: FailoverRole
    record_type: str
    value: str
    ttl: int | None = None
