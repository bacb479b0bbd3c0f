"""
DNS health-based failover policy.

Models the routing the Pulumi program declares in Route 53, as a reusable
library that can run against live endpoints:

- **HealthMonitor**: probes one endpoint on a fixed interval and publishes a
  HealthState (fast recovery, slow failure declaration).
- **FailoverResolver**: picks the PRIMARY record while the primary is healthy
  and the SECONDARY record otherwise.
- **RecordSet**: renders the primary alias and secondary CNAME answers.
"""

from failover.errors import (
    FailoverError,
    NXDomainError,
    PolicyError,
    UnknownHealthCheckError,
)
from failover.health import (
    HealthMonitor,
    HealthSnapshot,
    HealthState,
    ProbeOutcome,
    ProbeResult,
    classify_status_code,
    probe,
)
from failover.models import (
    AliasRecord,
    CnameRecord,
    Endpoint,
    FailoverMember,
    FailoverPolicy,
    FailoverRole,
    HealthCheckConfig,
    HealthStatus,
    Protocol,
    ResolvedAnswer,
)
from failover.records import RecordSet
from failover.resolver import FailoverResolver, HealthRegistry

__all__ = [
    "AliasRecord",
    "CnameRecord",
    "Endpoint",
    "FailoverError",
    "FailoverMember",
    "FailoverPolicy",
    "FailoverResolver",
    "FailoverRole",
    "HealthCheckConfig",
    "HealthMonitor",
    "HealthRegistry",
    "HealthSnapshot",
    "HealthState",
    "HealthStatus",
    "NXDomainError",
    "PolicyError",
    "ProbeOutcome",
    "ProbeResult",
    "Protocol",
    "RecordSet",
    "ResolvedAnswer",
    "UnknownHealthCheckError",
    "classify_status_code",
    "probe",
]
