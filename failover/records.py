"""
Record Set: the DNS answers through which a failover decision is expressed.

The primary is an alias A record bound to a CDN distribution. With
``evaluate_target_health`` enabled the DNS layer checks the distribution's
health itself before answering, independently of the primary's health check.
The secondary is a plain CNAME with a fixed TTL; it carries no target-health
evaluation, so a recovered primary is only noticed on the next probe cycle.
"""

from failover.errors import PolicyError
from failover.models import (
    AliasRecord,
    FailoverPolicy,
    FailoverRole,
    ResolvedAnswer,
    normalize_name,
)


def in_zone(name: str, zone: str) -> bool:
    """True if ``name`` equals ``zone`` or is a subdomain of it."""
    name, zone = normalize_name(name), normalize_name(zone)
    return name == zone or name.endswith(f".{zone}")


class RecordSet:
    """Failover record pair for one name inside one hosted zone."""

    def __init__(self, zone: str, policy: FailoverPolicy):
        self.zone = normalize_name(zone)
        if not in_zone(policy.name, self.zone):
            raise PolicyError(f"record {policy.name} is not inside zone {self.zone}")
        self.policy = policy

    @property
    def name(self) -> str:
        return self.policy.name

    def answer(self, query_name: str, role: FailoverRole) -> ResolvedAnswer:
        record = self.policy.member(role).record
        ttl = None if isinstance(record, AliasRecord) else record.ttl
        return ResolvedAnswer(
            query_name=normalize_name(query_name),
            role=role,
            record_type=record.record_type,
            value=normalize_name(record.target),
            ttl=ttl,
        )

    def primary_answer(self, query_name: str) -> ResolvedAnswer:
        return self.answer(query_name, FailoverRole.PRIMARY)

    def secondary_answer(self, query_name: str) -> ResolvedAnswer:
        return self.answer(query_name, FailoverRole.SECONDARY)

    def alias_target_healthy(self, health) -> bool:
        """
        Second health gate for the primary alias.

        ``health`` is a HealthRegistry. Returns True when the primary record
        is not an alias, does not evaluate target health, or names no target
        health check.
        """
        record = self.policy.primary.record
        if not isinstance(record, AliasRecord) or not record.evaluate_target_health:
            return True
        if record.target_health_check is None:
            return True
        return health.get(record.target_health_check).snapshot().healthy

    def __repr__(self):
        return f"RecordSet(zone={self.zone!r}, name={self.name!r})"
