"""
Failover Resolver: decides which member of a policy answers a query.

Resolution reads the last published health of each check through an explicit
HealthRegistry; it never waits on a probe. The rule:

- PRIMARY healthy (and its alias target healthy, when evaluated) -> primary record;
- otherwise -> secondary record, whatever the secondary's own health.

Both healthy means PRIMARY. There is no load balancing and no tertiary
target: if the secondary fails after a failover, the name is down.
"""

import logging
from typing import Iterable, Iterator

from failover.errors import NXDomainError, PolicyError, UnknownHealthCheckError
from failover.health import HealthState
from failover.models import FailoverPolicy, HealthCheckConfig, ResolvedAnswer, normalize_name
from failover.records import RecordSet, in_zone

logger = logging.getLogger(__name__)


class HealthRegistry:
    """
    Health states by health-check name.

    Passed explicitly to resolvers and monitors. Each registered state must
    have exactly one monitor writing to it.
    """

    def __init__(self):
        self._states: dict[str, HealthState] = {}

    def register(self, config: HealthCheckConfig) -> HealthState:
        if config.name in self._states:
            raise PolicyError(f"health check already registered: {config.name}")
        state = HealthState(config.name)
        self._states[config.name] = state
        return state

    def get(self, name: str) -> HealthState:
        try:
            return self._states[name]
        except KeyError:
            raise UnknownHealthCheckError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._states

    def __iter__(self) -> Iterator[HealthState]:
        return iter(self._states.values())

    def __len__(self) -> int:
        return len(self._states)


class FailoverResolver:
    """
    Answers queries for the zones it is authoritative for.

    Args:
        zones: Zone apex names (e.g. "example.com"). Matching picks the most
            specific zone containing the query name.
        health: Registry holding the health of every check a policy names.
    """

    def __init__(self, zones: Iterable[str], health: HealthRegistry):
        self.zones: tuple[str, ...] = tuple(
            sorted({normalize_name(z) for z in zones}, key=len, reverse=True)
        )
        self.health = health

    def zone_for(self, query_name: str) -> str:
        for zone in self.zones:
            if in_zone(query_name, zone):
                return zone
        raise NXDomainError(normalize_name(query_name))

    def resolve(self, query_name: str, policy: FailoverPolicy) -> ResolvedAnswer:
        """
        Return the answer for ``query_name`` under ``policy``.

        Raises:
            NXDomainError: No configured zone contains the name, or the name
                is not the policy's record name.
            UnknownHealthCheckError: The policy names a check missing from
                the registry.
        """
        name = normalize_name(query_name)
        zone = self.zone_for(name)
        if name != policy.name or not in_zone(policy.name, zone):
            raise NXDomainError(name)
        records = RecordSet(zone, policy)

        primary = self.health.get(policy.primary.health_check.name).snapshot()
        if primary.healthy and records.alias_target_healthy(self.health):
            answer = records.primary_answer(name)
        else:
            # Secondary answers whatever its own health.
            answer = records.secondary_answer(name)
        logger.debug(
            "Resolved %s -> %s %s (%s)",
            name,
            answer.record_type,
            answer.value,
            answer.role.value,
        )
        return answer
