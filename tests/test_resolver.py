"""Tests for the failover resolver and record set"""

import pytest

from failover import (
    FailoverResolver,
    FailoverRole,
    HealthRegistry,
    NXDomainError,
    PolicyError,
    ProbeOutcome,
    RecordSet,
    UnknownHealthCheckError,
)
from failover.records import in_zone
from tests.failover_fixtures import CDN_HOST, SECONDARY_HOST, health_check, make_policy

F = ProbeOutcome.FAILURE
S = ProbeOutcome.SUCCESS


def setup(policy=None, zones=("example.com",)):
    policy = policy or make_policy()
    registry = HealthRegistry()
    registry.register(policy.primary.health_check)
    registry.register(policy.secondary.health_check)
    return policy, registry, FailoverResolver(zones, registry)


def fail(registry, name, times=3):
    for t in range(times):
        registry.get(name).record(F, 3, at=30 * t)


class TestHealthRegistry:
    def test_register_and_get(self):
        registry = HealthRegistry()
        state = registry.register(health_check("primary"))
        assert registry.get("primary") is state
        assert "primary" in registry
        assert len(registry) == 1

    def test_rejects_duplicate(self):
        registry = HealthRegistry()
        registry.register(health_check("primary"))
        with pytest.raises(PolicyError):
            registry.register(health_check("primary"))

    def test_unknown_name(self):
        with pytest.raises(UnknownHealthCheckError, match="missing"):
            HealthRegistry().get("missing")


class TestInZone:
    def test_apex(self):
        assert in_zone("example.com", "example.com.")

    def test_subdomain(self):
        assert in_zone("www.Example.com.", "example.com")

    def test_suffix_without_label_boundary(self):
        assert not in_zone("badexample.com", "example.com")


class TestRecordSet:
    def test_primary_answer_is_alias_without_ttl(self):
        answer = RecordSet("example.com", make_policy()).primary_answer("example.com")
        assert answer.role is FailoverRole.PRIMARY
        assert answer.record_type == "A"
        assert answer.value == f"{CDN_HOST}."
        assert answer.ttl is None

    def test_secondary_answer_is_cname_with_ttl(self):
        answer = RecordSet("example.com", make_policy()).secondary_answer("example.com")
        assert answer.role is FailoverRole.SECONDARY
        assert answer.record_type == "CNAME"
        assert answer.value == f"{SECONDARY_HOST}."
        assert answer.ttl == 300

    def test_record_outside_zone(self):
        with pytest.raises(PolicyError):
            RecordSet("example.org", make_policy("example.com"))

    def test_alias_target_healthy_without_target_check(self):
        policy, registry, _ = setup()
        assert RecordSet("example.com", policy).alias_target_healthy(registry)


class TestFailoverResolver:
    def test_apex_scenario(self):
        policy, registry, resolver = setup()

        before = resolver.resolve("example.com", policy)
        fail(registry, "primary")
        after = resolver.resolve("example.com", policy)

        assert (before.record_type, before.value) == ("A", f"{CDN_HOST}.")
        assert (after.record_type, after.value) == ("CNAME", f"{SECONDARY_HOST}.")

    def test_primary_wins_when_both_healthy(self):
        policy, _, resolver = setup()
        assert resolver.resolve("example.com", policy).role is FailoverRole.PRIMARY

    def test_primary_healthy_ignores_secondary_health(self):
        policy, registry, resolver = setup()
        fail(registry, "secondary")
        assert resolver.resolve("example.com", policy).role is FailoverRole.PRIMARY

    def test_secondary_answers_even_when_unhealthy(self):
        policy, registry, resolver = setup()
        fail(registry, "primary")
        fail(registry, "secondary")
        assert resolver.resolve("example.com", policy).role is FailoverRole.SECONDARY

    def test_primary_still_answers_below_threshold(self):
        policy, registry, resolver = setup()
        fail(registry, "primary", times=2)
        assert resolver.resolve("example.com", policy).role is FailoverRole.PRIMARY

    def test_primary_returns_after_one_success(self):
        policy, registry, resolver = setup()
        fail(registry, "primary")
        registry.get("primary").record(S, 3, at=90)
        assert resolver.resolve("example.com", policy).role is FailoverRole.PRIMARY

    def test_query_name_is_case_insensitive(self):
        policy, _, resolver = setup()
        answer = resolver.resolve("EXAMPLE.com.", policy)
        assert answer.query_name == "example.com."

    def test_unknown_zone_is_nxdomain(self):
        policy, _, resolver = setup()
        with pytest.raises(NXDomainError) as excinfo:
            resolver.resolve("example.org", policy)
        assert excinfo.value.query_name == "example.org."

    def test_name_without_record_is_nxdomain(self):
        policy, _, resolver = setup()
        with pytest.raises(NXDomainError):
            resolver.resolve("missing.example.com", policy)

    def test_most_specific_zone_wins(self):
        policy, _, resolver = setup(
            make_policy("www.shop.example.com"), zones=("example.com", "shop.example.com")
        )
        assert resolver.zone_for("www.shop.example.com") == "shop.example.com."
        assert resolver.resolve("www.shop.example.com", policy).role is FailoverRole.PRIMARY

    def test_unhealthy_alias_target_fails_over(self):
        policy = make_policy(target_health_check="cdn")
        _, registry, resolver = setup(policy)
        registry.register(health_check("cdn", CDN_HOST, threshold=1))

        assert resolver.resolve("example.com", policy).role is FailoverRole.PRIMARY
        registry.get("cdn").record(F, 1, at=0)
        assert resolver.resolve("example.com", policy).role is FailoverRole.SECONDARY

    def test_policy_check_missing_from_registry(self):
        policy = make_policy()
        resolver = FailoverResolver(["example.com"], HealthRegistry())
        with pytest.raises(UnknownHealthCheckError):
            resolver.resolve("example.com", policy)
