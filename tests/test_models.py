"""Tests for the failover data model"""

import pytest

from failover import (
    AliasRecord,
    CnameRecord,
    Endpoint,
    FailoverMember,
    FailoverPolicy,
    FailoverRole,
    HealthCheckConfig,
    PolicyError,
    Protocol,
)
from failover.models import normalize_name
from tests.failover_fixtures import CDN_HOST, SECONDARY_HOST, health_check, make_policy


class TestNormalizeName:
    def test_adds_trailing_dot_and_lowercases(self):
        assert normalize_name("WWW.Example.com") == "www.example.com."

    def test_idempotent(self):
        assert normalize_name("example.com.") == "example.com."


class TestEndpoint:
    def test_defaults_to_https_443(self):
        endpoint = Endpoint(fqdn="cdn.example.com.")
        assert endpoint.port == 443
        assert endpoint.protocol is Protocol.HTTPS
        assert endpoint.url == "https://cdn.example.com:443"

    def test_http_for_local_testing(self):
        endpoint = Endpoint(fqdn="localhost", port=8080, protocol=Protocol.HTTP)
        assert endpoint.url == "http://localhost:8080"

    @pytest.mark.parametrize("port", [0, 70000])
    def test_rejects_invalid_port(self, port):
        with pytest.raises(PolicyError):
            Endpoint(fqdn="cdn.example.com", port=port)

    def test_is_immutable(self):
        endpoint = Endpoint(fqdn="cdn.example.com")
        with pytest.raises(AttributeError):
            endpoint.port = 80


class TestHealthCheckConfig:
    def test_defaults(self):
        config = health_check()
        assert config.probe_interval_seconds == 30
        assert config.failure_threshold == 3
        assert config.url == f"https://{CDN_HOST}:443/"

    def test_rejects_zero_threshold(self):
        with pytest.raises(PolicyError, match="failure_threshold"):
            HealthCheckConfig(name="p", target=Endpoint(fqdn=CDN_HOST), failure_threshold=0)

    def test_rejects_non_positive_interval(self):
        with pytest.raises(PolicyError, match="probe_interval_seconds"):
            HealthCheckConfig(name="p", target=Endpoint(fqdn=CDN_HOST), probe_interval_seconds=0)

    def test_rejects_relative_path(self):
        with pytest.raises(PolicyError, match="resource_path"):
            HealthCheckConfig(name="p", target=Endpoint(fqdn=CDN_HOST), resource_path="health")


class TestFailoverPolicy:
    def test_normalizes_record_name(self):
        assert make_policy("Example.COM").name == "example.com."

    def test_member_by_role(self):
        policy = make_policy()
        assert policy.member(FailoverRole.PRIMARY) is policy.primary
        assert policy.member(FailoverRole.SECONDARY) is policy.secondary

    def test_rejects_shared_health_check_identity(self):
        shared = health_check("origin", CDN_HOST)
        with pytest.raises(PolicyError, match="share health check"):
            FailoverPolicy(
                name="example.com",
                primary=FailoverMember(FailoverRole.PRIMARY, shared, AliasRecord(CDN_HOST)),
                secondary=FailoverMember(
                    FailoverRole.SECONDARY,
                    health_check("origin", SECONDARY_HOST),
                    CnameRecord(SECONDARY_HOST),
                ),
            )

    def test_rejects_two_primaries(self):
        with pytest.raises(PolicyError, match="secondary member"):
            FailoverPolicy(
                name="example.com",
                primary=FailoverMember(
                    FailoverRole.PRIMARY, health_check("a"), AliasRecord(CDN_HOST)
                ),
                secondary=FailoverMember(
                    FailoverRole.PRIMARY, health_check("b"), CnameRecord(SECONDARY_HOST)
                ),
            )

    def test_rejects_secondary_in_primary_slot(self):
        with pytest.raises(PolicyError, match="primary member"):
            FailoverPolicy(
                name="example.com",
                primary=FailoverMember(
                    FailoverRole.SECONDARY, health_check("a"), AliasRecord(CDN_HOST)
                ),
                secondary=FailoverMember(
                    FailoverRole.SECONDARY, health_check("b"), CnameRecord(SECONDARY_HOST)
                ),
            )


class TestRecordTemplates:
    def test_alias_evaluates_target_health_by_default(self):
        record = AliasRecord(target=CDN_HOST)
        assert record.evaluate_target_health is True
        assert record.record_type == "A"

    def test_cname_default_ttl(self):
        record = CnameRecord(target=SECONDARY_HOST)
        assert record.ttl == 300
        assert record.record_type == "CNAME"

    def test_cname_rejects_negative_ttl(self):
        with pytest.raises(PolicyError):
            CnameRecord(target=SECONDARY_HOST, ttl=-1)
