"""Tests for the failover CLI"""

import asyncio

import pytest

from failover import FailoverRole, ProbeOutcome, ProbeResult
from failover.cli import build_parser, build_policy, parse_args, run_watch

ARGS = [
    "--zone",
    "example.com",
    "--primary",
    "cdn.example.net",
    "--secondary",
    "sitesa.z6.web.core.windows.net",
]


def parse(*extra):
    return build_parser().parse_args([*ARGS, *extra])


def probe_by_host(script):
    """Probe function scripting outcomes per host."""
    remaining = {host: list(outcomes) for host, outcomes in script.items()}

    async def probe_fn(config):
        outcomes = remaining[config.target.host]
        outcome = outcomes.pop(0) if outcomes else ProbeOutcome.SUCCESS
        return ProbeResult(outcome=outcome)

    return probe_fn


class TestBuildPolicy:
    def test_defaults(self):
        policy = build_policy(parse())
        assert policy.name == "example.com."
        assert policy.primary.record.target == "cdn.example.net"
        assert policy.secondary.record.ttl == 300
        assert policy.primary.health_check.failure_threshold == 3
        assert policy.primary.health_check.probe_interval_seconds == 30.0

    def test_overrides(self):
        policy = build_policy(
            parse("--name", "www.example.com", "--threshold", "5", "--path", "/health")
        )
        assert policy.name == "www.example.com."
        assert policy.secondary.health_check.failure_threshold == 5
        assert policy.primary.health_check.resource_path == "/health"


class TestParser:
    def test_missing_required_argument_exits(self):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["--zone", "example.com"])
        assert excinfo.value.code == 2

    def test_rejects_zero_threshold(self):
        with pytest.raises(SystemExit):
            parse("--threshold", "0")


class TestRunWatch:
    def test_reports_failover_and_recovery(self):
        F, S = ProbeOutcome.FAILURE, ProbeOutcome.SUCCESS
        probe_fn = probe_by_host({"cdn.example.net": [F, F, F, S], "sitesa.z6.web.core.windows.net": []})

        answers = run_watch(
            parse("--interval", "0.01", "--threshold", "3", "--cycles", "4"), probe_fn=probe_fn
        )

        assert [a.role for a in answers] == [
            FailoverRole.PRIMARY,
            FailoverRole.SECONDARY,
            FailoverRole.PRIMARY,
        ]
        assert answers[1].value == "sitesa.z6.web.core.windows.net."


class TestParseArgs:
    @pytest.mark.parametrize(
        "extra",
        [
            ["--path", "health"],
            ["--port", "0"],
            ["--ttl", "-1"],
            ["--name", "other.org"],
            ["--cycles", "-1"],
            ["--log-level", "LOUD"],
        ],
    )
    def test_invalid_values_exit_with_usage_error(self, extra):
        with pytest.raises(SystemExit) as excinfo:
            parse_args([*ARGS, *extra])
        assert excinfo.value.code == 2

    def test_accepts_subdomain_in_zone(self):
        args = parse_args([*ARGS, "--name", "www.example.com"])
        assert args.name == "www.example.com"

    def test_log_level_is_case_insensitive(self):
        assert parse_args([*ARGS, "--log-level", "debug"]).log_level == "DEBUG"


class TestWatchCadence:
    def test_check_latency_does_not_stretch_interval(self):
        started = []

        async def slow_probe(config):
            if config.name == "primary":
                started.append(asyncio.get_running_loop().time())
                await asyncio.sleep(0.1)
            return ProbeResult(outcome=ProbeOutcome.SUCCESS)

        run_watch(parse("--interval", "0.2", "--cycles", "3"), probe_fn=slow_probe)

        gaps = [b - a for a, b in zip(started, started[1:])]
        assert len(gaps) == 2
        # Interval plus latency would be 0.3s.
        assert all(0.15 < gap < 0.27 for gap in gaps), gaps
