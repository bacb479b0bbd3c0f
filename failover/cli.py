"""
Operator CLI: watch a primary/secondary pair and log which one answers.

    python -m failover --zone example.com \\
        --primary d111111abcdef8.cloudfront.net \\
        --secondary sitesa.z6.web.core.windows.net

Both endpoints are probed on the same fixed interval. After every primary
probe the apex name is resolved and the answer is logged when it changes.
"""

import argparse
import asyncio
import logging
import sys

from failover.errors import PolicyError
from failover.health import HealthMonitor, ProbeFn
from failover.models import (
    AliasRecord,
    CnameRecord,
    Endpoint,
    FailoverMember,
    FailoverPolicy,
    FailoverRole,
    HealthCheckConfig,
    HealthStatus,
    ResolvedAnswer,
)
from failover.records import in_zone
from failover.resolver import FailoverResolver, HealthRegistry

log = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {raw}")
    return value


def _non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {raw}")
    return value


def _positive_float(raw: str) -> float:
    value = float(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {raw}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="failover",
        description="Probe a primary and secondary origin and report DNS failover answers.",
    )
    parser.add_argument("--zone", required=True, help="Zone apex, e.g. example.com")
    parser.add_argument("--name", help="Record name to resolve (defaults to the zone apex)")
    parser.add_argument("--primary", required=True, help="CDN host answering as alias target")
    parser.add_argument("--secondary", required=True, help="Secondary host answering as CNAME")
    parser.add_argument("--port", type=int, default=443)
    parser.add_argument("--path", default="/", help="Resource path probed on both hosts")
    parser.add_argument("--interval", type=_positive_float, default=30.0)
    parser.add_argument("--threshold", type=_positive_int, default=3)
    parser.add_argument("--timeout", type=_positive_float, default=10.0)
    parser.add_argument("--ttl", type=int, default=300, help="Secondary CNAME TTL")
    parser.add_argument(
        "--cycles",
        type=_non_negative_int,
        default=0,
        help="Stop after this many primary probes (0 runs until interrupted)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
    )
    return parser


def build_policy(args: argparse.Namespace) -> FailoverPolicy:
    """Translate parsed arguments into a FailoverPolicy."""

    def health_check(name: str, host: str) -> HealthCheckConfig:
        return HealthCheckConfig(
            name=name,
            target=Endpoint(fqdn=host, port=args.port),
            probe_interval_seconds=args.interval,
            failure_threshold=args.threshold,
            resource_path=args.path,
            timeout_seconds=args.timeout,
        )

    return FailoverPolicy(
        name=args.name or args.zone,
        primary=FailoverMember(
            role=FailoverRole.PRIMARY,
            health_check=health_check("primary", args.primary),
            record=AliasRecord(target=args.primary),
        ),
        secondary=FailoverMember(
            role=FailoverRole.SECONDARY,
            health_check=health_check("secondary", args.secondary),
            record=CnameRecord(target=args.secondary, ttl=args.ttl),
        ),
    )


async def watch(
    policy: FailoverPolicy,
    resolver: FailoverResolver,
    primary: HealthMonitor,
    secondary: HealthMonitor,
    cycles: int = 0,
) -> list[ResolvedAnswer]:
    """
    Drive the primary monitor and resolve after each probe.

    The primary monitor runs its fixed-interval loop and the apex is resolved
    after each of its probes. The secondary monitor runs as its own task for
    the whole watch. Returns the distinct answers in the order they were
    first served.
    """
    answers: list[ResolvedAnswer] = []
    count = 0

    def on_primary_probe(status: HealthStatus) -> None:
        nonlocal count
        count += 1
        answer = resolver.resolve(policy.name, policy)
        if not answers or answer != answers[-1]:
            log.info(
                "%s %s -> %s (%s)",
                answer.query_name,
                answer.record_type,
                answer.value,
                answer.role.value,
            )
            answers.append(answer)
        if cycles and count >= cycles:
            primary.request_stop()

    secondary.start()
    try:
        await primary.run(on_probe=on_primary_probe)
    finally:
        await secondary.stop()
    return answers


def run_watch(args: argparse.Namespace, probe_fn: ProbeFn | None = None) -> list[ResolvedAnswer]:
    policy = build_policy(args)
    registry = HealthRegistry()
    monitors = [
        HealthMonitor(
            member.health_check,
            registry.register(member.health_check),
            probe_fn=probe_fn,
        )
        for member in (policy.primary, policy.secondary)
    ]
    resolver = FailoverResolver([args.zone], registry)
    return asyncio.run(watch(policy, resolver, *monitors, cycles=args.cycles))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse and validate arguments; exits with status 2 on any invalid value.

    Values argparse accepts but the policy rejects (a relative path, a bad
    port, a negative TTL, a record name outside the zone) are reported
    through the parser as well.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        policy = build_policy(args)
    except PolicyError as e:
        parser.error(str(e))
    if not in_zone(policy.name, args.zone):
        parser.error(f"--name {policy.name} is not inside zone {args.zone}")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s [%(name)s] [%(levelname)s] %(message)s",
    )
    try:
        run_watch(args)
    except KeyboardInterrupt:
        log.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
