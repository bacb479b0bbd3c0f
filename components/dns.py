"""
Route 53 failover: hosted zone, health checks and a PRIMARY/SECONDARY record pair.

This component creates a hosted zone for the domain, one HTTPS health check per
origin, and a failover record pair on the zone apex:

- PRIMARY: alias A record to the CloudFront distribution with
  ``evaluate_target_health`` enabled, gated by the primary health check.
- SECONDARY: CNAME to the Azure static-website host with a fixed TTL (300s
  by default). Route 53 serves it whenever the primary is unhealthy.

The secondary health check is declared so the secondary's state is visible,
but it is not attached to the secondary record: a failed secondary has no
further target to fail over to.

Route 53 rejects this exact shape at apply time (CNAME at the apex, and a
failover pair mixing A and CNAME); see DESIGN.md, "Known limitation".

After deployment, the domain must be delegated at the registrar to the zone's
name servers (exposed as ``name_servers``).
"""

import pulumi
import pulumi_aws as aws

from components._helpers import ensure_trailing_dot, validate_health_check

ID = "sitefailover:aws:Route53Failover"

# Targets may be known now (str) or only after another resource is created
# (pulumi.Output[str]), e.g. the CloudFront domain name.
DnsTarget = str | pulumi.Output[str]

HTTPS_PORT = 443


class Route53Failover(pulumi.ComponentResource):
    """
    Hosted zone with an apex failover pair: alias A (primary) and CNAME (secondary).
    """

    def __init__(
        self,
        name: str,
        domain_name: str,
        primary_target: DnsTarget,
        primary_zone_id: DnsTarget,
        secondary_target: DnsTarget,
        secondary_ttl: int = 300,
        health_check_path: str = "/",
        health_check_interval: int = 30,
        health_check_failure_threshold: int = 3,
    ):
        """
        Create the zone, both health checks and the failover records.

        Args:
            name: Pulumi resource name (used for zone, checks and records).
            domain_name: Zone apex (e.g. "example.com"); also the record name.
            primary_target: CloudFront domain name for the alias record and
                the primary health check.
            primary_zone_id: Hosted zone id of the CloudFront distribution.
            secondary_target: Azure static-website host for the CNAME record
                and the secondary health check.
            secondary_ttl: TTL in seconds of the secondary CNAME.
            health_check_path: Resource path probed on both origins.
            health_check_interval: Seconds between probes (10 or 30).
            health_check_failure_threshold: Consecutive failures before a
                check reports unhealthy (1-10).

        Outputs (set on self, registered for the component):
            name_servers: Delegate the domain to these at the registrar.
            zone_id: Hosted zone id.
            primary_health_check_id / secondary_health_check_id: Health check ids.
        """
        super().__init__(ID, name)

        # Fail at preview, not at apply, on settings Route 53 rejects.
        validate_health_check(health_check_interval, health_check_failure_threshold)

        child_opts = pulumi.ResourceOptions(parent=self)

        zone = aws.route53.Zone(
            resource_name=f"{name}-zone",
            name=domain_name,
            comment=f"Failover zone for {name}",
            force_destroy=True,
            opts=child_opts,
        )

        def health_check(role: str, host: DnsTarget) -> aws.route53.HealthCheck:
            return aws.route53.HealthCheck(
                resource_name=f"{name}-{role}-hc",
                fqdn=host,
                port=HTTPS_PORT,
                type="HTTPS",
                resource_path=health_check_path,
                request_interval=health_check_interval,
                failure_threshold=health_check_failure_threshold,
                tags={"Name": f"{name}-{role}"},
                opts=child_opts,
            )

        primary_check = health_check("primary", primary_target)
        secondary_check = health_check("secondary", secondary_target)

        record_name = ensure_trailing_dot(domain_name)

        # evaluate_target_health re-checks the distribution before answering,
        # independently of primary_check.
        aws.route53.Record(
            resource_name=f"{name}-primary",
            zone_id=zone.zone_id,
            name=record_name,
            type="A",
            set_identifier="primary",
            health_check_id=primary_check.id,
            failover_routing_policies=[
                aws.route53.RecordFailoverRoutingPolicyArgs(type="PRIMARY")
            ],
            aliases=[
                aws.route53.RecordAliasArgs(
                    name=primary_target,
                    zone_id=primary_zone_id,
                    evaluate_target_health=True,
                )
            ],
            opts=child_opts,
        )

        aws.route53.Record(
            resource_name=f"{name}-secondary",
            zone_id=zone.zone_id,
            name=record_name,
            type="CNAME",
            ttl=secondary_ttl,
            records=[secondary_target],
            set_identifier="secondary",
            failover_routing_policies=[
                aws.route53.RecordFailoverRoutingPolicyArgs(type="SECONDARY")
            ],
            opts=child_opts,
        )

        self.zone_id: pulumi.Output[str] = zone.zone_id
        self.name_servers: pulumi.Output[list[str]] = zone.name_servers
        self.primary_health_check_id: pulumi.Output[str] = primary_check.id
        self.secondary_health_check_id: pulumi.Output[str] = secondary_check.id
        self.register_outputs(
            {
                "zone_id": self.zone_id,
                "name_servers": self.name_servers,
                "primary_health_check_id": self.primary_health_check_id,
                "secondary_health_check_id": self.secondary_health_check_id,
            }
        )
