"""
Static-site failover - multi-cloud IaC entrypoint.

Wires three ComponentResources using Pulumi config and output chaining:

- **AWS**: S3 + CloudFront as the primary origin. The CloudFront domain and
  hosted zone id feed the Route 53 primary alias record and health check.
- **Azure**: Storage Account static website as the secondary origin. Optional
  soft-delete from config. Its web host feeds the Route 53 secondary CNAME
  and health check.
- **Route 53**: hosted zone, one HTTPS health check per origin and the apex
  PRIMARY/SECONDARY failover pair. Domain comes from config; caller must
  delegate the domain to the zone name servers.

Both origins receive the same files from ``site_dir``.

Stack exports: aws_cloudfront_url, aws_cloudfront_domain, azure_primary_endpoint,
route53_name_servers, primary_health_check_id, secondary_health_check_id.
"""

import pulumi

from components import AwsInfra, AzureInfra, Route53Failover
from components._content import site_files
from config import StackConfig


def _component_name(project_name: str, environment: str, prefix: str) -> str:
    return f"{prefix}-{project_name}-{environment}"


def main():
    """
    Build AWS, Azure, and Route 53 components and export stack outputs.

    Reads config, maps the site directory to object keys and content types,
    instantiates each component, chains the CloudFront and Azure outputs into
    Route 53 as primary and secondary targets, and exports the main URLs,
    health check ids and name servers.
    """
    config = StackConfig.from_pulumi_config(pulumi.Config())

    def name(prefix: str) -> str:
        return _component_name(config.project_name, config.environment, prefix)

    files = site_files(config.site_dir)
    pulumi.log.info(f"Declaring {len(files)} site files from {config.site_dir}")

    aws = AwsInfra(
        name=name("aws"),
        bucket_name=config.aws_bucket_name,
        site_files=files,
        enable_public_access_block=config.enable_public_access_block,
    )

    azure = AzureInfra(
        name=name("azure"),
        site_files=files,
        enable_backup=config.enable_azure_backup,
        backup_retention_days=config.backup_retention_days,
    )

    dns = Route53Failover(
        name=name("dns"),
        domain_name=config.domain_name,
        primary_target=aws.cloudfront_domain_name,
        primary_zone_id=aws.cloudfront_hosted_zone_id,
        secondary_target=azure.web_host,
        secondary_ttl=config.secondary_ttl,
        health_check_path=config.health_check_path,
        health_check_interval=config.health_check_interval,
        health_check_failure_threshold=config.health_check_failure_threshold,
    )

    for output_name, value in [
        ("aws_cloudfront_url", aws.cloudfront_url),
        ("aws_cloudfront_domain", aws.cloudfront_domain_name),
        ("azure_primary_endpoint", azure.primary_endpoint),
        ("route53_name_servers", dns.name_servers),
        ("primary_health_check_id", dns.primary_health_check_id),
        ("secondary_health_check_id", dns.secondary_health_check_id),
    ]:
        pulumi.export(output_name, value)


if __name__ == "__main__":
    main()
