"""
Static-site failover infrastructure components.

Each concern is encapsulated in its own ComponentResource for clear ownership,
testability, and reuse. Use from the Pulumi entrypoint (e.g. __main__.py) with
config and output chaining:

- **AwsInfra**: S3 + CloudFront primary origin; exposes cloudfront_domain_name
  and cloudfront_hosted_zone_id for the alias record.
- **AzureInfra**: Storage Account static website secondary origin; exposes
  web_host for the CNAME record.
- **Route53Failover**: hosted zone, health checks and the PRIMARY/SECONDARY
  record pair; exposes name_servers.
"""

from components.aws import AwsInfra
from components.azure import AzureInfra
from components.dns import Route53Failover

__all__ = ["AwsInfra", "AzureInfra", "Route53Failover"]
