"""
Pure helpers for DNS, naming and health-check settings. Testable without
the Pulumi runtime.

Used by the Route 53 component (ensure_trailing_dot, validate_health_check),
the Azure component (sanitize_storage_account_name) and the entrypoint
(host_from_url). No Pulumi types; all functions accept and return plain
Python types so they can be unit-tested without a Pulumi stack.
"""

from urllib.parse import urlsplit

# Route 53 only supports these request intervals (seconds) for health checks.
ROUTE53_REQUEST_INTERVALS: tuple[int, ...] = (10, 30)
ROUTE53_MAX_FAILURE_THRESHOLD: int = 10


def ensure_trailing_dot(
    domain: str,
) -> str:
    """
    Return domain with a single trailing dot for DNS FQDN.

    Route 53 returns zone and record names fully qualified, with a trailing
    dot. Idempotent if already present.
    """
    return domain if domain.endswith(".") else f"{domain}."


def host_from_url(
    url: str,
) -> str:
    """
    Return the bare host of an endpoint URL.

    Azure reports the static-website endpoint as a URL
    (e.g. "https://sitesa.z6.web.core.windows.net/"); CNAME targets and
    health checks need only the host. A value without a scheme is returned
    with any path stripped.
    """
    if "://" not in url:
        return url.split("/")[0]
    return urlsplit(url).hostname or ""


def sanitize_storage_account_name(
    prefix: str,
    max_len: int = 24,
) -> str:
    """
    Produce an Azure-compliant storage account name from a prefix.

    Azure storage account names must be globally unique, 3-24 characters,
    lowercase alphanumeric only. This function drops every other character,
    lowercases, truncates to reserve space for a "sa" suffix, and appends "sa".

    Args:
        prefix: Base name (e.g. from Pulumi resource name).
        max_len: Maximum length (default 24 per Azure).

    Returns:
        Sanitized name ending with "sa" (e.g. "azuresitefailoverdevsa").
    """
    # Reserve 2 chars for "sa" suffix; strip chars Azure disallows.
    cleaned = "".join(c for c in prefix.lower() if c.isascii() and c.isalnum())
    return f"{cleaned[: max_len - 2]}sa"


def validate_health_check(
    request_interval: int,
    failure_threshold: int,
) -> None:
    """
    Reject health-check settings Route 53 would refuse at apply time.

    Raises:
        ValueError: request_interval is not 10 or 30, or failure_threshold
            is outside 1-10.
    """
    if request_interval not in ROUTE53_REQUEST_INTERVALS:
        raise ValueError(
            f"health check request interval must be one of "
            f"{ROUTE53_REQUEST_INTERVALS}, got {request_interval}"
        )
    if not 1 <= failure_threshold <= ROUTE53_MAX_FAILURE_THRESHOLD:
        raise ValueError(
            f"health check failure threshold must be between 1 and "
            f"{ROUTE53_MAX_FAILURE_THRESHOLD}, got {failure_threshold}"
        )


def cloudfront_read_policy(
    bucket_arn: str,
    distribution_arn: str,
) -> dict:
    """
    S3 bucket policy letting one CloudFront distribution read objects via OAC.

    Grants s3:GetObject to the CloudFront service principal, scoped with
    AWS:SourceArn to the given distribution so no other distribution can
    use the bucket as an origin.
    """
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Sid": "AllowCloudFrontServicePrincipalReadOnly",
                "Effect": "Allow",
                "Principal": {"Service": "cloudfront.amazonaws.com"},
                "Action": "s3:GetObject",
                "Resource": f"{bucket_arn}/*",
                "Condition": {"StringEquals": {"AWS:SourceArn": distribution_arn}},
            }
        ],
    }
