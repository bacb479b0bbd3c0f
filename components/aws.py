"""
AWS primary origin: S3 bucket + CloudFront distribution + site objects.

This component creates an S3 bucket as the origin for a CloudFront
distribution and declares one S3 object per site file. The bucket is not
publicly readable: Block Public Access can be enabled (default), and
CloudFront reads S3 through Origin Access Control (OAC) with signed requests;
the bucket policy grants ``s3:GetObject`` only to this distribution.

Outputs (``cloudfront_domain_name``, ``cloudfront_hosted_zone_id``,
``cloudfront_url``) are ``Output[str]`` so the Route 53 component can bind
its primary alias record and primary health check to the distribution.
"""

from typing import Sequence

import pulumi
import pulumi_aws as aws

from components._content import SiteFile, resource_suffix
from components._helpers import cloudfront_read_policy

ID: str = "sitefailover:aws:AwsInfra"

# Applied when enable_public_access_block is True. Used by tests and callers
# to assert on secure defaults.
S3_BLOCK_PUBLIC_ACCESS: dict[str, bool] = {
    "block_public_acls": True,
    "block_public_policy": True,
    "ignore_public_acls": True,
    "restrict_public_buckets": True,
}

S3_ORIGIN_ID = "s3-origin"


class AwsInfra(pulumi.ComponentResource):
    """
    S3 bucket with optional Block Public Access + CloudFront (OAC, HTTPS).

    Resources: Bucket, optional BucketPublicAccessBlock, OriginAccessControl,
    Distribution, BucketPolicy, and one BucketObject per site file. Content
    is served only via CloudFront.
    """

    def __init__(
        self,
        name: str,
        bucket_name: str | None = None,
        site_files: Sequence[SiteFile] = (),
        enable_public_access_block: bool = True,
    ):
        """
        Create the S3 bucket, CloudFront distribution and site objects.

        Args:
            name: Pulumi resource name for the bucket and related resources
                (e.g. bucket id, OAC, distribution).
            bucket_name: Physical S3 bucket name. Must be globally unique;
                when None Pulumi auto-names the bucket from ``name``.
            site_files: Files to declare as S3 objects (see _content.site_files).
            enable_public_access_block: If True (default), apply
                S3_BLOCK_PUBLIC_ACCESS so the bucket cannot be made public.

        Outputs (set on self, registered for the component):
            cloudfront_domain_name: Distribution FQDN (alias target and
                primary health-check host).
            cloudfront_hosted_zone_id: Route 53 hosted zone ID of the
                distribution, required by alias records.
            cloudfront_url: HTTPS URL of the distribution.
        """
        super().__init__(
            ID,
            name,
        )

        # Child resources get parent=self so Pulumi builds a proper hierarchy:
        # lifecycle order (e.g. destroy CloudFront before bucket) and UI grouping.
        child_opts = pulumi.ResourceOptions(parent=self)

        # A non-unique bucket name fails the apply; Pulumi reports it.
        self.bucket = aws.s3.Bucket(
            resource_name=name,
            bucket=bucket_name,
            force_destroy=True,
            opts=child_opts,
        )

        policy_depends_on = []
        if enable_public_access_block:
            public_access_block = aws.s3.BucketPublicAccessBlock(
                resource_name=f"{name}-block-public",
                bucket=self.bucket.id,
                opts=child_opts,
                **S3_BLOCK_PUBLIC_ACCESS,
            )
            policy_depends_on.append(public_access_block)

        # retain_on_delete=True avoids AWS 409 OriginAccessControlInUse on destroy:
        # AWS may still reference the OAC briefly after the distribution is gone.
        oac = aws.cloudfront.OriginAccessControl(
            resource_name=f"{name}-oac",
            origin_access_control_origin_type="s3",
            signing_behavior="always",
            signing_protocol="sigv4",
            opts=pulumi.ResourceOptions(parent=self, retain_on_delete=True),
        )

        origins = [
            aws.cloudfront.DistributionOriginArgs(
                domain_name=self.bucket.bucket_regional_domain_name,
                origin_id=S3_ORIGIN_ID,
                origin_access_control_id=oac.id,
            )
        ]

        # ForwardedValues is required by the API when not using a cache policy.
        forwarded_values = aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesArgs(
            query_string=False,
            cookies=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesCookiesArgs(
                forward="none",
            ),
        )
        default_cache_behavior = aws.cloudfront.DistributionDefaultCacheBehaviorArgs(
            target_origin_id=S3_ORIGIN_ID,
            viewer_protocol_policy="redirect-to-https",
            allowed_methods=["GET", "HEAD", "OPTIONS"],
            cached_methods=["GET", "HEAD"],
            compress=True,
            forwarded_values=forwarded_values,
        )

        restrictions = aws.cloudfront.DistributionRestrictionsArgs(
            geo_restriction=aws.cloudfront.DistributionRestrictionsGeoRestrictionArgs(
                restriction_type="none",
            ),
        )

        viewer_certificate = aws.cloudfront.DistributionViewerCertificateArgs(
            cloudfront_default_certificate=True,
        )

        # Explicit depends_on so destroy order is correct: distribution is deleted
        # before the OAC (AWS returns 409 OriginAccessControlInUse otherwise).
        self.distribution = aws.cloudfront.Distribution(
            resource_name=f"{name}-cdn",
            enabled=True,
            default_root_object="index.html",
            origins=origins,
            default_cache_behavior=default_cache_behavior,
            restrictions=restrictions,
            viewer_certificate=viewer_certificate,
            opts=pulumi.ResourceOptions(parent=self, depends_on=[oac]),
        )

        # Bucket policy needs both ARNs, so it waits for the distribution.
        policy = pulumi.Output.all(self.bucket.arn, self.distribution.arn).apply(
            lambda arns: cloudfront_read_policy(arns[0], arns[1])
        )
        aws.s3.BucketPolicy(
            resource_name=f"{name}-policy",
            bucket=self.bucket.id,
            policy=pulumi.Output.json_dumps(policy),
            opts=pulumi.ResourceOptions(parent=self, depends_on=policy_depends_on),
        )

        for site_file in site_files:
            aws.s3.BucketObject(
                resource_name=f"{name}-obj-{resource_suffix(site_file.key)}",
                bucket=self.bucket.id,
                key=site_file.key,
                source=pulumi.FileAsset(str(site_file.path)),
                content_type=site_file.content_type,
                opts=child_opts,
            )

        self.cloudfront_domain_name: pulumi.Output[str] = self.distribution.domain_name
        self.cloudfront_hosted_zone_id: pulumi.Output[str] = (
            self.distribution.hosted_zone_id
        )
        self.cloudfront_url: pulumi.Output[str] = pulumi.Output.concat(
            "https://", self.distribution.domain_name
        )
        self.register_outputs(
            {
                "cloudfront_domain_name": self.cloudfront_domain_name,
                "cloudfront_hosted_zone_id": self.cloudfront_hosted_zone_id,
                "cloudfront_url": self.cloudfront_url,
            }
        )
