"""
Azure secondary origin: Storage Account static website + site blobs.

This component creates a resource group, a general-purpose v2 storage account
with static website hosting (index.html, 404.html), one blob per site file in
the ``$web`` container, and optionally blob and container soft-delete for a
fixed retention period.

``web_host`` (the bare static-website host) is the CNAME target of the
secondary failover record and the host of the secondary health check.

Storage account names are derived from ``name`` and sanitized to meet Azure
rules: lowercase alphanumeric only, 3-24 characters, globally unique.
"""

from typing import Sequence

import pulumi
import pulumi_azure_native as azure_native

from components._content import SiteFile, resource_suffix
from components._helpers import host_from_url, sanitize_storage_account_name

ID: str = "sitefailover:azure:AzureInfra"

# Container Azure creates when static website hosting is enabled.
WEB_CONTAINER = "$web"


class AzureInfra(pulumi.ComponentResource):
    """
    Storage Account with static website hosting and optional soft-delete.

    Resources: ResourceGroup, StorageAccount, StorageAccountStaticWebsite,
    one Blob per site file, and optionally BlobServiceProperties (delete
    retention).
    """

    def __init__(
        self,
        name: str,
        site_files: Sequence[SiteFile] = (),
        enable_backup: bool = False,
        backup_retention_days: int = 30,
    ):
        """
        Create the resource group, storage account, static website and blobs.

        Args:
            name: Pulumi resource name; used for resource group, account, and
                child resources. Storage account name is sanitized (alphanumeric,
                max 24 chars) via sanitize_storage_account_name.
            site_files: Files to declare as blobs in ``$web``.
            enable_backup: If True, enable blob and container soft-delete for
                backup_retention_days so deleted data can be recovered.
            backup_retention_days: Retention in days when enable_backup is True.

        Outputs (set on self, registered for the component):
            primary_endpoint: Static-website URL (e.g.
                "https://<account>.z6.web.core.windows.net/").
            web_host: Host part of primary_endpoint, for DNS and health checks.
        """
        super().__init__(ID, name)

        child_opts = pulumi.ResourceOptions(parent=self)

        rg = azure_native.resources.ResourceGroup(
            resource_name=f"{name}-rg",
            resource_group_name=f"{name}-rg",
            opts=child_opts,
        )

        # Storage account names must be globally unique, 3-24 chars, alphanumeric only.
        account_name = pulumi.Output.from_input(name).apply(
            sanitize_storage_account_name
        )
        sku = azure_native.storage.SkuArgs(
            name=azure_native.storage.SkuName.STANDARD_LRS
        )

        self.storage_account = azure_native.storage.StorageAccount(
            resource_name=f"{name}sa",
            resource_group_name=rg.name,
            account_name=account_name,
            sku=sku,
            kind=azure_native.storage.Kind.STORAGE_V2,
            enable_https_traffic_only=True,
            minimum_tls_version=azure_native.storage.MinimumTlsVersion.TLS1_2,
            allow_blob_public_access=False,
            opts=child_opts,
        )

        static_website = azure_native.storage.StorageAccountStaticWebsite(
            resource_name=f"{name}-static",
            account_name=self.storage_account.name,
            resource_group_name=rg.name,
            index_document="index.html",
            error404_document="404.html",
            opts=child_opts,
        )

        # $web exists only once static website hosting is enabled.
        blob_opts = pulumi.ResourceOptions(parent=self, depends_on=[static_website])
        for site_file in site_files:
            azure_native.storage.Blob(
                resource_name=f"{name}-blob-{resource_suffix(site_file.key)}",
                account_name=self.storage_account.name,
                resource_group_name=rg.name,
                container_name=WEB_CONTAINER,
                blob_name=site_file.key,
                type=azure_native.storage.BlobType.BLOCK,
                source=pulumi.FileAsset(str(site_file.path)),
                content_type=site_file.content_type,
                opts=blob_opts,
            )

        # Soft-delete keeps blobs/containers recoverable for backup_retention_days.
        if enable_backup:
            retention = azure_native.storage.DeleteRetentionPolicyArgs(
                enabled=True,
                days=backup_retention_days,
            )
            azure_native.storage.BlobServiceProperties(
                resource_name=f"{name}-backup",
                resource_group_name=rg.name,
                account_name=self.storage_account.name,
                blob_services_name="default",
                delete_retention_policy=retention,
                container_delete_retention_policy=retention,
                opts=child_opts,
            )

        self.primary_endpoint: pulumi.Output[str] = (
            self.storage_account.primary_endpoints.web
        )
        self.web_host: pulumi.Output[str] = self.primary_endpoint.apply(host_from_url)
        self.register_outputs(
            {
                "primary_endpoint": self.primary_endpoint,
                "web_host": self.web_host,
            }
        )
