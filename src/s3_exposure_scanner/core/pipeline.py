"""
Per-bucket scan pipeline
"""

import logging
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .config import ScanConfig
from .exceptions import AclFetchError, RegionResolutionError
from .framework import BucketContext, Finding, FindingKind
from .output import Reporter
from .provider import AWSProvider
from ..checks.acl import classify_grants, fetch_grants, findings_for
from ..checks.objects import ObjectEnumerator
from ..checks.probes import AccessProber
from ..checks.region import RegionResolver

logger = logging.getLogger(__name__)


class BucketPipeline:
    """Runs every check for one bucket, in order

    resolve region -> bucket ACL -> open listing -> (quick: stop)
    -> (aggressive: write probes) -> object enumeration

    Findings are reported as soon as they are produced. Only BootstrapError
    (raised by the provider) escapes ``run``.
    """

    def __init__(self, config: ScanConfig, provider: AWSProvider, reporter: Reporter,
                 resolver: Optional[RegionResolver] = None):
        self.config = config
        self.provider = provider
        self.reporter = reporter
        self.resolver = resolver or RegionResolver()

    def run(self, bucket: str) -> List[Finding]:
        findings: List[Finding] = []

        def emit(finding: Optional[Finding]):
            if finding is None:
                return
            findings.append(finding)
            self.reporter.report(finding)

        context = self._open(bucket)
        if context is None:
            return findings

        for finding in self.check_bucket_acl(context):
            emit(finding)
        emit(self.check_open_listing(context))

        if self.config.quick:
            return findings

        if self.config.aggressive:
            prober = AccessProber(context.client, bucket, self.reporter)
            emit(prober.try_upload())
            emit(prober.try_bucket_acl_write())

        enumerator = ObjectEnumerator(context.client, bucket, self.config, self.reporter)
        for finding in enumerator.findings():
            emit(finding)

        return findings

    def _open(self, bucket: str) -> Optional[BucketContext]:
        try:
            region = self.resolver.resolve(bucket)
        except RegionResolutionError as e:
            logger.debug("Skipping %s: %s", bucket, e)
            self.reporter.narrate(f"Unable to get the region for {bucket}")
            return None

        self.reporter.narrate(f"Bucket {bucket} found in Region {region}")
        return BucketContext(bucket=bucket, region=region,
                             client=self.provider.get_client(region))

    def check_bucket_acl(self, context: BucketContext) -> List[Finding]:
        try:
            grants = fetch_grants(context.client, context.bucket)
        except AclFetchError as e:
            logger.debug("Bucket ACL read for %s failed: %s", context.bucket, e)
            self.reporter.narrate(f"Failed to get ACL for bucket {context.bucket}")
            return []

        findings = findings_for(context.bucket, classify_grants(grants))
        if not findings:
            self.reporter.narrate(f"No public access found on bucket {context.bucket}")
        return findings

    def check_open_listing(self, context: BucketContext) -> Optional[Finding]:
        """Ask for a single key; any successful answer counts as an open listing

        The request is signed with the caller's credentials, so a hit can mean
        the caller is allowed to list rather than everyone is.
        """
        try:
            context.client.list_objects_v2(Bucket=context.bucket, MaxKeys=1)
        except (ClientError, BotoCoreError) as e:
            logger.debug("Listing %s refused: %s", context.bucket, e)
            self.reporter.narrate(f"No open directory listing found in: {context.bucket}")
            return None
        return Finding(bucket=context.bucket, kind=FindingKind.OPEN_LISTING)
