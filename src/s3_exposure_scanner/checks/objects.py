"""
Object-level ACL enumeration
"""

import logging
from typing import Any, Dict, Iterator

from botocore.exceptions import BotoCoreError, ClientError

from ..core.config import PUBLIC_WRITE_OBJECT_LIMIT, ScanConfig
from ..core.exceptions import AclFetchError, PaginationError
from ..core.framework import BucketCheck, Finding, FindingKind
from .acl import classify_grants, fetch_grants, findings_for
from .probes import AccessProber

logger = logging.getLogger(__name__)


class ObjectEnumerator(BucketCheck):
    """Walks a bucket's listing and checks the ACL of every object

    Pages are fetched lazily. Once ``limit`` objects with public write access
    have been reported the walk stops and no further page is requested.
    """

    def __init__(self, client, bucket: str, config: ScanConfig, reporter,
                 limit: int = PUBLIC_WRITE_OBJECT_LIMIT):
        super().__init__(client, bucket, reporter)
        self.config = config
        self.limit = limit
        self.prober = AccessProber(client, bucket, reporter) if config.aggressive else None

    def findings(self) -> Iterator[Finding]:
        issue_counter = 0
        pages = self._iter_pages()

        while True:
            try:
                page = next(pages)
            except StopIteration:
                return
            except PaginationError as e:
                logger.debug("Listing %s aborted: %s", self.bucket, e)
                self.reporter.narrate(f"Failed to iterate page in bucket {self.bucket}")
                return

            for obj in page.get("Contents", []):
                key = obj["Key"]
                for finding in self._check_object(key):
                    yield finding
                    if finding.kind != FindingKind.PUBLIC_WRITE:
                        continue
                    issue_counter += 1
                    if issue_counter >= self.limit:
                        self.reporter.narrate(
                            f"Found {self.limit} objects with public write permissions "
                            f"in {self.bucket}, skipping the rest."
                        )
                        return

    def _check_object(self, key: str) -> Iterator[Finding]:
        if self.prober is not None:
            finding = self.prober.try_object_acl_write(key)
            if finding:
                yield finding

        self.reporter.narrate(f"Checking ACP on {self.bucket}/{key}")
        try:
            grants = fetch_grants(self.client, self.bucket, key)
        except AclFetchError as e:
            logger.debug("ACL read for %s/%s failed: %s", self.bucket, key, e)
            self.reporter.narrate(f"Failed to get ACL for object {self.bucket}/{key}")
            return

        yield from findings_for(self.bucket, classify_grants(grants), key=key)

    def _iter_pages(self) -> Iterator[Dict[str, Any]]:
        paginator = self.client.get_paginator("list_objects_v2")
        pages = iter(paginator.paginate(Bucket=self.bucket))
        while True:
            try:
                page = next(pages)
            except StopIteration:
                return
            except (ClientError, BotoCoreError) as e:
                raise PaginationError(str(e)) from e
            yield page
