"""
Aggressive-mode write probes

Each probe changes the target for real: it uploads an object or loosens an
ACL, and nothing is rolled back afterwards. A probe is tried once; a
rejection only produces verbose narration.
"""

import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..core.config import AUTHENTICATED_USERS_URI, PROBE_OBJECT_BODY, PROBE_OBJECT_KEY
from ..core.exceptions import ProbeError
from ..core.framework import BucketCheck, Finding, FindingKind

logger = logging.getLogger(__name__)


class AccessProber(BucketCheck):
    """Tries write operations against one bucket and its objects"""

    def try_upload(self, key: str = PROBE_OBJECT_KEY,
                   body: bytes = PROBE_OBJECT_BODY) -> Optional[Finding]:
        self.reporter.narrate(f"Attempting to upload file to {self.bucket}")
        try:
            self._call("put_object", Bucket=self.bucket, Key=key, Body=body)
        except ProbeError:
            return None
        return self.create_finding(FindingKind.UPLOAD_ALLOWED)

    def try_bucket_acl_write(self) -> Optional[Finding]:
        """Grant READ on the bucket to the AuthenticatedUsers group"""
        self.reporter.narrate(f"Attempting to write bucket ACP to {self.bucket}")
        try:
            self._call(
                "put_bucket_acl",
                Bucket=self.bucket,
                GrantRead=f'uri="{AUTHENTICATED_USERS_URI}"',
            )
        except ProbeError:
            return None
        return self.create_finding(FindingKind.BUCKET_POLICY_WRITABLE)

    def try_object_acl_write(self, key: str) -> Optional[Finding]:
        self.reporter.narrate(f"Attempting to write object ACP to {self.bucket}/{key}")
        try:
            self._call("put_object_acl", Bucket=self.bucket, Key=key, ACL="public-read")
        except ProbeError:
            self.reporter.narrate(f"Failed to write object ACP to {self.bucket}/{key}")
            return None
        return self.create_finding(FindingKind.OBJECT_POLICY_WRITABLE, key=key)

    def _call(self, operation: str, **params):
        try:
            return getattr(self.client, operation)(**params)
        except (ClientError, BotoCoreError) as e:
            logger.debug("%s on %s rejected: %s", operation, self.bucket, e)
            raise ProbeError(f"{operation} failed: {e}") from e
