"""
Core data model: access grants, findings and the per-bucket context
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .output import Reporter


class Permission(Enum):
    """Permission carried by an ACL grant"""
    READ = "READ"
    WRITE = "WRITE"
    FULL_CONTROL = "FULL_CONTROL"
    OTHER = "OTHER"

    @classmethod
    def from_api(cls, value: Optional[str]) -> "Permission":
        # READ_ACP / WRITE_ACP and anything unknown
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class FindingKind(Enum):
    """Kinds of exposure the scanner reports"""
    PUBLIC_READ = "public_read"
    PUBLIC_WRITE = "public_write"
    OPEN_LISTING = "open_listing"
    UPLOAD_ALLOWED = "upload_allowed"
    BUCKET_POLICY_WRITABLE = "bucket_policy_writable"
    OBJECT_POLICY_WRITABLE = "object_policy_writable"


# grantee field holding the identifier, by grantee type
_GRANTEE_ID_FIELDS = {
    "Group": "URI",
    "CanonicalUser": "ID",
    "AmazonCustomerByEmail": "EmailAddress",
}


@dataclass(frozen=True)
class AccessGrant:
    """A single (grantee, permission) entry of a bucket or object ACL"""
    grantee_type: str
    grantee_identifier: str
    permission: Permission

    @classmethod
    def from_api(cls, grant: Dict[str, Any]) -> "AccessGrant":
        """Build a grant from one item of a boto3 ``Grants`` list"""
        grantee = grant.get("Grantee", {}) or {}
        grantee_type = grantee.get("Type", "")
        id_field = _GRANTEE_ID_FIELDS.get(grantee_type, "URI")
        return cls(
            grantee_type=grantee_type,
            grantee_identifier=grantee.get(id_field, "") or "",
            permission=Permission.from_api(grant.get("Permission")),
        )


@dataclass(frozen=True)
class Finding:
    """Exposure finding for a bucket, or for one object when ``key`` is set"""
    bucket: str
    kind: FindingKind
    key: Optional[str] = None

    @property
    def resource(self) -> str:
        if self.key is None:
            return self.bucket
        return f"{self.bucket}/{self.key}"


@dataclass
class BucketContext:
    """Resolved region and region-bound S3 client for one bucket"""
    bucket: str
    region: str
    client: Any


class BucketCheck:
    """Base class for checks bound to a single bucket's client"""

    def __init__(self, client, bucket: str, reporter: 'Reporter'):
        self.client = client
        self.bucket = bucket
        self.reporter = reporter

    def create_finding(self, kind: FindingKind, key: Optional[str] = None) -> Finding:
        """Helper method to create a finding for this bucket"""
        return Finding(bucket=self.bucket, kind=kind, key=key)
