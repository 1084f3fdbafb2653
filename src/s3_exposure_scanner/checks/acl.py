"""
ACL grant classification
"""

from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..core.config import ALL_USERS_URI
from ..core.exceptions import AclFetchError
from ..core.framework import AccessGrant, Finding, FindingKind, Permission

WRITE_PERMISSIONS = (Permission.WRITE, Permission.FULL_CONTROL)


class GrantClassification(NamedTuple):
    public_read: bool
    public_write: bool


def is_public_grantee(grant: AccessGrant) -> bool:
    """True when the grant is to the AllUsers group"""
    return grant.grantee_type == "Group" and grant.grantee_identifier == ALL_USERS_URI


def classify_grants(grants: Iterable[AccessGrant]) -> GrantClassification:
    """Work out whether a grant list opens read and/or write access to everyone

    Both flags are computed over the whole list, so the result does not
    depend on grant order.
    """
    public_read = False
    public_write = False

    for grant in grants:
        if not is_public_grantee(grant):
            continue
        if grant.permission == Permission.READ:
            public_read = True
        elif grant.permission in WRITE_PERMISSIONS:
            public_write = True

    return GrantClassification(public_read=public_read, public_write=public_write)


def findings_for(bucket: str, classification: GrantClassification,
                 key: Optional[str] = None) -> List[Finding]:
    """Findings for a classified ACL, write before read"""
    findings = []
    if classification.public_write:
        findings.append(Finding(bucket=bucket, kind=FindingKind.PUBLIC_WRITE, key=key))
    if classification.public_read:
        findings.append(Finding(bucket=bucket, kind=FindingKind.PUBLIC_READ, key=key))
    return findings


def parse_grants(acl_response: Dict[str, Any]) -> List[AccessGrant]:
    return [AccessGrant.from_api(grant) for grant in acl_response.get("Grants", [])]


def fetch_grants(client, bucket: str, key: Optional[str] = None) -> List[AccessGrant]:
    """Read the ACL of a bucket, or of one of its objects when ``key`` is given"""
    try:
        if key is None:
            response = client.get_bucket_acl(Bucket=bucket)
        else:
            response = client.get_object_acl(Bucket=bucket, Key=key)
    except (ClientError, BotoCoreError) as e:
        raise AclFetchError(str(e)) from e

    return parse_grants(response)
