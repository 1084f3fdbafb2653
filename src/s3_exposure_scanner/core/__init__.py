"""Core framework components for the S3 exposure scanner"""

from .config import ScanConfig
from .framework import AccessGrant, BucketContext, Finding, FindingKind, Permission
from .provider import AWSProvider
from .output import Reporter

__all__ = [
    "ScanConfig",
    "AccessGrant",
    "BucketContext",
    "Finding",
    "FindingKind",
    "Permission",
    "AWSProvider",
    "Reporter",
]
