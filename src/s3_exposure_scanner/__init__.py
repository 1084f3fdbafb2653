"""
S3 Exposure Scanner - checks S3 buckets and objects for public exposure

Bucket names are read from stdin and scanned concurrently for public ACL
grants, open listings and, in aggressive mode, writable ACLs.
"""

__version__ = "1.0.0"

from .core.config import ScanConfig
from .core.framework import AccessGrant, Finding, FindingKind, Permission
from .core.provider import AWSProvider
from .core.output import Reporter
from .core.pipeline import BucketPipeline
from .core.engine import ScanEngine, ScanResult

__all__ = [
    "ScanConfig",
    "AccessGrant",
    "Finding",
    "FindingKind",
    "Permission",
    "AWSProvider",
    "Reporter",
    "BucketPipeline",
    "ScanEngine",
    "ScanResult",
]
