"""
Scan configuration and well-known constants
"""

from dataclasses import dataclass

ALL_USERS_URI = "http://acs.amazonaws.com/groups/global/AllUsers"
AUTHENTICATED_USERS_URI = "http://acs.amazonaws.com/groups/global/AuthenticatedUsers"

DEFAULT_CONCURRENCY = 10

# Object enumeration stops once this many public-write objects are reported
PUBLIC_WRITE_OBJECT_LIMIT = 5

BUCKET_ENDPOINT = "https://{bucket}.s3.amazonaws.com"
REGION_HEADER = "x-amz-bucket-region"

# Left in place by the upload probe, never deleted
PROBE_OBJECT_KEY = "s3-exposure-scanner-test.txt"
PROBE_OBJECT_BODY = b"s3-exposure-scanner-test"


@dataclass(frozen=True)
class ScanConfig:
    """Run-wide scan settings, built once from the command line"""
    verbose: bool = False
    aggressive: bool = False
    quick: bool = False
    concurrency: int = DEFAULT_CONCURRENCY

    def __post_init__(self):
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")
