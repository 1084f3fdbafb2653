"""
Bucket region discovery
"""

import logging
import re

import requests
import urllib3
from urllib3.exceptions import HTTPError, InsecureRequestWarning

from ..core.config import BUCKET_ENDPOINT, REGION_HEADER
from ..core.exceptions import NetworkError, RegionNotFound

logger = logging.getLogger(__name__)

# The probe only reads metadata, so certificate checks are skipped
urllib3.disable_warnings(InsecureRequestWarning)

# same shape botocore accepts as a region name
VALID_REGION = re.compile(r"^[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?$")


class RegionResolver:
    """Finds a bucket's region with an unauthenticated HEAD request

    S3 answers with the ``x-amz-bucket-region`` header whatever the status
    code, so 200, 301 and 403 responses all resolve.
    """

    def resolve(self, bucket: str) -> str:
        url = BUCKET_ENDPOINT.format(bucket=bucket)
        try:
            response = requests.head(url, verify=False, allow_redirects=False)
        except (requests.RequestException, HTTPError, ValueError) as e:
            # urllib3 raises LocationParseError unwrapped for bad host labels,
            # IDNA encoding of odd names fails with UnicodeError
            logger.debug("Region probe for %s failed: %s", bucket, e)
            raise NetworkError(bucket, str(e)) from e

        region = response.headers.get(REGION_HEADER)
        if not region:
            raise RegionNotFound(bucket, "bucket region not found in headers")
        if not VALID_REGION.match(region):
            raise RegionNotFound(bucket, f"malformed region header {region!r}")
        return region
