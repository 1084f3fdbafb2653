"""
Failure taxonomy for the scanner

Everything except BootstrapError is contained inside a single bucket's
pipeline.
"""


class ScannerError(Exception):
    """Base class for scanner errors"""


class RegionResolutionError(ScannerError):
    """The bucket's region could not be discovered"""

    def __init__(self, bucket: str, reason: str):
        super().__init__(f"{bucket}: {reason}")
        self.bucket = bucket
        self.reason = reason


class RegionNotFound(RegionResolutionError):
    """The probe completed but carried no region header"""


class NetworkError(RegionResolutionError):
    """The region probe could not be completed"""


class AclFetchError(ScannerError):
    """An access control list could not be read"""


class PaginationError(ScannerError):
    """A page of the object listing could not be fetched"""


class ProbeError(ScannerError):
    """A mutating probe was rejected or failed"""


class BootstrapError(ScannerError):
    """No usable AWS client could be built; fatal for the whole run"""
