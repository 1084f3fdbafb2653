"""
Shared fixtures for the scanner tests.

- moto's mock_aws backs the tests that run against a simulated S3.
- FakeS3Client covers failure paths moto cannot produce (denied ACL reads,
  failing pages) and records every call made against it.
"""

import io
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from rich.console import Console

from s3_exposure_scanner.core.config import ALL_USERS_URI, AUTHENTICATED_USERS_URI
from s3_exposure_scanner.core.output import Reporter
from s3_exposure_scanner.core.provider import AWSProvider


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Mocked AWS credentials so nothing can reach a real account"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def s3():
    with mock_aws():
        yield boto3.client("s3", region_name="us-east-1")


@pytest.fixture
def provider(s3):
    return AWSProvider(session=boto3.Session(region_name="us-east-1"))


class CapturingReporter(Reporter):
    """Reporter writing to an in-memory buffer"""

    def __init__(self, verbose=False):
        self.buffer = io.StringIO()
        super().__init__(verbose=verbose, console=Console(file=self.buffer, width=200))

    @property
    def lines(self) -> List[str]:
        return [line for line in self.buffer.getvalue().splitlines() if line]


@pytest.fixture
def reporter():
    return CapturingReporter()


@pytest.fixture
def verbose_reporter():
    return CapturingReporter(verbose=True)


class StaticResolver:
    def __init__(self, region="us-east-1"):
        self.region = region
        self.resolved = []

    def resolve(self, bucket):
        self.resolved.append(bucket)
        return self.region


# --- Fake S3 -------------------------------------------------------------

def grant(permission, uri=ALL_USERS_URI, grantee_type="Group"):
    return {"Grantee": {"Type": grantee_type, "URI": uri}, "Permission": permission}


PUBLIC_READ = [grant("READ")]
PUBLIC_WRITE = [grant("WRITE")]
PUBLIC_READ_WRITE = [grant("READ"), grant("WRITE")]
PRIVATE = [
    {"Grantee": {"Type": "CanonicalUser", "ID": "owner-id"}, "Permission": "FULL_CONTROL"},
    grant("READ", uri=AUTHENTICATED_USERS_URI),
]


def access_denied(operation):
    return ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, operation
    )


@dataclass
class FakeBucket:
    grants: Optional[list] = None
    listable: bool = False
    writable: bool = False
    # key -> grants; None means the object ACL cannot be read
    objects: Dict[str, Optional[list]] = field(default_factory=dict)
    page_size: int = 1000
    fail_page: Optional[int] = None


class FakePaginator:
    def __init__(self, client):
        self.client = client

    def paginate(self, Bucket):
        bucket = self.client.buckets[Bucket]
        keys = list(bucket.objects)
        pages = [keys[i:i + bucket.page_size] for i in range(0, len(keys), bucket.page_size)]
        for number, page in enumerate(pages):
            if bucket.fail_page == number:
                raise access_denied("ListObjectsV2")
            self.client.pages_fetched += 1
            yield {"Contents": [{"Key": key} for key in page]}


class FakeS3Client:
    def __init__(self, buckets):
        self.buckets: Dict[str, FakeBucket] = buckets
        self.calls = []
        self.pages_fetched = 0

    def _bucket(self, name, operation):
        self.calls.append((operation, name))
        return self.buckets[name]

    def get_bucket_acl(self, Bucket):
        bucket = self._bucket(Bucket, "get_bucket_acl")
        if bucket.grants is None:
            raise access_denied("GetBucketAcl")
        return {"Grants": bucket.grants}

    def list_objects_v2(self, Bucket, MaxKeys=1000):
        bucket = self._bucket(Bucket, "list_objects_v2")
        if not bucket.listable:
            raise access_denied("ListObjectsV2")
        return {"Contents": [{"Key": key} for key in list(bucket.objects)[:MaxKeys]]}

    def get_paginator(self, operation):
        assert operation == "list_objects_v2"
        return FakePaginator(self)

    def get_object_acl(self, Bucket, Key):
        bucket = self._bucket(Bucket, "get_object_acl")
        grants = bucket.objects[Key]
        if grants is None:
            raise access_denied("GetObjectAcl")
        return {"Grants": grants}

    def put_object(self, Bucket, Key, Body):
        bucket = self._bucket(Bucket, "put_object")
        if not bucket.writable:
            raise access_denied("PutObject")

    def put_bucket_acl(self, Bucket, GrantRead):
        bucket = self._bucket(Bucket, "put_bucket_acl")
        if not bucket.writable:
            raise access_denied("PutBucketAcl")

    def put_object_acl(self, Bucket, Key, ACL):
        bucket = self._bucket(Bucket, "put_object_acl")
        if not bucket.writable:
            raise access_denied("PutObjectAcl")
        bucket.objects[Key] = PUBLIC_READ

    def operations(self, bucket=None):
        return [op for op, name in self.calls if bucket is None or name == bucket]


class FakeProvider:
    def __init__(self, client):
        self.client = client
        self.regions = []

    def get_client(self, region, service_name="s3"):
        self.regions.append(region)
        return self.client
