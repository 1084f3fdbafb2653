"""
AWS provider for authentication and service client management
"""

import logging
import threading
from typing import Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError

from .exceptions import BootstrapError

logger = logging.getLogger(__name__)


class AWSProvider:
    """Builds region-bound S3 clients from the ambient AWS configuration"""

    def __init__(self, session: Optional[boto3.Session] = None):
        self.session = session
        self._clients: Dict[str, object] = {}
        # boto3 sessions are not thread-safe, the clients they build are
        self._lock = threading.Lock()

        if self.session is None:
            self._initialize_session()

    def _initialize_session(self):
        """Initialize boto3 session from the default credential chain (AWS_PROFILE included)"""
        try:
            self.session = boto3.Session()
        except BotoCoreError as e:
            raise BootstrapError(f"Failed to initialize AWS session: {e}") from e

    def get_client(self, region: str, service_name: str = 's3'):
        """Get a boto3 client for ``service_name`` bound to ``region``"""
        client_key = f"{service_name}_{region}"
        with self._lock:
            if client_key not in self._clients:
                try:
                    self._clients[client_key] = self.session.client(
                        service_name, region_name=region
                    )
                except BotoCoreError as e:
                    raise BootstrapError(
                        f"Failed to create {service_name} client for {region}: {e}"
                    ) from e
                logger.debug("Created %s client for %s", service_name, region)

            return self._clients[client_key]
