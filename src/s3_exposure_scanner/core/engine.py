"""
Core scanning engine that fans bucket names out to a bounded worker pool
"""

import logging
import threading
import concurrent.futures
from dataclasses import dataclass
from typing import Iterable, List

from .config import ScanConfig
from .exceptions import BootstrapError

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    buckets_scanned: int = 0
    findings: int = 0


class ScanEngine:
    """Runs one bucket pipeline per input name, at most ``concurrency`` at a time

    The producer takes a slot before handing a name to the pool and the
    worker gives it back when the pipeline finishes, so reading input blocks
    while every worker is busy and nothing queues up behind them.
    """

    def __init__(self, config: ScanConfig, pipeline):
        self.config = config
        self.pipeline = pipeline
        self._result = ScanResult()
        self._result_lock = threading.Lock()
        self._fatal: List[BootstrapError] = []

    def run_scan(self, bucket_names: Iterable[str]) -> ScanResult:
        """Scan every bucket name; returns once all pipelines have finished

        Raises BootstrapError if any worker could not build an AWS client.
        No further names are taken after that, but pipelines already running
        are allowed to finish.
        """
        workers = self.config.concurrency
        slots = threading.BoundedSemaphore(workers)
        self._result = ScanResult()
        self._fatal = []

        logger.info("Starting scan with %d workers", workers)

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="bucket-worker"
        ) as executor:
            for bucket_name in bucket_names:
                slots.acquire()
                if self._fatal:
                    slots.release()
                    break
                future = executor.submit(self._process_bucket, bucket_name)
                future.add_done_callback(lambda _: slots.release())

        if self._fatal:
            raise self._fatal[0]

        logger.info("Scan completed. %d buckets, %d findings",
                    self._result.buckets_scanned, self._result.findings)
        return self._result

    def _process_bucket(self, bucket_name: str):
        try:
            findings = self.pipeline.run(bucket_name)
        except BootstrapError as e:
            logger.error("Unable to build AWS client for %s: %s", bucket_name, e)
            self._fatal.append(e)
            return
        except Exception as e:
            logger.error("Scan of %s failed: %s", bucket_name, e, exc_info=True)
            findings = []

        with self._result_lock:
            self._result.buckets_scanned += 1
            self._result.findings += len(findings)
