"""
Output formatting for findings and verbose narration
"""

import threading
from enum import Enum
from typing import Optional

from rich.console import Console

from .framework import Finding, FindingKind


class Severity(Enum):
    HIGH = "high"
    LOW = "low"
    PROBE = "probe"


SEVERITY_BY_KIND = {
    FindingKind.PUBLIC_WRITE: Severity.HIGH,
    FindingKind.BUCKET_POLICY_WRITABLE: Severity.HIGH,
    FindingKind.OBJECT_POLICY_WRITABLE: Severity.HIGH,
    FindingKind.PUBLIC_READ: Severity.LOW,
    FindingKind.OPEN_LISTING: Severity.LOW,
    FindingKind.UPLOAD_ALLOWED: Severity.PROBE,
}

SEVERITY_STYLES = {
    Severity.HIGH: "red",
    Severity.LOW: "yellow",
    Severity.PROBE: "green",
}

_BUCKET_MESSAGES = {
    FindingKind.PUBLIC_WRITE: "Bucket with public write access found: {resource}",
    FindingKind.PUBLIC_READ: "Bucket with public read access found: {resource}",
    FindingKind.OPEN_LISTING: "Possible open directory listing in {resource}",
    FindingKind.UPLOAD_ALLOWED: "Upload allowed in bucket {resource}",
    FindingKind.BUCKET_POLICY_WRITABLE: "Writable Bucket ACP in bucket {resource}",
}

_OBJECT_MESSAGES = {
    FindingKind.PUBLIC_WRITE: "Object with public write access found: {resource}",
    FindingKind.PUBLIC_READ: "Object with public read access found: {resource}",
    FindingKind.OBJECT_POLICY_WRITABLE: "Writable Bucket Object ACP {resource}",
}


def severity_of(kind: FindingKind) -> Severity:
    return SEVERITY_BY_KIND[kind]


def format_finding(finding: Finding) -> str:
    """Render a finding as its one-line text, without any styling"""
    messages = _BUCKET_MESSAGES if finding.key is None else _OBJECT_MESSAGES
    try:
        template = messages[finding.kind]
    except KeyError:
        raise ValueError(
            f"{finding.kind.name} cannot be reported for {finding.resource}"
        ) from None
    return template.format(resource=finding.resource)


class Reporter:
    """Prints findings, and progress narration when verbose

    Workers share one reporter; every line is written whole.
    """

    def __init__(self, verbose: bool = False, console: Optional[Console] = None):
        self.verbose = verbose
        self.console = console or Console()
        self._lock = threading.Lock()

    def report(self, finding: Finding):
        style = SEVERITY_STYLES[severity_of(finding.kind)] if self.verbose else None
        self._write(format_finding(finding), style)

    def narrate(self, message: str):
        if self.verbose:
            self._write(message)

    def _write(self, text: str, style: Optional[str] = None):
        with self._lock:
            # bucket names are printed verbatim, never as markup
            self.console.print(
                text, style=style, markup=False, highlight=False,
                emoji=False, soft_wrap=True,
            )
