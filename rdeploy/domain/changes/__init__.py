"""
Change detection domain module
"""
from .models import ChangeReport
from .detector import (
    ChangeDetector,
    compute_file_digest,
    scan_digests,
    detect_changes,
    detect_and_stage,
)

__all__ = [
    "ChangeReport",
    "ChangeDetector",
    "compute_file_digest",
    "scan_digests",
    "detect_changes",
    "detect_and_stage",
]
