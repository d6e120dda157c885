"""
Pipeline Module
===============

Pacing, the append-only audit log, and the submission run loop.
"""

from zksubmit.pipeline.pacing import Pacer
from zksubmit.pipeline.audit import AuditLog
from zksubmit.pipeline.runner import RunReport, SubmissionPipeline


__all__ = [
    "Pacer",
    "AuditLog",
    "RunReport",
    "SubmissionPipeline",
]
