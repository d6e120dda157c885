"""
Relayer Module
==============

Client for the proof relayer's submit-proof endpoint.

Usage:
    from zksubmit.relayer import RelayerSubmitter

    async with RelayerSubmitter(base_url, api_key) as submitter:
        result = await submitter.submit(payload, iteration=1)
        if not result.succeeded:
            ...
"""

from zksubmit.relayer.models import AttemptRecord, SubmissionOutcome, SubmissionResult
from zksubmit.relayer.client import RATE_LIMIT_MARKER, RelayerSubmitter, classify_response


__all__ = [
    "RelayerSubmitter",
    "classify_response",
    "RATE_LIMIT_MARKER",
    "AttemptRecord",
    "SubmissionOutcome",
    "SubmissionResult",
]
