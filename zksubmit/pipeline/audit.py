"""
Audit Log
=========

Append-only record of every submission attempt. This file is the only
durable trail of what was sent to the relayer, so it is opened in append
mode for each record and never truncated.
"""

from pathlib import Path

from zksubmit.logging import get_logger
from zksubmit.relayer.models import AttemptRecord


logger = get_logger(__name__)


class AuditLog:
    """
    Line-oriented attempt log (``[<iteration>][<attempt>] <response>``).

    Only raw attempts are written here. An iteration that ran out of retries
    shows up as its last attempt line; the EXHAUSTED outcome itself is in the
    structured log (``submission_exhausted``) and the run report.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def append(self, record: AttemptRecord) -> None:
        """Write one record and flush it to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(record.line + "\n")
            f.flush()

        logger.info(
            "submission_attempt",
            iteration=record.iteration,
            attempt=record.attempt,
            status_code=record.status_code,
            response=record.response,
        )

    def lines(self) -> list[str]:
        """Read back every line written so far."""
        if not self.path.exists():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()
