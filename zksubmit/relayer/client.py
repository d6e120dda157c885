"""
Relayer Client
==============

Submits proof payloads to the relayer's submit-proof endpoint with bounded
retry on rate limiting.

Every attempt is appended to the audit log as soon as its response arrives,
so an interrupted run still leaves a complete trail of what was sent.

Version: 0.1.0
"""

from typing import TYPE_CHECKING, Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_result,
    stop_after_attempt,
)

from zksubmit.exceptions import ConfigurationError
from zksubmit.logging import get_logger, register_secret
from zksubmit.pipeline.pacing import Pacer
from zksubmit.relayer.models import AttemptRecord, SubmissionOutcome, SubmissionResult
from zksubmit.zk.models import SubmissionPayload


if TYPE_CHECKING:
    from zksubmit.pipeline.audit import AuditLog


logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 5

# Marker the relayer puts in throttled responses
RATE_LIMIT_MARKER = "Too Many Requests"


def classify_response(status_code: int, body: str) -> SubmissionOutcome:
    """
    Classify a relayer response.

    The status code decides first; the body marker catches throttling
    reported with a non-429 status.
    """
    if status_code == 429 or RATE_LIMIT_MARKER in body:
        return SubmissionOutcome.RATE_LIMITED
    if 200 <= status_code < 300:
        return SubmissionOutcome.ACCEPTED
    return SubmissionOutcome.REJECTED


class RelayerSubmitter:
    """
    Relayer submission client.

    Usage:
        async with RelayerSubmitter(base_url, api_key, backoff=Pacer(60, 120)) as submitter:
            result = await submitter.submit(payload, iteration=1)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        backoff: Pacer | None = None,
        audit_log: "AuditLog | None" = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout_seconds: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the submitter.

        Args:
            base_url: Relayer base URL
            api_key: Relayer API key (part of the request path)
            backoff: Delay window between retries (default 60..120s)
            audit_log: Where every attempt is recorded
            max_attempts: Upper bound on attempts per payload
            timeout_seconds: HTTP timeout
            client: Pre-configured HTTP client (tests use a mock transport)
        """
        if not api_key:
            raise ConfigurationError("Relayer API key not configured")
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        register_secret(api_key)
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self.backoff = backoff or Pacer(60, 120)
        self.audit_log = audit_log
        self.max_attempts = max_attempts
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def __aenter__(self) -> "RelayerSubmitter":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_seconds))
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def submit_url(self) -> str:
        return f"{self.base_url}/api/v1/submit-proof/{self._api_key}"

    async def _attempt(
        self,
        body: str,
        iteration: int,
        attempt: int,
    ) -> tuple[SubmissionOutcome, AttemptRecord]:
        """POST once, record the raw response, classify it."""
        client = self._get_client()
        status_code: int | None = None

        try:
            response = await client.post(
                self.submit_url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
            status_code = response.status_code
            raw = response.text
            outcome = classify_response(status_code, raw)
        except httpx.TransportError as e:
            raw = f"{type(e).__name__}: {e}"
            outcome = SubmissionOutcome.NETWORK_FAILURE

        record = AttemptRecord(
            iteration=iteration,
            attempt=attempt,
            response=raw,
            status_code=status_code,
        )
        if self.audit_log is not None:
            self.audit_log.append(record)
        return outcome, record

    def _log_backoff(self, retry_state: RetryCallState) -> None:
        logger.warning(
            "submission_backoff",
            attempt=retry_state.attempt_number,
            outcome=retry_state.outcome.result().value,  # type: ignore[union-attr]
            wait=retry_state.next_action.sleep,  # type: ignore[union-attr]
        )

    async def submit(self, payload: SubmissionPayload, iteration: int) -> SubmissionResult:
        """
        Submit a payload, retrying while the relayer throttles us.

        Args:
            payload: Payload to send
            iteration: Run iteration number, used to tag attempt records

        Returns:
            SubmissionResult. Its outcome is ACCEPTED, REJECTED, or EXHAUSTED
            when every attempt was rate limited or failed in transit.
        """
        body = payload.to_json()
        records: list[AttemptRecord] = []
        outcome = SubmissionOutcome.EXHAUSTED

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=lambda _state: self.backoff.draw(),
            retry=retry_if_result(lambda o: o.retryable),
            sleep=self.backoff.sleep,
            before_sleep=self._log_backoff,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    outcome, record = await self._attempt(
                        body,
                        iteration,
                        attempt.retry_state.attempt_number,
                    )
                    records.append(record)
                if not attempt.retry_state.outcome.failed:  # type: ignore[union-attr]
                    attempt.retry_state.set_result(outcome)
        except RetryError:
            logger.warning(
                "submission_exhausted",
                iteration=iteration,
                attempts=len(records),
                last_outcome=outcome.value,
            )
            outcome = SubmissionOutcome.EXHAUSTED

        return SubmissionResult(iteration=iteration, outcome=outcome, attempts=records)
