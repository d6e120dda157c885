"""
Submission Pipeline
===================

The run loop: for each iteration, generate an input, prove it, build the
payload, submit it (retries handled by the submitter) and pause before the
next iteration. Iterations never overlap.

Version: 0.1.0
"""

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from zksubmit.exceptions import ZkSubmitError
from zksubmit.logging import bind_context, clear_context, get_logger
from zksubmit.pipeline.pacing import Pacer
from zksubmit.relayer.models import SubmissionResult
from zksubmit.zk.inputs import InputGenerator
from zksubmit.zk.payload import PayloadBuilder
from zksubmit.zk.prover import ProofBackend


if TYPE_CHECKING:
    from zksubmit.relayer.client import RelayerSubmitter


logger = get_logger(__name__)


class RunReport(BaseModel):
    """Summary of a pipeline run."""

    requested: int = Field(..., ge=0)
    results: list[SubmissionResult] = Field(default_factory=list)

    @property
    def completed(self) -> int:
        return len(self.results)

    @property
    def accepted(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def failed_iterations(self) -> list[int]:
        return [r.iteration for r in self.results if not r.succeeded]

    @property
    def all_accepted(self) -> bool:
        return self.completed == self.requested and not self.failed_iterations


class SubmissionPipeline:
    """
    Sequential prove-and-submit loop.

    Prover and payload errors abort the run. A payload the relayer never
    accepted (rejected or retries exhausted) is reported and the run moves
    on to the next iteration.

    Usage:
        pipeline = SubmissionPipeline(backend, builder, submitter)
        report = await pipeline.run(10)
    """

    def __init__(
        self,
        backend: ProofBackend,
        builder: PayloadBuilder,
        submitter: "RelayerSubmitter",
        input_generator: InputGenerator | None = None,
        pacer: Pacer | None = None,
        payload_path: str | Path | None = None,
    ) -> None:
        self.backend = backend
        self.builder = builder
        self.submitter = submitter
        self.input_generator = input_generator or InputGenerator()
        self.pacer = pacer or Pacer(60, 120)
        self.payload_path = Path(payload_path) if payload_path else None

    async def run_iteration(self, iteration: int) -> SubmissionResult:
        """Generate, prove, build and submit one payload."""
        circuit_input = self.input_generator.generate()
        logger.info("input_generated", x=circuit_input.x)

        artifact = await self.backend.prove(circuit_input)
        payload = self.builder.build(artifact)

        if self.payload_path is not None:
            self.payload_path.write_text(payload.to_json(indent=2))

        result = await self.submitter.submit(payload, iteration)
        logger.info(
            "iteration_submitted",
            outcome=result.outcome.value,
            attempts=result.attempt_count,
        )
        return result

    async def run(self, iterations: int) -> RunReport:
        """
        Run the pipeline.

        Args:
            iterations: Number of proofs to generate and submit

        Returns:
            RunReport with one result per iteration

        Raises:
            ProverFailure: If witness or proof generation fails
            MalformedArtifact: If the prover output cannot be turned into a payload

            Either carries the partial RunReport as ``report``.
        """
        if iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {iterations}")

        report = RunReport(requested=iterations)

        try:
            for i in range(1, iterations + 1):
                bind_context(iteration=i)
                logger.info("iteration_started", total=iterations)

                try:
                    result = await self.run_iteration(i)
                except ZkSubmitError as e:
                    logger.error(
                        "run_aborted",
                        completed=report.completed,
                        requested=iterations,
                        error=str(e),
                    )
                    e.report = report
                    raise

                report.results.append(result)

                delay = await self.pacer.wait()
                logger.info("iteration_paced", delay_seconds=delay)
        finally:
            clear_context()

        logger.info(
            "run_finished",
            completed=report.completed,
            requested=report.requested,
            accepted=report.accepted,
            failed_iterations=report.failed_iterations,
        )
        return report
