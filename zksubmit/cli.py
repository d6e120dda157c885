"""
zksubmit command line
=====================

Usage:
    zksubmit setup
    zksubmit run [--iterations N] [--api-key KEY]

``run`` prompts for the API key and the number of submissions when they are
neither given as options nor configured (RELAYER_API_KEY).

Exit codes:
    0   every iteration was accepted by the relayer
    1   fatal error (configuration, prover, malformed artifact, setup)
    2   the run finished but some iterations were not accepted
    130 interrupted
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

from pydantic import ValidationError

from zksubmit import __version__
from zksubmit.config import Settings, get_settings
from zksubmit.exceptions import ConfigurationError, ZkSubmitError
from zksubmit.logging import get_logger, setup_logging
from zksubmit.pipeline import AuditLog, Pacer, RunReport, SubmissionPipeline
from zksubmit.relayer import RelayerSubmitter
from zksubmit.zk import (
    CircuitSetup,
    InputGenerator,
    PayloadBuilder,
    SnarkjsBackend,
    load_verification_key,
)


logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2
EXIT_INTERRUPTED = 130


def exit_code_for(report: RunReport) -> int:
    """Map a finished run to the process exit code."""
    return EXIT_OK if report.all_accepted else EXIT_PARTIAL


def _prompt(message: str, secret: bool = False) -> str:
    if not sys.stdin.isatty():
        return ""
    value = getpass.getpass(message) if secret else input(message)
    return value.strip()


def resolve_run_arguments(args: argparse.Namespace, settings: Settings) -> tuple[str, int]:
    """
    Work out the API key and iteration count, prompting when missing.

    Raises:
        ConfigurationError: If either value is missing or invalid
    """
    api_key = args.api_key
    if not api_key and settings.relayer.has_api_key:
        api_key = settings.relayer.api_key.get_secret_value()
    if not api_key:
        api_key = _prompt("🔐 Enter your API key: ", secret=True)

    iterations = args.iterations
    if iterations is None:
        raw = _prompt("🔢 How many submissions to generate? ")
        if raw:
            try:
                iterations = int(raw)
            except ValueError as e:
                raise ConfigurationError(f"Not a number: {raw!r}") from e

    if not api_key or iterations is None:
        raise ConfigurationError("Missing API key or submission count!")
    if iterations < 0:
        raise ConfigurationError("Submission count must be >= 0")

    return api_key, iterations


async def run_submissions(settings: Settings, api_key: str, iterations: int) -> RunReport:
    """Wire the pipeline from settings and run it."""
    vk = load_verification_key(settings.circuit.verification_key_path)

    backend = SnarkjsBackend.from_settings(settings.circuit)
    builder = PayloadBuilder(vk)
    audit_log = AuditLog(settings.audit_log_path)
    backoff = Pacer(settings.pacing.retry_delay_min, settings.pacing.retry_delay_max)
    pacer = Pacer(settings.pacing.iteration_delay_min, settings.pacing.iteration_delay_max)
    inputs = InputGenerator(settings.circuit.input_min, settings.circuit.input_max)

    async with RelayerSubmitter(
        base_url=settings.relayer.base_url,
        api_key=api_key,
        backoff=backoff,
        audit_log=audit_log,
        max_attempts=settings.relayer.max_attempts,
        timeout_seconds=settings.relayer.timeout_seconds,
    ) as submitter:
        pipeline = SubmissionPipeline(
            backend=backend,
            builder=builder,
            submitter=submitter,
            input_generator=inputs,
            pacer=pacer,
            payload_path=settings.payload_path,
        )
        return await pipeline.run(iterations)


def print_report(report: RunReport, audit_log_path: Path) -> None:
    print()
    print(f"Completed {report.completed}/{report.requested} iterations, "
          f"{report.accepted} accepted")
    for result in report.results:
        if not result.succeeded:
            print(f"  ⚠️  iteration {result.iteration}: {result.outcome.value} "
                  f"after {result.attempt_count} attempt(s)")
    if report.all_accepted:
        print(f"🎉 Done. All results saved in {audit_log_path}")
    else:
        print(f"❌ Some submissions were not accepted. See {audit_log_path}")


def cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    if args.audit_log:
        settings = settings.model_copy(update={"audit_log_path": Path(args.audit_log)})

    api_key, iterations = resolve_run_arguments(args, settings)
    try:
        report = asyncio.run(run_submissions(settings, api_key, iterations))
    except ZkSubmitError as e:
        if e.report is not None:
            print(f"Completed {e.report.completed}/{e.report.requested} iterations "
                  f"before the run was aborted. See {settings.audit_log_path}")
        raise
    print_report(report, settings.audit_log_path)
    return exit_code_for(report)


def cmd_setup(args: argparse.Namespace, settings: Settings) -> int:
    setup = CircuitSetup(settings.circuit)
    vk_path = asyncio.run(setup.run(overwrite_source=args.overwrite))
    print(f"✅ Verification key written to {vk_path}")
    print()
    print(f"💡 Note: to avoid duplicate submissions, change the circuit "
          f"({settings.circuit.source_path}) to your own unique circuit!")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zksubmit",
        description="Generate Groth16 proofs and submit them to a proof relayer",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Generate and submit proofs")
    run.add_argument("--iterations", "-n", type=int, help="Number of submissions")
    run.add_argument("--api-key", help="Relayer API key (default: RELAYER_API_KEY)")
    run.add_argument("--audit-log", help="Attempt log path (default: submit.log)")
    run.set_defaults(handler=cmd_run)

    setup = subparsers.add_parser("setup", help="Compile the circuit and run the trusted setup")
    setup.add_argument("--overwrite", action="store_true",
                       help="Rewrite the circuit source even if it exists")
    setup.set_defaults(handler=cmd_setup)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"❌ Invalid configuration: {e}")
        return EXIT_FATAL

    setup_logging(settings.log_level.value, settings.json_logs)

    try:
        return args.handler(args, settings)
    except ZkSubmitError as e:
        logger.error("fatal_error", error_type=type(e).__name__, error=str(e))
        print(f"❌ {e}")
        return EXIT_FATAL
    except KeyboardInterrupt:
        print("\nInterrupted")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
