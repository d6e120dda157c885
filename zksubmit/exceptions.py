"""
Exceptions
==========

Error taxonomy for the submission pipeline.

Rate limiting, network failures and endpoint rejections are not exceptions:
they are submission outcomes handled by the relayer client.
"""

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from zksubmit.pipeline.runner import RunReport


class ZkSubmitError(Exception):
    """
    Base class for all zksubmit errors.

    When raised out of a pipeline run, ``report`` holds the iterations
    that completed before the abort.
    """

    report: "RunReport | None" = None


class ConfigurationError(ZkSubmitError):
    """Missing or invalid configuration (API key, key files, bounds)."""


class ProverFailure(ZkSubmitError):
    """Witness computation or proof generation failed."""


class MalformedArtifact(ZkSubmitError):
    """Prover output or verification key does not have the expected shape."""


class SetupError(ZkSubmitError):
    """Circuit compilation or trusted setup failed."""


class ToolchainMissing(SetupError):
    """A required external tool (circom, snarkjs) is not installed."""
