"""
zksubmit
========

Automated Groth16 proof generation and relayer submission.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - zk: Circuit inputs, snarkjs proving backend, payload building, circuit setup
    - relayer: Relayer submission client with bounded retry
    - pipeline: Pacing, audit log and the submission run loop

Version: 0.1.0
"""

__version__ = "0.1.0"

from zksubmit.exceptions import (
    ConfigurationError,
    MalformedArtifact,
    ProverFailure,
    SetupError,
    ZkSubmitError,
)


__all__ = [
    "ZkSubmitError",
    "ConfigurationError",
    "ProverFailure",
    "MalformedArtifact",
    "SetupError",
    "__version__",
]
