"""
Payload Builder
===============

Turns a snarkjs proof artifact and the circuit's verification key into the
relayer submission document.

Version: 0.1.0
"""

import json
from copy import deepcopy
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from zksubmit.exceptions import ConfigurationError, MalformedArtifact
from zksubmit.logging import get_logger
from zksubmit.zk.models import (
    Groth16Proof,
    ProofArtifact,
    ProofData,
    ProofOptions,
    SubmissionPayload,
)


logger = get_logger(__name__)


def load_verification_key(path: str | Path) -> dict[str, Any]:
    """
    Load a verification key exported by ``snarkjs zkey export verificationkey``.

    Raises:
        ConfigurationError: If the file does not exist
        MalformedArtifact: If the file is not a JSON object
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Verification key not found: {path}")

    try:
        with open(path) as f:
            vk = json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedArtifact(f"Verification key is not valid JSON: {path}: {e}") from e

    if not isinstance(vk, dict):
        raise MalformedArtifact(f"Verification key must be a JSON object: {path}")

    logger.info(
        "verification_key_loaded",
        path=str(path),
        protocol=vk.get("protocol"),
        curve=vk.get("curve"),
        n_public=vk.get("nPublic"),
    )
    return vk


class PayloadBuilder:
    """
    Builds submission payloads against a fixed verification key.

    The key is copied once at construction and shared read-only by every
    payload built afterwards.

    Usage:
        builder = PayloadBuilder(load_verification_key("keys/verification_key.json"))
        payload = builder.build(artifact)
    """

    def __init__(
        self,
        verification_key: dict[str, Any],
        library: str = "snarkjs",
        curve: str = "bn128",
    ) -> None:
        self._vk = deepcopy(verification_key)
        self._options = ProofOptions(library=library, curve=curve)

    def build(self, artifact: ProofArtifact) -> SubmissionPayload:
        """
        Build the payload for one proof.

        Args:
            artifact: Proof and public signals from the prover

        Returns:
            SubmissionPayload with every coordinate and signal as a decimal string

        Raises:
            MalformedArtifact: If the proof is missing a group or has the wrong shape
        """
        missing = [k for k in ("pi_a", "pi_b", "pi_c") if k not in artifact.proof]
        if missing:
            raise MalformedArtifact(f"Proof is missing fields: {', '.join(missing)}")

        try:
            proof = Groth16Proof(
                pi_a=artifact.proof["pi_a"],
                pi_b=artifact.proof["pi_b"],
                pi_c=artifact.proof["pi_c"],
            )
            proof_data = ProofData(
                proof=proof,
                public_signals=artifact.public_signals,
                vk=deepcopy(self._vk),
            )
        except ValidationError as e:
            raise MalformedArtifact(f"Unexpected proof artifact shape: {e}") from e

        return SubmissionPayload(
            proof_options=self._options,
            proof_data=proof_data,
        )
