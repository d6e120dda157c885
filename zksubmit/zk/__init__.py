"""
ZK-SNARK Module
===============

Circuit inputs, proof backends and relayer payloads.

Usage:
    from zksubmit.zk import InputGenerator, PayloadBuilder, SnarkjsBackend

    backend = SnarkjsBackend(wasm_path, zkey_path)
    artifact = await backend.prove(InputGenerator().generate())
    payload = PayloadBuilder(vk).build(artifact)

Version: 0.1.0
"""

from zksubmit.zk.inputs import InputGenerator
from zksubmit.zk.models import (
    CircuitInput,
    Groth16Proof,
    ProofArtifact,
    ProofData,
    ProofOptions,
    SubmissionPayload,
)
from zksubmit.zk.payload import PayloadBuilder, load_verification_key
from zksubmit.zk.prover import ProofBackend, SnarkjsBackend
from zksubmit.zk.setup import CircuitSetup


__all__ = [
    # Inputs
    "InputGenerator",
    "CircuitInput",
    # Proving
    "ProofBackend",
    "SnarkjsBackend",
    "ProofArtifact",
    # Payload
    "PayloadBuilder",
    "load_verification_key",
    "SubmissionPayload",
    "Groth16Proof",
    "ProofData",
    "ProofOptions",
    # Setup
    "CircuitSetup",
]
