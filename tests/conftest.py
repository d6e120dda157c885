"""
Test Configuration
==================

Pytest fixtures for zksubmit tests.
"""

import random
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from zksubmit.zk.models import CircuitInput, ProofArtifact
from zksubmit.zk.prover import ProofBackend


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class StaticProofBackend(ProofBackend):
    """Backend returning a canned artifact and counting calls."""

    def __init__(self, artifact: ProofArtifact) -> None:
        self.artifact = artifact
        self.inputs: list[CircuitInput] = []
        self.proofs = 0

    async def compute_witness(self, circuit_input: CircuitInput) -> Path:
        self.inputs.append(circuit_input)
        return Path("witness.wtns")

    async def generate_proof(self, witness_path: Path) -> ProofArtifact:
        self.proofs += 1
        return self.artifact


class ScriptedRelayer:
    """
    Mock transport handler replaying scripted responses.

    Each entry is ``(status_code, body)`` or an exception instance to raise.
    The last entry repeats once the script runs out.
    """

    def __init__(self, script: list[Any]) -> None:
        self.script = list(script)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.script)) - 1
        entry = self.script[index]
        if isinstance(entry, Exception):
            raise entry
        status_code, body = entry
        return httpx.Response(status_code, text=body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def sample_proof() -> dict[str, Any]:
    """snarkjs-style Groth16 proof with a mix of strings and big integers."""
    return {
        "pi_a": [
            "16981219372413327431412394384018393581018339013894012379416793141243413423413",
            12345678901234567890123456789012345678901234567890,
            "1",
        ],
        "pi_b": [
            ["1098712398741239871239847123", 2198723198479812374982734987],
            ["3", "4"],
            ["1", "0"],
        ],
        "pi_c": ["415", 161, "1"],
        "protocol": "groth16",
        "curve": "bn128",
    }


@pytest.fixture
def sample_public_signals() -> list[Any]:
    return ["1", 7]


@pytest.fixture
def sample_verification_key() -> dict[str, Any]:
    return {
        "protocol": "groth16",
        "curve": "bn128",
        "nPublic": 1,
        "vk_alpha_1": ["1", "2", "1"],
        "vk_beta_2": [["1", "2"], ["3", "4"], ["1", "0"]],
        "IC": [["5", "6", "1"], ["7", "8", "1"]],
    }


@pytest.fixture
def sample_artifact(sample_proof: dict[str, Any], sample_public_signals: list[Any]) -> ProofArtifact:
    return ProofArtifact(proof=sample_proof, public_signals=sample_public_signals)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def static_backend(sample_artifact: ProofArtifact) -> StaticProofBackend:
    return StaticProofBackend(sample_artifact)


@pytest.fixture
def scripted_relayer() -> Callable[[list[Any]], ScriptedRelayer]:
    """Factory for scripted relayer transports."""
    return ScriptedRelayer


@pytest.fixture
def sleep_recorder() -> type[RecordingSleep]:
    """Factory for independent sleep recorders."""
    return RecordingSleep
