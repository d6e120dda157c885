"""
ZK-SNARK Proof Generation
=========================

Proof backends for the submission pipeline.

``SnarkjsBackend`` drives the snarkjs CLI via subprocess: it computes the
witness from the compiled circuit and then produces a Groth16 proof from
the proving key. Alternative backends implement ``ProofBackend``.

Version: 0.1.0
"""

import asyncio
import json
import shlex
import subprocess
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from zksubmit.config import CircuitSettings
from zksubmit.exceptions import MalformedArtifact, ProverFailure
from zksubmit.logging import get_logger
from zksubmit.zk.models import CircuitInput, ProofArtifact


logger = get_logger(__name__)


class ProofBackend(ABC):
    """
    Capability interface for proof generation.

    Both steps are blocking from the caller's point of view and are not
    retried: any failure raises ``ProverFailure``.
    """

    @abstractmethod
    async def compute_witness(self, circuit_input: CircuitInput) -> Path:
        """
        Compute the witness for an input.

        Returns:
            Path of the witness file
        """
        ...

    @abstractmethod
    async def generate_proof(self, witness_path: Path) -> ProofArtifact:
        """
        Produce a proof from a witness.

        Returns:
            ProofArtifact with the proof and its public signals
        """
        ...

    async def prove(self, circuit_input: CircuitInput) -> ProofArtifact:
        """Compute the witness and prove it."""
        witness_path = await self.compute_witness(circuit_input)
        return await self.generate_proof(witness_path)


class SnarkjsBackend(ProofBackend):
    """
    snarkjs-based Groth16 prover.

    Usage:
        backend = SnarkjsBackend.from_settings(settings.circuit)
        artifact = await backend.prove(CircuitInput(x=7))
    """

    def __init__(
        self,
        wasm_path: str | Path,
        zkey_path: str | Path,
        work_dir: str | Path = ".",
        snarkjs_bin: str = "snarkjs",
    ) -> None:
        """
        Initialize the backend.

        Args:
            wasm_path: Witness generator produced by circom --wasm
            zkey_path: Groth16 proving key
            work_dir: Directory holding input/, witness/ and proofs/
            snarkjs_bin: snarkjs command, may include a launcher ("npx snarkjs")
        """
        self.wasm_path = Path(wasm_path)
        self.zkey_path = Path(zkey_path)
        self.work_dir = Path(work_dir)
        self._command = shlex.split(snarkjs_bin)

    @classmethod
    def from_settings(cls, circuit: CircuitSettings) -> "SnarkjsBackend":
        return cls(
            wasm_path=circuit.wasm_path,
            zkey_path=circuit.zkey_path,
            work_dir=circuit.work_dir,
            snarkjs_bin=circuit.snarkjs_bin,
        )

    @property
    def input_path(self) -> Path:
        return self.work_dir / "input" / "input.json"

    @property
    def witness_path(self) -> Path:
        return self.work_dir / "witness" / "witness.wtns"

    @property
    def proof_path(self) -> Path:
        return self.work_dir / "proofs" / "proof.json"

    @property
    def public_path(self) -> Path:
        return self.work_dir / "proofs" / "public.json"

    async def _run_snarkjs(self, *args: str) -> None:
        """Run a snarkjs subcommand, raising ProverFailure on error."""
        cmd = [*self._command, *args]
        start_time = time.time()

        try:
            result = await asyncio.to_thread(
                subprocess.run,
                cmd,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise ProverFailure(f"snarkjs not found: {self._command[0]}") from e

        elapsed_ms = int((time.time() - start_time) * 1000)

        if result.returncode != 0:
            logger.error(
                "snarkjs_command_failed",
                command=args[:2],
                returncode=result.returncode,
                stderr=result.stderr,
            )
            detail = (result.stderr or result.stdout).strip()
            raise ProverFailure(f"snarkjs {' '.join(args[:2])} failed: {detail}")

        logger.debug("snarkjs_command_completed", command=args[:2], elapsed_ms=elapsed_ms)

    async def compute_witness(self, circuit_input: CircuitInput) -> Path:
        if not self.wasm_path.exists():
            raise ProverFailure(f"Circuit WASM not found: {self.wasm_path}")

        self.input_path.parent.mkdir(parents=True, exist_ok=True)
        self.witness_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.input_path, "w") as f:
            json.dump(circuit_input.to_document(), f)

        await self._run_snarkjs(
            "wtns",
            "calculate",
            str(self.wasm_path),
            str(self.input_path),
            str(self.witness_path),
        )
        return self.witness_path

    async def generate_proof(self, witness_path: Path) -> ProofArtifact:
        if not self.zkey_path.exists():
            raise ProverFailure(f"Proving key not found: {self.zkey_path}")

        self.proof_path.parent.mkdir(parents=True, exist_ok=True)

        start_time = time.time()
        await self._run_snarkjs(
            "groth16",
            "prove",
            str(self.zkey_path),
            str(witness_path),
            str(self.proof_path),
            str(self.public_path),
        )
        proving_time_ms = int((time.time() - start_time) * 1000)

        proof = self._read_output(self.proof_path)
        public_signals = self._read_output(self.public_path)

        if not isinstance(proof, dict):
            raise MalformedArtifact(f"Proof must be a JSON object: {self.proof_path}")
        if not isinstance(public_signals, list):
            raise MalformedArtifact(f"Public signals must be a JSON array: {self.public_path}")

        logger.info(
            "zk_proof_generated",
            proving_time_ms=proving_time_ms,
            public_signals=len(public_signals),
        )
        return ProofArtifact(proof=proof, public_signals=public_signals)

    @staticmethod
    def _read_output(path: Path) -> Any:
        if not path.exists():
            raise ProverFailure(f"snarkjs did not produce {path}")
        try:
            with open(path) as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise MalformedArtifact(f"Cannot parse {path}: {e}") from e
