"""
Circuit Setup
=============

One-time circuit compilation and Groth16 trusted setup.

Everything here shells out to circom and snarkjs; the toolchain itself
(Rust, circom 2.x, snarkjs, circomlib) must already be installed.

Version: 0.1.0
"""

import asyncio
import secrets
import shlex
import shutil
import subprocess
from pathlib import Path

from zksubmit.config import CircuitSettings
from zksubmit.exceptions import SetupError, ToolchainMissing
from zksubmit.logging import get_logger


logger = get_logger(__name__)


# Outputs in_range = 1 iff 5 <= x <= 15
IN_RANGE_CIRCUIT = """\
pragma circom 2.0.0;
include "../node_modules/circomlib/circuits/comparators.circom";

template InRange() {
    signal input x;
    signal output in_range;

    component ge = GreaterEqThan(8);
    ge.in[0] <== x;
    ge.in[1] <== 5;

    component le = LessEqThan(8);
    le.in[0] <== x;
    le.in[1] <== 15;

    in_range <== ge.out * le.out;
}

component main = InRange();
"""


class CircuitSetup:
    """
    Compiles the circuit and produces its proving and verification keys.

    Usage:
        setup = CircuitSetup(settings.circuit)
        vk_path = await setup.run()
    """

    def __init__(self, circuit: CircuitSettings, entropy: str | None = None) -> None:
        self.circuit = circuit
        self._snarkjs = shlex.split(circuit.snarkjs_bin)
        self._circom = shlex.split(circuit.circom_bin)
        self._entropy = entropy or secrets.token_hex(32)

    def _ptau(self, stage: str) -> Path:
        return self.circuit.keys_dir / f"pot{self.circuit.ptau_power}_{stage}.ptau"

    def check_toolchain(self) -> None:
        """
        Ensure circom and snarkjs can be found.

        Raises:
            ToolchainMissing: If either tool is not on PATH
        """
        for tool in (self._circom[0], self._snarkjs[0]):
            if shutil.which(tool) is None:
                raise ToolchainMissing(f"{tool} not found on PATH")

    def write_circuit(self, overwrite: bool = False) -> Path:
        """Write the default InRange circuit unless a source already exists."""
        path = self.circuit.source_path
        if path.exists() and not overwrite:
            logger.info("circuit_source_exists", path=str(path))
            return path

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(IN_RANGE_CIRCUIT)
        logger.info("circuit_source_written", path=str(path))
        return path

    async def _run(self, cmd: list[str], step: str) -> None:
        logger.info("setup_step_started", step=step)
        try:
            result = await asyncio.to_thread(
                subprocess.run,
                cmd,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise ToolchainMissing(f"{cmd[0]} not found") from e

        if result.returncode != 0:
            logger.error("setup_step_failed", step=step, stderr=result.stderr)
            detail = (result.stderr or result.stdout).strip()
            raise SetupError(f"{step} failed: {detail}")

    async def compile(self) -> Path:
        """Compile the circuit to R1CS, WASM and symbols."""
        self.circuit.build_dir.mkdir(parents=True, exist_ok=True)
        await self._run(
            [
                *self._circom,
                str(self.circuit.source_path),
                "--r1cs",
                "--wasm",
                "--sym",
                "-o",
                str(self.circuit.build_dir),
            ],
            step="compile",
        )
        return self.circuit.r1cs_path

    async def trusted_setup(self) -> Path:
        """
        Run the powers of tau ceremony and Groth16 key generation.

        Returns:
            Path of the exported verification key
        """
        self.circuit.keys_dir.mkdir(parents=True, exist_ok=True)
        initial, contributed, final = self._ptau("0000"), self._ptau("0001"), self._ptau("final")

        await self._run(
            [*self._snarkjs, "powersoftau", "new", "bn128", str(self.circuit.ptau_power), str(initial)],
            step="powersoftau_new",
        )
        await self._run(
            [
                *self._snarkjs,
                "powersoftau",
                "contribute",
                str(initial),
                str(contributed),
                "--name=zksubmit",
                f"-e={self._entropy}",
            ],
            step="powersoftau_contribute",
        )
        await self._run(
            [*self._snarkjs, "powersoftau", "prepare", "phase2", str(contributed), str(final)],
            step="powersoftau_prepare",
        )
        await self._run(
            [
                *self._snarkjs,
                "groth16",
                "setup",
                str(self.circuit.r1cs_path),
                str(final),
                str(self.circuit.zkey_path),
            ],
            step="groth16_setup",
        )
        await self._run(
            [
                *self._snarkjs,
                "zkey",
                "export",
                "verificationkey",
                str(self.circuit.zkey_path),
                str(self.circuit.verification_key_path),
            ],
            step="export_verification_key",
        )
        return self.circuit.verification_key_path

    async def run(self, overwrite_source: bool = False) -> Path:
        """Check the toolchain, then write, compile and set up the circuit."""
        self.check_toolchain()
        self.write_circuit(overwrite=overwrite_source)
        await self.compile()
        vk_path = await self.trusted_setup()
        logger.info(
            "circuit_setup_complete",
            zkey=str(self.circuit.zkey_path),
            verification_key=str(vk_path),
        )
        return vk_path
