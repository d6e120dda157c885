"""
ZK-SNARK Data Models
====================

Pydantic models for circuit inputs, prover artifacts and the relayer
submission payload.

Version: 0.1.0
"""

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


_DECIMAL = re.compile(r"-?\d+")


def to_decimal_string(value: Any) -> str:
    """
    Convert a field element to its decimal string form.

    Integers of any size and decimal strings are accepted. Floats and
    booleans are rejected because they cannot carry a field element
    without losing precision.
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"expected integer or decimal string, got {type(value).__name__}")
    text = str(value)
    if not _DECIMAL.fullmatch(text):
        raise ValueError(f"not a decimal value: {text!r}")
    return text


class CircuitInput(BaseModel):
    """Input document for the InRange circuit."""

    model_config = ConfigDict(frozen=True)

    x: int

    def to_document(self) -> dict[str, int]:
        """Input document consumed by witness computation."""
        return {"x": self.x}


class ProofArtifact(BaseModel):
    """
    Raw prover output.

    ``proof`` is snarkjs' proof.json as loaded, ``public_signals`` is
    public.json. Both are treated as opaque until the payload is built.
    """

    model_config = ConfigDict(frozen=True)

    proof: dict[str, Any]
    public_signals: list[Any]


class Groth16Proof(BaseModel):
    """
    A Groth16 proof with every coordinate as a decimal string.

    Compatible with the snarkjs proof format.
    """

    model_config = ConfigDict(frozen=True)

    # Proof points (G1, G2 and G1 elements)
    pi_a: list[str] = Field(..., min_length=1, description="Proof point A (G1)")
    pi_b: list[list[str]] = Field(..., min_length=1, description="Proof point B (G2)")
    pi_c: list[str] = Field(..., min_length=1, description="Proof point C (G1)")

    @field_validator("pi_a", "pi_c", mode="before")
    @classmethod
    def stringify_group(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            raise ValueError("expected a flat list of coordinates")
        return [to_decimal_string(item) for item in v]

    @field_validator("pi_b", mode="before")
    @classmethod
    def stringify_pairs(cls, v: Any) -> list[list[str]]:
        if not isinstance(v, list):
            raise ValueError("expected a list of coordinate pairs")
        pairs = []
        for pair in v:
            if not isinstance(pair, list) or len(pair) != 2:
                raise ValueError("pi_b entries must be pairs")
            pairs.append([to_decimal_string(item) for item in pair])
        return pairs


class ProofOptions(BaseModel):
    """Proving scheme identifiers expected by the relayer."""

    model_config = ConfigDict(frozen=True)

    library: str = "snarkjs"
    curve: str = "bn128"


class ProofData(BaseModel):
    """Proof, public signals and verification key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    proof: Groth16Proof
    public_signals: list[str] = Field(..., alias="publicSignals")
    vk: dict[str, Any]

    @field_validator("public_signals", mode="before")
    @classmethod
    def stringify_signals(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            raise ValueError("public signals must be a list")
        return [to_decimal_string(item) for item in v]


class SubmissionPayload(BaseModel):
    """Canonical document posted to the relayer's submit-proof endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    proof_type: Literal["groth16"] = Field(default="groth16", alias="proofType")
    vk_registered: bool = Field(default=False, alias="vkRegistered")
    proof_options: ProofOptions = Field(default_factory=ProofOptions, alias="proofOptions")
    proof_data: ProofData = Field(..., alias="proofData")

    def to_wire(self) -> dict[str, Any]:
        """Convert to the camelCase dict sent over the wire."""
        return self.model_dump(by_alias=True, mode="json")

    def to_json(self, indent: int | None = None) -> str:
        """Serialize for the request body."""
        return self.model_dump_json(by_alias=True, indent=indent)
