"""
Unit Tests for Payload Building
===============================

Tests for ZK models, the payload builder and verification key loading.
"""

import json

import pytest

from zksubmit.exceptions import ConfigurationError, MalformedArtifact
from zksubmit.zk.models import CircuitInput, ProofArtifact, to_decimal_string
from zksubmit.zk.payload import PayloadBuilder, load_verification_key


def _all_leaves(value):
    if isinstance(value, list):
        for item in value:
            yield from _all_leaves(item)
    else:
        yield value


class TestDecimalStrings:
    """Tests for field element stringification."""

    def test_big_integer_keeps_every_digit(self):
        value = 2**254 + 12345
        assert to_decimal_string(value) == str(value)

    def test_decimal_string_is_kept(self):
        assert to_decimal_string("0042") == "0042"

    @pytest.mark.parametrize("value", [1.5, True, None, "12a", "", {"x": 1}])
    def test_rejects_non_decimal(self, value):
        with pytest.raises(ValueError):
            to_decimal_string(value)


class TestCircuitInput:
    def test_input_document(self):
        assert CircuitInput(x=7).to_document() == {"x": 7}

    def test_input_is_immutable(self):
        circuit_input = CircuitInput(x=7)
        with pytest.raises(Exception):
            circuit_input.x = 8


class TestPayloadBuilder:
    """Tests for the payload builder."""

    def test_fixed_metadata(self, sample_artifact, sample_verification_key):
        wire = PayloadBuilder(sample_verification_key).build(sample_artifact).to_wire()

        assert wire["proofType"] == "groth16"
        assert wire["vkRegistered"] is False
        assert wire["proofOptions"] == {"library": "snarkjs", "curve": "bn128"}

    def test_proof_groups_are_stringified(self, sample_artifact, sample_verification_key):
        wire = PayloadBuilder(sample_verification_key).build(sample_artifact).to_wire()
        proof = wire["proofData"]["proof"]

        assert set(proof) == {"pi_a", "pi_b", "pi_c"}
        assert proof["pi_a"][1] == "12345678901234567890123456789012345678901234567890"
        assert proof["pi_c"] == ["415", "161", "1"]
        for leaf in _all_leaves([proof["pi_a"], proof["pi_b"], proof["pi_c"]]):
            assert isinstance(leaf, str)

    def test_pairs_stay_nested(self, sample_artifact, sample_verification_key):
        wire = PayloadBuilder(sample_verification_key).build(sample_artifact).to_wire()
        pi_b = wire["proofData"]["proof"]["pi_b"]

        assert pi_b == [
            ["1098712398741239871239847123", "2198723198479812374982734987"],
            ["3", "4"],
            ["1", "0"],
        ]

    def test_public_signals_keep_order(self, sample_proof, sample_verification_key):
        artifact = ProofArtifact(proof=sample_proof, public_signals=[9, "1", 5, "0"])
        wire = PayloadBuilder(sample_verification_key).build(artifact).to_wire()

        assert wire["proofData"]["publicSignals"] == ["9", "1", "5", "0"]

    def test_verification_key_embedded_verbatim(self, sample_artifact, sample_verification_key):
        wire = PayloadBuilder(sample_verification_key).build(sample_artifact).to_wire()

        assert wire["proofData"]["vk"] == sample_verification_key

    def test_builder_does_not_alias_verification_key(self, sample_artifact, sample_verification_key):
        builder = PayloadBuilder(sample_verification_key)
        sample_verification_key["nPublic"] = 99

        wire = builder.build(sample_artifact).to_wire()
        assert wire["proofData"]["vk"]["nPublic"] == 1

    def test_build_is_deterministic(self, sample_artifact, sample_verification_key):
        builder = PayloadBuilder(sample_verification_key)

        first = builder.build(sample_artifact).to_json()
        second = builder.build(sample_artifact).to_json()
        assert first == second

    def test_json_has_no_bare_numbers_in_proof_data(self, sample_artifact, sample_verification_key):
        body = PayloadBuilder(sample_verification_key).build(sample_artifact).to_json()
        decoded = json.loads(body)

        proof = decoded["proofData"]["proof"]
        for leaf in _all_leaves([proof["pi_a"], proof["pi_b"], proof["pi_c"]]):
            assert isinstance(leaf, str)
        assert all(isinstance(s, str) for s in decoded["proofData"]["publicSignals"])

    def test_custom_proof_options(self, sample_artifact, sample_verification_key):
        builder = PayloadBuilder(sample_verification_key, library="gnark", curve="bls12381")
        wire = builder.build(sample_artifact).to_wire()

        assert wire["proofOptions"] == {"library": "gnark", "curve": "bls12381"}

    def test_missing_group_is_malformed(self, sample_proof, sample_verification_key):
        del sample_proof["pi_c"]
        artifact = ProofArtifact(proof=sample_proof, public_signals=["1"])

        with pytest.raises(MalformedArtifact, match="pi_c"):
            PayloadBuilder(sample_verification_key).build(artifact)

    def test_unpaired_pi_b_is_malformed(self, sample_proof, sample_verification_key):
        sample_proof["pi_b"] = ["1", "2", "3"]
        artifact = ProofArtifact(proof=sample_proof, public_signals=["1"])

        with pytest.raises(MalformedArtifact):
            PayloadBuilder(sample_verification_key).build(artifact)

    def test_float_coordinate_is_malformed(self, sample_proof, sample_verification_key):
        sample_proof["pi_a"] = [1.5e30, "2", "1"]
        artifact = ProofArtifact(proof=sample_proof, public_signals=["1"])

        with pytest.raises(MalformedArtifact):
            PayloadBuilder(sample_verification_key).build(artifact)

    def test_non_list_signals_are_malformed(self, sample_proof, sample_verification_key):
        artifact = ProofArtifact.model_construct(proof=sample_proof, public_signals="1")

        with pytest.raises(MalformedArtifact):
            PayloadBuilder(sample_verification_key).build(artifact)


class TestLoadVerificationKey:
    def test_loads_json_object(self, tmp_path, sample_verification_key):
        path = tmp_path / "verification_key.json"
        path.write_text(json.dumps(sample_verification_key))

        assert load_verification_key(path) == sample_verification_key

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_verification_key(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "verification_key.json"
        path.write_text("{not json")

        with pytest.raises(MalformedArtifact):
            load_verification_key(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / "verification_key.json"
        path.write_text("[1, 2]")

        with pytest.raises(MalformedArtifact, match="JSON object"):
            load_verification_key(path)
