"""
Unit Tests for ZK-SNARK Prover
==============================

Tests for proof generation through the snarkjs wrapper.

Version: 0.1.0
"""

import json
import subprocess
from pathlib import Path

import pytest

from nfcareer.zk import (
    CircuitId,
    CredentialProver,
    Groth16Proof,
    MissingAssetError,
    ProofResult,
    ProvingError,
    ToolchainError,
)
from nfcareer.zk.snarkjs import SnarkjsCLI
from tests.fakes import FakeSnarkjs, fake_proof


class TestZKModels:
    """Tests for ZK data models."""

    def test_groth16_proof_accepts_snarkjs_json(self):
        """A snarkjs proof.json loads as-is."""
        proof = Groth16Proof(**fake_proof("toeic", ["800", "1"]))

        assert proof.protocol == "groth16"
        assert proof.curve == "bn128"
        assert len(proof.pi_b) == 3

    def test_groth16_proof_rejects_bad_shape(self):
        """Points with the wrong number of coordinates are rejected."""
        data = fake_proof("toeic", ["800", "1"])
        data["pi_a"] = ["1", "2"]

        with pytest.raises(ValueError, match="3 coordinates"):
            Groth16Proof(**data)

    def test_groth16_proof_rejects_non_decimal(self):
        """Coordinates must be decimal strings."""
        data = fake_proof("toeic", ["800", "1"])
        data["pi_c"] = ["0x1", "2", "1"]

        with pytest.raises(ValueError, match="decimal"):
            Groth16Proof(**data)

    def test_groth16_proof_rejects_other_protocols(self):
        data = fake_proof("toeic", ["800", "1"])
        data["protocol"] = "plonk"

        with pytest.raises(ValueError, match="Unsupported proof protocol"):
            Groth16Proof(**data)

    def test_skipped_result_has_no_proof(self):
        result = ProofResult.skipped_for(CircuitId.DEGREE)

        assert result.skipped is True
        assert result.proof is None
        assert result.public_signals == []
        assert result.threshold_signal is None
        assert result.satisfied_bit is None

    def test_digest_is_stable(self):
        """Digest depends on proof and signals, not on timing fields."""
        proof = Groth16Proof(**fake_proof("toeic", ["800", "1"]))
        a = ProofResult(circuit_id=CircuitId.TOEIC, proof=proof, public_signals=["800", "1"], proving_time_ms=5)
        b = ProofResult(circuit_id=CircuitId.TOEIC, proof=proof, public_signals=["800", "1"], proving_time_ms=9)
        c = ProofResult(circuit_id=CircuitId.TOEIC, proof=proof, public_signals=["800", "0"])

        assert a.digest() == b.digest()
        assert a.digest() != c.digest()
        assert a.digest().startswith("0x")


class TestCredentialProver:
    """Tests for the credential prover."""

    @pytest.mark.asyncio
    async def test_toeic_above_threshold(self, prover: CredentialProver):
        """850 against 800 proves satisfied."""
        result = await prover.generate(CircuitId.TOEIC, 850, 800)

        assert result.public_signals == ["800", "1"]
        assert result.skipped is False
        assert result.proof is not None

    @pytest.mark.asyncio
    async def test_toeic_below_threshold_still_proves(self, prover: CredentialProver):
        """750 against 800 yields a valid proof of the failed comparison."""
        result = await prover.prove_toeic(750, 800)

        assert result.public_signals == ["800", "0"]
        assert result.proof is not None

    @pytest.mark.asyncio
    async def test_equal_value_is_satisfied(self, prover: CredentialProver):
        result = await prover.prove_age(20, 20)

        assert result.public_signals == ["20", "1"]

    @pytest.mark.asyncio
    async def test_degree_scales_gpa(self, prover: CredentialProver, fake_snarkjs: FakeSnarkjs):
        """GPA is sent to the circuit multiplied by 100."""
        result = await prover.prove_degree(3.8, 3.5)

        assert result.public_signals == ["350", "1"]

    @pytest.mark.asyncio
    async def test_degree_zero_threshold_is_skipped(
        self, prover: CredentialProver, fake_snarkjs: FakeSnarkjs
    ):
        """A zero GPA minimum returns a skipped result without proving."""
        result = await prover.prove_degree(3.8, 0)

        assert result.skipped is True
        assert result.proof is None
        assert result.public_signals == []
        assert fake_snarkjs.prove_calls == 0

    @pytest.mark.asyncio
    async def test_degree_absent_threshold_is_skipped(self, prover: CredentialProver):
        result = await prover.generate("degree", 3.8, None)

        assert result.skipped is True

    @pytest.mark.asyncio
    async def test_toeic_zero_threshold_is_proved(self, prover: CredentialProver):
        """Only the degree circuit skips vacuous thresholds."""
        result = await prover.generate(CircuitId.TOEIC, 850, 0)

        assert result.skipped is False
        assert result.public_signals == ["0", "1"]

    @pytest.mark.asyncio
    async def test_generation_is_repeatable(self, prover: CredentialProver):
        """Same inputs give the same public signals."""
        first = await prover.generate(CircuitId.AGE, 30, 18)
        second = await prover.generate(CircuitId.AGE, 30, 18)

        assert first.public_signals == second.public_signals == ["18", "1"]

    @pytest.mark.asyncio
    async def test_private_value_not_in_output(self, prover: CredentialProver):
        result = await prover.generate(CircuitId.TOEIC, 853, 800)

        assert "853" not in result.public_signals
        assert "score" not in result.model_dump()

    @pytest.mark.asyncio
    async def test_unknown_circuit(self, prover: CredentialProver):
        with pytest.raises(ProvingError, match="Unknown circuit"):
            await prover.generate("salary", 100, 50)

    @pytest.mark.asyncio
    async def test_out_of_range_value(self, prover: CredentialProver):
        """Values beyond the circuit bit width are refused before proving."""
        with pytest.raises(ProvingError, match="out of range"):
            await prover.prove_toeic(1200, 800)

        with pytest.raises(ProvingError, match="out of range"):
            await prover.prove_age(-1, 18)

    @pytest.mark.asyncio
    async def test_out_of_range_error_hides_witness(self, prover: CredentialProver):
        with pytest.raises(ProvingError) as exc_info:
            await prover.prove_degree(10.5, 3.0)

        message = str(exc_info.value)
        assert "[0, 1023]" in message
        assert "1050" not in message
        assert "10.5" not in message

    @pytest.mark.asyncio
    async def test_out_of_range_threshold_is_reported(self, prover: CredentialProver):
        """Thresholds are public, so the rejected value may be named."""
        with pytest.raises(ProvingError, match="1200 not in"):
            await prover.prove_toeic(850, 1200)

    @pytest.mark.asyncio
    async def test_non_numeric_value(self, prover: CredentialProver):
        with pytest.raises(ProvingError, match="numeric"):
            await prover.generate(CircuitId.TOEIC, "850", 800)

        with pytest.raises(ProvingError, match="numeric"):
            await prover.generate(CircuitId.TOEIC, True, 800)

    @pytest.mark.asyncio
    async def test_prove_inputs_checks_names(self, prover: CredentialProver):
        """Input names must match the circuit schema exactly."""
        with pytest.raises(ProvingError, match="missing"):
            await prover.prove_inputs(CircuitId.TOEIC, {"score": 850})

        with pytest.raises(ProvingError, match="unexpected"):
            await prover.prove_inputs(CircuitId.TOEIC, {"score": 850, "minScore": 800, "salt": 1})

    @pytest.mark.asyncio
    async def test_prove_inputs_with_circuit_names(self, prover: CredentialProver):
        result = await prover.prove_inputs(CircuitId.DEGREE, {"gpa": 3.456, "minGpa": 3.0})

        assert result.public_signals == ["300", "1"]

    @pytest.mark.asyncio
    async def test_missing_wasm(self, prover: CredentialProver, build_dir: Path):
        (build_dir / "toeic.wasm").unlink()

        with pytest.raises(MissingAssetError, match="WASM"):
            await prover.prove_toeic(850, 800)

    @pytest.mark.asyncio
    async def test_missing_zkey(self, prover: CredentialProver, build_dir: Path):
        (build_dir / "age.zkey").unlink()

        with pytest.raises(MissingAssetError, match="Proving key"):
            await prover.prove_age(30, 18)

    @pytest.mark.asyncio
    async def test_missing_asset_is_file_not_found(self, prover: CredentialProver, build_dir: Path):
        (build_dir / "toeic.wasm").unlink()

        with pytest.raises(FileNotFoundError):
            await prover.prove_toeic(850, 800)

    @pytest.mark.asyncio
    async def test_snarkjs_failure(self, build_dir: Path):
        """A failing fullprove surfaces as ProvingError."""

        class FailingSnarkjs(FakeSnarkjs):
            def _fullprove(self, args, *paths):
                return subprocess.CompletedProcess(args, 1, "", "Error: Assert Failed.")

        prover = CredentialProver(build_dir=build_dir, snarkjs=FailingSnarkjs())

        with pytest.raises(ProvingError, match="Assert Failed"):
            await prover.prove_toeic(850, 800)

    @pytest.mark.asyncio
    async def test_corrupt_snarkjs_output(self, build_dir: Path):
        """Unparseable proof files surface as ProvingError."""

        class TruncatingSnarkjs(FakeSnarkjs):
            def _fullprove(self, args, input_path, wasm_path, zkey_path, proof_path, public_path):
                result = super()._fullprove(args, input_path, wasm_path, zkey_path, proof_path, public_path)
                Path(proof_path).write_text('{"pi_a": [')
                return result

        prover = CredentialProver(build_dir=build_dir, snarkjs=TruncatingSnarkjs())

        with pytest.raises(ProvingError, match="unreadable proof"):
            await prover.prove_toeic(850, 800)

    @pytest.mark.asyncio
    async def test_missing_public_signals_file(self, build_dir: Path):
        class ForgetfulSnarkjs(FakeSnarkjs):
            def _fullprove(self, args, input_path, wasm_path, zkey_path, proof_path, public_path):
                result = super()._fullprove(args, input_path, wasm_path, zkey_path, proof_path, public_path)
                Path(public_path).unlink()
                return result

        prover = CredentialProver(build_dir=build_dir, snarkjs=ForgetfulSnarkjs())

        with pytest.raises(ProvingError):
            await prover.prove_age(30, 18)

    @pytest.mark.asyncio
    async def test_snarkjs_not_installed(self, build_dir: Path):
        """A missing executable is a toolchain error, not a proving error."""
        snarkjs = SnarkjsCLI(command=["nfcareer-no-such-snarkjs-binary"])
        prover = CredentialProver(build_dir=build_dir, snarkjs=snarkjs)

        with pytest.raises(ToolchainError):
            await prover.prove_toeic(850, 800)

    @pytest.mark.asyncio
    async def test_writes_field_inputs(self, prover: CredentialProver, fake_snarkjs: FakeSnarkjs):
        """The input file holds integers named after the circuit signals."""
        captured: dict = {}
        original = fake_snarkjs._fullprove

        def capture(args, input_path, *rest):
            captured.update(json.loads(Path(input_path).read_text()))
            return original(args, input_path, *rest)

        fake_snarkjs._fullprove = capture
        await prover.prove_degree(3.8, 3.0)

        assert captured == {"gpa": 380, "minGpa": 300}
