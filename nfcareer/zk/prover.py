"""
ZK-SNARK Proof Generation
=========================

Python wrapper for generating Groth16 credential threshold proofs.

Uses snarkjs via subprocess. The compiled circuit (`<name>.wasm`) and the
proving key (`<name>.zkey`) are produced offline and must be present in
the build directory before the first call.

Version: 0.1.0
"""

import json
import tempfile
import time
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from nfcareer.config import get_settings
from nfcareer.logging import get_logger
from nfcareer.zk.circuits import (
    CircuitId,
    CircuitSpec,
    get_circuit,
    is_vacuous_threshold,
)
from nfcareer.zk.errors import MissingAssetError, ProvingError
from nfcareer.zk.models import Groth16Proof, ProofResult
from nfcareer.zk.snarkjs import SnarkjsCLI


logger = get_logger(__name__)


class CredentialProver:
    """
    Groth16 proof generator for credential thresholds.

    Usage:
        prover = CredentialProver()

        result = await prover.generate(CircuitId.TOEIC, private_value=850, public_threshold=800)
        result.public_signals  # ["800", "1"]
    """

    def __init__(
        self,
        build_dir: str | Path | None = None,
        snarkjs: SnarkjsCLI | None = None,
    ):
        """
        Initialize the prover.

        Args:
            build_dir: Path to circuit build directory.
                      Defaults to the configured ZKP_BUILD_DIR.
            snarkjs: snarkjs wrapper (a default CLI wrapper if omitted)
        """
        self.build_dir = Path(build_dir) if build_dir else get_settings().zk.build_dir
        self.snarkjs = snarkjs or SnarkjsCLI()
        self._validate_setup()

    def _validate_setup(self) -> None:
        """Warn early when the build directory has not been provisioned."""
        if not self.build_dir.exists():
            logger.warning(
                "zk_circuit_build_dir_not_found",
                path=str(self.build_dir),
            )

    def _resolve(self, circuit: CircuitId | str) -> CircuitSpec:
        try:
            return get_circuit(circuit)
        except ValueError as e:
            raise ProvingError(str(e)) from e

    def _proving_assets(self, spec: CircuitSpec) -> tuple[Path, Path]:
        wasm_path = self.build_dir / spec.wasm_file
        zkey_path = self.build_dir / spec.zkey_file

        if not wasm_path.exists():
            raise MissingAssetError(f"Circuit WASM not found: {wasm_path}")
        if not zkey_path.exists():
            raise MissingAssetError(f"Proving key not found: {zkey_path}")
        return wasm_path, zkey_path

    async def prove_inputs(
        self,
        circuit: CircuitId | str,
        inputs: Mapping[str, Any],
    ) -> ProofResult:
        """
        Prove a circuit from named inputs.

        Args:
            circuit: Circuit id or name
            inputs: Mapping of circuit signal name to value, in domain units

        Returns:
            ProofResult with `public_signals == [threshold, satisfied]`

        Raises:
            ProvingError: If the inputs do not match the circuit schema
            MissingAssetError: If the wasm or zkey file is missing
        """
        spec = self._resolve(circuit)
        field_inputs = spec.check_inputs(inputs)
        wasm_path, zkey_path = self._proving_assets(spec)

        with tempfile.TemporaryDirectory(prefix=f"nfc-{spec.name}-") as tmp:
            work_dir = Path(tmp)
            input_file = work_dir / "input.json"
            proof_file = work_dir / "proof.json"
            public_file = work_dir / "public.json"

            with open(input_file, "w") as f:
                json.dump(field_inputs, f)

            start_time = time.perf_counter()
            await self.snarkjs.fullprove(input_file, wasm_path, zkey_path, proof_file, public_file)
            proving_time_ms = int((time.perf_counter() - start_time) * 1000)

            try:
                with open(proof_file) as f:
                    proof_json = json.load(f)
                with open(public_file) as f:
                    public_signals = json.load(f)

                result = ProofResult(
                    circuit_id=spec.circuit_id,
                    proof=Groth16Proof(**proof_json),
                    public_signals=[str(s) for s in public_signals],
                    proving_time_ms=proving_time_ms,
                )
            except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
                raise ProvingError(
                    f"snarkjs returned an unreadable proof for '{spec.name}': {e}"
                ) from e

        if len(result.public_signals) != spec.public_signal_count:
            raise ProvingError(
                f"Circuit '{spec.name}' produced {len(result.public_signals)} public signals, "
                f"expected {spec.public_signal_count}"
            )

        logger.info(
            "zk_proof_generated",
            circuit=spec.name,
            proving_time_ms=proving_time_ms,
            public_signals=result.public_signals,
        )
        return result

    async def generate(
        self,
        circuit: CircuitId | str,
        private_value: Any,
        public_threshold: Any,
    ) -> ProofResult:
        """
        Generate a proof that `private_value >= public_threshold`.

        The proof is produced whether or not the comparison holds; the
        outcome is the second public signal. On circuits that skip vacuous
        thresholds (degree), a zero or absent threshold returns a skipped
        result without touching the proving assets.
        """
        spec = self._resolve(circuit)

        if spec.skips_vacuous_threshold and is_vacuous_threshold(public_threshold):
            logger.info("zk_proof_skipped", circuit=spec.name, reason="vacuous_threshold")
            return ProofResult.skipped_for(spec.circuit_id)

        return await self.prove_inputs(
            spec.circuit_id,
            spec.circuit_inputs(private_value, public_threshold),
        )

    async def prove_age(self, age: int, min_age: int) -> ProofResult:
        """Prove a whole-year age against a minimum age."""
        return await self.generate(CircuitId.AGE, age, min_age)

    async def prove_toeic(self, score: int, min_score: int) -> ProofResult:
        """Prove a TOEIC score (0-990) against a minimum score."""
        return await self.generate(CircuitId.TOEIC, score, min_score)

    async def prove_degree(self, gpa: float, min_gpa: float) -> ProofResult:
        """Prove a GPA against a minimum GPA. A zero minimum is skipped."""
        return await self.generate(CircuitId.DEGREE, gpa, min_gpa)
