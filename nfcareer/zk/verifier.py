"""
ZK-SNARK Proof Verification
===========================

Verify Groth16 credential proofs off-chain with snarkjs.

Only the verification key (`<name>.vkey.json`) is needed, so this module
can run at a verifying party that never sees the proving key. Verification
is a pure function of (circuit, proof, public signals, key).

Version: 0.1.0
"""

import json
import tempfile
import time
from pathlib import Path
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from nfcareer.config import get_settings
from nfcareer.logging import get_logger
from nfcareer.zk.circuits import CircuitId, CircuitSpec, get_circuit
from nfcareer.zk.errors import MalformedProofError, MissingAssetError
from nfcareer.zk.models import Groth16Proof, ProofResult, VerificationResult
from nfcareer.zk.snarkjs import SnarkjsCLI


logger = get_logger(__name__)


def _coerce_proof(proof: Groth16Proof | Mapping[str, Any] | None) -> Groth16Proof:
    if proof is None:
        raise MalformedProofError("No proof supplied (skipped results carry no proof)")
    if isinstance(proof, Groth16Proof):
        return proof
    if not isinstance(proof, Mapping):
        raise MalformedProofError(f"Proof must be an object, got {type(proof).__name__}")
    try:
        return Groth16Proof.model_validate(dict(proof))
    except ValidationError as e:
        raise MalformedProofError(f"Malformed proof: {e}") from e


def _coerce_signals(spec: CircuitSpec, public_signals: Sequence[Any]) -> list[str]:
    if isinstance(public_signals, (str, bytes)) or not isinstance(public_signals, Sequence):
        raise MalformedProofError("Public signals must be a list")
    if len(public_signals) != spec.public_signal_count:
        raise MalformedProofError(
            f"Circuit '{spec.name}' has {spec.public_signal_count} public signals, "
            f"got {len(public_signals)}"
        )

    signals = []
    for signal in public_signals:
        if isinstance(signal, bool):
            raise MalformedProofError(f"Non-numeric public signal: {signal!r}")
        if isinstance(signal, int) and signal >= 0:
            signals.append(str(signal))
        elif isinstance(signal, str) and signal.isdigit():
            signals.append(signal)
        else:
            raise MalformedProofError(f"Non-numeric public signal: {signal!r}")
    return signals


class CredentialVerifier:
    """
    Groth16 proof verifier.

    Verification keys are read once per circuit and cached; they are
    immutable after the offline setup so the cache needs no locking.
    """

    def __init__(
        self,
        build_dir: str | Path | None = None,
        snarkjs: SnarkjsCLI | None = None,
    ):
        """
        Initialize the verifier.

        Args:
            build_dir: Directory holding `<circuit>.vkey.json` files
            snarkjs: snarkjs wrapper (a default CLI wrapper if omitted)
        """
        self.build_dir = Path(build_dir) if build_dir else get_settings().zk.build_dir
        self.snarkjs = snarkjs or SnarkjsCLI()
        self._keys: dict[CircuitId, dict[str, Any]] = {}

    def _resolve(self, circuit: CircuitId | str) -> CircuitSpec:
        try:
            return get_circuit(circuit)
        except ValueError as e:
            raise MalformedProofError(str(e)) from e

    def load_verification_key(self, circuit: CircuitId | str) -> dict[str, Any]:
        """
        Load (and cache) the verification key for a circuit.

        Raises:
            MissingAssetError: If the key file is not provisioned
        """
        spec = self._resolve(circuit)
        if spec.circuit_id not in self._keys:
            vkey_path = self.build_dir / spec.vkey_file
            if not vkey_path.exists():
                raise MissingAssetError(f"Verification key not found: {vkey_path}")
            with open(vkey_path) as f:
                self._keys[spec.circuit_id] = json.load(f)
        return self._keys[spec.circuit_id]

    async def verify(
        self,
        circuit: CircuitId | str,
        proof: Groth16Proof | Mapping[str, Any] | None,
        public_signals: Sequence[Any],
        verification_key: Mapping[str, Any] | None = None,
    ) -> bool:
        """
        Verify a proof against the public signals it claims.

        Args:
            circuit: Circuit the proof was generated for
            proof: Groth16 proof (model or snarkjs JSON object)
            public_signals: `[threshold, satisfied]` as decimal strings
            verification_key: Explicit key; defaults to the circuit's key file

        Returns:
            True if valid, False for a well-formed but invalid proof

        Raises:
            MalformedProofError: On structurally invalid input
        """
        spec = self._resolve(circuit)
        groth16_proof = _coerce_proof(proof)
        signals = _coerce_signals(spec, public_signals)

        if verification_key is None:
            vkey = self.load_verification_key(spec.circuit_id)
        elif isinstance(verification_key, Mapping):
            vkey = dict(verification_key)
        else:
            raise MalformedProofError("Verification key must be a JSON object")

        n_public = vkey.get("nPublic")
        if n_public is not None and n_public != spec.public_signal_count:
            raise MalformedProofError(
                f"Verification key expects {n_public} public signals, "
                f"circuit '{spec.name}' has {spec.public_signal_count}"
            )

        with tempfile.TemporaryDirectory(prefix=f"nfc-verify-{spec.name}-") as tmp:
            work_dir = Path(tmp)
            vkey_file = work_dir / "verification_key.json"
            proof_file = work_dir / "proof.json"
            public_file = work_dir / "public.json"

            with open(vkey_file, "w") as f:
                json.dump(vkey, f)
            with open(proof_file, "w") as f:
                json.dump(groth16_proof.model_dump(), f)
            with open(public_file, "w") as f:
                json.dump(signals, f)

            is_valid = await self.snarkjs.verify(vkey_file, public_file, proof_file)

        logger.info(
            "zk_proof_verified",
            circuit=spec.name,
            valid=is_valid,
        )
        return is_valid

    async def verify_result(
        self,
        result: ProofResult,
        verification_key: Mapping[str, Any] | None = None,
    ) -> VerificationResult:
        """
        Verify a ProofResult and report timing.

        A skipped result is reported as `valid=True, skipped=True`; callers
        that need cryptographic assurance must check `skipped`.
        """
        if result.skipped:
            return VerificationResult(circuit_id=result.circuit_id, valid=True, skipped=True)

        start_time = time.perf_counter()
        is_valid = await self.verify(
            result.circuit_id,
            result.proof,
            result.public_signals,
            verification_key,
        )
        verification_time_ms = int((time.perf_counter() - start_time) * 1000)

        return VerificationResult(
            circuit_id=result.circuit_id,
            valid=is_valid,
            verification_time_ms=verification_time_ms,
            error=None if is_valid else "Proof verification failed",
        )
