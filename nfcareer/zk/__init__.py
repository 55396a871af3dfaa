"""
ZK-SNARK Integration Module
===========================

Python bindings for Groth16 credential threshold proofs (age, TOEIC, GPA).

Usage:
    from nfcareer.zk import CircuitId, CredentialProver, CredentialVerifier

    # Generate a proof
    prover = CredentialProver()
    result = await prover.generate(CircuitId.TOEIC, private_value=850, public_threshold=800)

    # Verify proof
    verifier = CredentialVerifier()
    is_valid = await verifier.verify(result.circuit_id, result.proof, result.public_signals)

Version: 0.1.0
"""

from nfcareer.zk.circuits import (
    CIRCUITS,
    CircuitId,
    CircuitSpec,
    get_circuit,
    is_vacuous_threshold,
)
from nfcareer.zk.errors import (
    MalformedProofError,
    MissingAssetError,
    ProvingError,
    ToolchainError,
    ZKError,
)
from nfcareer.zk.models import Groth16Proof, ProofResult, VerificationResult
from nfcareer.zk.prover import CredentialProver
from nfcareer.zk.snarkjs import SnarkjsCLI
from nfcareer.zk.verifier import CredentialVerifier


__all__ = [
    # Circuits
    "CIRCUITS",
    "CircuitId",
    "CircuitSpec",
    "get_circuit",
    "is_vacuous_threshold",
    # Prover / Verifier
    "CredentialProver",
    "CredentialVerifier",
    "SnarkjsCLI",
    # Models
    "Groth16Proof",
    "ProofResult",
    "VerificationResult",
    # Errors
    "ZKError",
    "MissingAssetError",
    "ProvingError",
    "MalformedProofError",
    "ToolchainError",
]
