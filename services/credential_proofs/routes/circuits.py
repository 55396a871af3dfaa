"""
Circuit Routes
==============

Circuit catalogue and verification key distribution.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from nfcareer.logging import get_logger
from nfcareer.zk import CIRCUITS, CredentialProver, CredentialVerifier, get_circuit
from services.credential_proofs.dependencies import get_prover, get_verifier
from services.credential_proofs.errors import HANDLED_ERRORS, to_http_exception


logger = get_logger(__name__)
router = APIRouter()


class CircuitInfo(BaseModel):
    """Input schema and provisioning state of one circuit."""

    circuit_id: str
    private_input: str
    threshold_input: str
    bits: int
    scale: int
    public_signals: list[str]
    proving_assets: bool
    verification_key: bool


@router.get("", response_model=list[CircuitInfo])
async def list_circuits(
    prover: CredentialProver = Depends(get_prover),
    verifier: CredentialVerifier = Depends(get_verifier),
) -> list[CircuitInfo]:
    """List the circuits and whether their assets are provisioned."""
    return [
        CircuitInfo(
            circuit_id=spec.name,
            private_input=spec.witness_signal,
            threshold_input=spec.threshold_signal,
            bits=spec.bits,
            scale=spec.scale,
            public_signals=["threshold", "satisfied"],
            proving_assets=(prover.build_dir / spec.wasm_file).exists()
            and (prover.build_dir / spec.zkey_file).exists(),
            verification_key=(verifier.build_dir / spec.vkey_file).exists(),
        )
        for spec in CIRCUITS.values()
    ]


@router.get("/{circuit}/verification-key")
async def get_verification_key(
    circuit: str,
    verifier: CredentialVerifier = Depends(get_verifier),
) -> dict[str, Any]:
    """
    Return a circuit's verification key so parties can verify offline.
    """
    try:
        spec = get_circuit(circuit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    try:
        return verifier.load_verification_key(spec.circuit_id)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e
