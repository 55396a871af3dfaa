"""
ZK Proof Generation Routes
==========================

API endpoints for proving a private value against a public threshold.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from nfcareer.logging import get_logger
from nfcareer.zk import CircuitId, CredentialProver, get_circuit
from services.credential_proofs.dependencies import get_prover
from services.credential_proofs.errors import HANDLED_ERRORS, to_http_exception


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class ProveRequest(BaseModel):
    """Request to prove `private_value >= public_threshold`."""

    private_value: float = Field(..., description="Private value (age, TOEIC score or GPA)")
    public_threshold: float | None = Field(
        None, description="Minimum required value; absent or 0 is vacuous"
    )

    model_config = {
        "json_schema_extra": {"examples": [{"private_value": 850, "public_threshold": 800}]}
    }


class ProofResponse(BaseModel):
    """Response containing a generated proof."""

    success: bool
    circuit_id: CircuitId
    proof: dict[str, Any] | None
    public_signals: list[str]
    skipped: bool
    satisfied: bool | None
    proving_time_ms: int
    proof_digest: str


# ============================================================================
# Proof Generation Endpoints
# ============================================================================


@router.post("/{circuit}", response_model=ProofResponse)
async def generate_proof(
    circuit: str,
    request: ProveRequest,
    prover: CredentialProver = Depends(get_prover),
) -> ProofResponse:
    """
    Generate a Groth16 proof for one circuit.

    The proof is produced whether or not the threshold is met; the outcome
    is the second public signal. The private value never appears in the
    response.

    Args:
        circuit: Circuit name (age, toeic, degree)
        request: Private value and public threshold

    Returns:
        ProofResponse with `public_signals == [threshold, satisfied]`
    """
    try:
        spec = get_circuit(circuit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    logger.info(
        "generating_proof",
        circuit=spec.name,
        threshold=request.public_threshold,
    )

    try:
        result = await prover.generate(
            spec.circuit_id,
            private_value=request.private_value,
            public_threshold=request.public_threshold or 0,
        )
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e

    return ProofResponse(
        success=True,
        circuit_id=result.circuit_id,
        proof=result.proof.model_dump() if result.proof else None,
        public_signals=result.public_signals,
        skipped=result.skipped,
        satisfied=None if result.skipped else result.satisfied_bit == 1,
        proving_time_ms=result.proving_time_ms,
        proof_digest=result.digest(),
    )
