"""
Proof Verification Routes
=========================

API endpoints for verifying proofs and whole disclosures.
"""

import time
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from nfcareer.disclosure import DisclosureRecord, DisclosureVerification, verify_disclosure
from nfcareer.logging import get_logger
from nfcareer.storage import DisclosureStore
from nfcareer.zk import CredentialVerifier
from services.credential_proofs.dependencies import get_store, get_verifier
from services.credential_proofs.errors import HANDLED_ERRORS, to_http_exception
from services.credential_proofs.routes.disclosures import get_stored_disclosure


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class VerifyProofRequest(BaseModel):
    """Request to verify a single proof."""

    circuit: str = Field(..., description="Circuit name: age, toeic or degree")
    proof: dict[str, Any] = Field(..., description="The proof object")
    public_signals: list[str] = Field(..., description="[threshold, satisfied]")
    verification_key: dict[str, Any] | None = Field(
        None, description="Explicit key; defaults to the provisioned one"
    )


class VerifyProofResponse(BaseModel):
    """Response from proof verification."""

    valid: bool
    circuit: str
    verification_time_ms: int
    public_signals: list[str]
    message: str


# ============================================================================
# Verification Endpoints
# ============================================================================


@router.post("/proof", response_model=VerifyProofResponse)
async def verify_proof(
    request: VerifyProofRequest,
    verifier: CredentialVerifier = Depends(get_verifier),
) -> VerifyProofResponse:
    """
    Verify a proof against the public signals it claims.

    A well-formed but invalid proof returns `valid: false`; a structurally
    broken one is a 400.
    """
    start_time = time.perf_counter()
    try:
        is_valid = await verifier.verify(
            request.circuit,
            request.proof,
            request.public_signals,
            request.verification_key,
        )
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e
    verification_time_ms = int((time.perf_counter() - start_time) * 1000)

    return VerifyProofResponse(
        valid=is_valid,
        circuit=request.circuit,
        verification_time_ms=verification_time_ms,
        public_signals=request.public_signals,
        message="Proof is valid" if is_valid else "Proof verification failed",
    )


@router.post("/disclosure", response_model=DisclosureVerification)
async def verify_disclosure_record(
    record: DisclosureRecord,
    verifier: CredentialVerifier = Depends(get_verifier),
) -> DisclosureVerification:
    """Re-verify every condition in a disclosure record."""
    try:
        return await verify_disclosure(record, verifier)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e


@router.get("/disclosures/{proof_id}", response_model=DisclosureVerification)
async def verify_stored_disclosure(
    proof_id: str,
    store: DisclosureStore = Depends(get_store),
    verifier: CredentialVerifier = Depends(get_verifier),
) -> DisclosureVerification:
    """Re-verify a stored disclosure by its proof id."""
    entry = await get_stored_disclosure(store, proof_id)
    try:
        return await verify_disclosure(entry.record, verifier)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e
