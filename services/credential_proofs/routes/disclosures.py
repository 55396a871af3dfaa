"""
Selective Disclosure Routes
===========================

Build, store and fetch disclosures. The public half is readable by anyone
holding the proof id; the private half only by the owning wallet.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from nfcareer.disclosure import DisclosureService, PrivateDisclosure
from nfcareer.logging import bind_context, get_logger
from nfcareer.storage import (
    CredentialRepository,
    DisclosureStore,
    StoredDisclosure,
    normalize_wallet,
)
from services.credential_proofs.dependencies import (
    get_credential_repository,
    get_disclosure_service,
    get_store,
)
from services.credential_proofs.errors import HANDLED_ERRORS, to_http_exception
from services.credential_proofs.routes.conditions import CredentialSource, resolve_credentials


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class CreateDisclosureRequest(CredentialSource):
    """Request to build and store a disclosure."""

    wallet_address: str = Field(..., min_length=1, description="Owner of the disclosure")
    conditions: dict[str, float | None] | list[dict[str, Any]]
    disclose: list[str] | None = Field(
        None, description="Conditions to include; defaults to every satisfied one"
    )
    reveal: list[str] = Field(default_factory=list, description="Attributes to show in plain text")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "wallet_address": "0xabc",
                    "conditions": {"minToeicScore": 800, "minGpa": 3.0},
                    "disclose": ["minToeicScore"],
                    "reveal": ["university"],
                }
            ]
        }
    }


class DisclosureListResponse(BaseModel):
    wallet_address: str
    disclosures: list[StoredDisclosure]


async def get_stored_disclosure(store: DisclosureStore, proof_id: str) -> StoredDisclosure:
    entry = await store.get_public(proof_id)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Disclosure not found: {proof_id}",
        )
    return entry


# ============================================================================
# Endpoints
# ============================================================================


@router.post("", response_model=StoredDisclosure, status_code=status.HTTP_201_CREATED)
async def create_disclosure(
    request: CreateDisclosureRequest,
    service: DisclosureService = Depends(get_disclosure_service),
    repository: CredentialRepository = Depends(get_credential_repository),
    store: DisclosureStore = Depends(get_store),
) -> StoredDisclosure:
    """
    Evaluate conditions, prove the selected ones, and store the result.

    Returns the public entry, including the new proof id.
    """
    bind_context(wallet=normalize_wallet(request.wallet_address))
    credentials = await resolve_credentials(request, repository)

    try:
        package = await service.create(
            credentials,
            request.conditions,
            disclose=request.disclose,
            reveal=request.reveal,
        )
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e

    entry = await store.save(request.wallet_address, package)
    bind_context(proof_id=entry.proof_id)
    return entry


@router.get("", response_model=DisclosureListResponse)
async def list_disclosures(
    wallet_address: str = Query(..., min_length=1),
    store: DisclosureStore = Depends(get_store),
) -> DisclosureListResponse:
    """List a wallet's disclosures, newest first."""
    return DisclosureListResponse(
        wallet_address=normalize_wallet(wallet_address),
        disclosures=await store.list_for_wallet(wallet_address),
    )


@router.get("/{proof_id}", response_model=StoredDisclosure)
async def get_disclosure(
    proof_id: str,
    store: DisclosureStore = Depends(get_store),
) -> StoredDisclosure:
    """Fetch the public half of a disclosure."""
    return await get_stored_disclosure(store, proof_id)


@router.get("/{proof_id}/full", response_model=PrivateDisclosure)
async def get_full_disclosure(
    proof_id: str,
    wallet_address: str = Query(..., min_length=1, description="Owner wallet"),
    store: DisclosureStore = Depends(get_store),
) -> PrivateDisclosure:
    """
    Fetch the private half, witness values included.

    Only the wallet that created the disclosure may read it.
    """
    bind_context(proof_id=proof_id, wallet=normalize_wallet(wallet_address))
    entry = await get_stored_disclosure(store, proof_id)
    if entry.wallet_address != normalize_wallet(wallet_address):
        logger.warning("private_disclosure_denied", proof_id=proof_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Disclosure belongs to another wallet",
        )

    private = await store.get_private(proof_id)
    if private is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Private disclosure data not found: {proof_id}",
        )
    return private
