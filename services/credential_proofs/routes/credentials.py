"""
Credential Routes
=================

Register a holder's credentials and list them by wallet.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from nfcareer.credentials import VerifiableCredential
from nfcareer.logging import get_logger
from nfcareer.storage import CredentialRepository, normalize_wallet
from services.credential_proofs.dependencies import get_credential_repository
from services.credential_proofs.errors import HANDLED_ERRORS, to_http_exception


logger = get_logger(__name__)
router = APIRouter()


class AddCredentialRequest(BaseModel):
    """Attach a credential (simple or W3C format) to a wallet."""

    wallet_address: str = Field(..., min_length=1)
    credential: dict[str, Any]


class CredentialListResponse(BaseModel):
    wallet_address: str
    credentials: list[VerifiableCredential]


@router.post("", response_model=VerifiableCredential, response_model_by_alias=True)
async def add_credential(
    request: AddCredentialRequest,
    repository: CredentialRepository = Depends(get_credential_repository),
) -> VerifiableCredential:
    """Store a credential for a wallet and return it in simple format."""
    try:
        credential = await repository.add(request.wallet_address, request.credential)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e

    logger.info(
        "credential_registered",
        wallet=normalize_wallet(request.wallet_address),
        credential_id=credential.id,
        type=credential.type,
    )
    return credential


@router.get("", response_model=CredentialListResponse, response_model_by_alias=True)
async def list_credentials(
    wallet_address: str = Query(..., min_length=1),
    repository: CredentialRepository = Depends(get_credential_repository),
) -> CredentialListResponse:
    """List the credentials held by a wallet."""
    credentials = await repository.list_for_wallet(wallet_address)
    return CredentialListResponse(
        wallet_address=normalize_wallet(wallet_address),
        credentials=credentials,
    )
