"""
Condition Matching Routes
=========================

Evaluate job conditions against a holder's credentials. Only outcomes are
returned, never the credential values behind them.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from nfcareer.credentials import ConditionMatcher, ConditionResult, VerifiableCredential
from nfcareer.logging import get_logger
from nfcareer.storage import CredentialRepository
from services.credential_proofs.dependencies import get_credential_repository, get_matcher
from services.credential_proofs.errors import HANDLED_ERRORS, to_http_exception


logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class CredentialSource(BaseModel):
    """Credentials given inline, or looked up by wallet address."""

    credentials: list[dict[str, Any]] | None = Field(
        None, description="Credentials in simple or W3C format"
    )
    wallet_address: str | None = Field(None, description="Wallet whose stored credentials to use")


class EvaluateRequest(CredentialSource):
    """Request to evaluate conditions."""

    conditions: dict[str, float | None] | list[dict[str, Any]] = Field(
        ...,
        description="{name: threshold} or [{name, threshold}]",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "wallet_address": "0xabc",
                    "conditions": {"minToeicScore": 800, "minGpa": 3.0},
                }
            ]
        }
    }


class EvaluateResponse(BaseModel):
    success: bool
    all_satisfied: bool
    results: dict[str, ConditionResult]


async def resolve_credentials(
    source: CredentialSource,
    repository: CredentialRepository,
) -> list[VerifiableCredential | dict[str, Any]]:
    """Inline credentials win over a wallet lookup."""
    if source.credentials is not None:
        return list(source.credentials)
    if source.wallet_address:
        return list(await repository.list_for_wallet(source.wallet_address))
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Provide either credentials or wallet_address",
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_conditions(
    request: EvaluateRequest,
    matcher: ConditionMatcher = Depends(get_matcher),
    repository: CredentialRepository = Depends(get_credential_repository),
) -> EvaluateResponse:
    """
    Evaluate each condition as satisfied, unsatisfied or unevaluable.

    A condition whose credential or attribute is missing reports
    `satisfied: null`.
    """
    credentials = await resolve_credentials(request, repository)

    try:
        results = matcher.match(credentials, request.conditions)
    except HANDLED_ERRORS as e:
        raise to_http_exception(e) from e

    return EvaluateResponse(
        success=True,
        all_satisfied=bool(results) and all(r.satisfied is True for r in results.values()),
        results=results,
    )
