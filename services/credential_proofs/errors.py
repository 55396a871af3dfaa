"""
Error Mapping
=============

Translates library exceptions into HTTP errors.

    MissingAssetError, ToolchainError  -> 503
    ProvingError                       -> 422
    MalformedProofError, DisclosureError,
    other ValueError / TypeError       -> 400
"""

from fastapi import HTTPException, status

from nfcareer.disclosure import DisclosureError
from nfcareer.logging import get_logger
from nfcareer.zk import (
    MalformedProofError,
    MissingAssetError,
    ProvingError,
    ToolchainError,
)


logger = get_logger(__name__)

# Errors a route handler converts; anything else reaches the 500 handler.
HANDLED_ERRORS = (MissingAssetError, ToolchainError, ValueError, TypeError)


def to_http_exception(exc: Exception) -> HTTPException:
    """Map a library exception to an HTTPException."""
    if isinstance(exc, MissingAssetError):
        logger.error("zk_assets_missing", error=str(exc))
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"ZK circuit files not available. Run circuit setup first. ({exc})",
        )
    if isinstance(exc, ToolchainError):
        logger.error("zk_toolchain_failed", error=str(exc))
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="ZK toolchain unavailable",
        )
    if isinstance(exc, ProvingError):
        logger.warning("zk_proving_rejected", error=str(exc))
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )

    if isinstance(exc, (MalformedProofError, DisclosureError)):
        logger.warning("request_rejected", error=str(exc), error_type=type(exc).__name__)
    else:
        logger.warning("request_validation_error", error=str(exc), error_type=type(exc).__name__)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
