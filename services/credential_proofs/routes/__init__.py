"""
Credential Proofs Service Routes
================================

API route handlers for the credential proofs service.
"""

from services.credential_proofs.routes import (
    circuits,
    conditions,
    credentials,
    disclosures,
    proofs,
    verification,
)


__all__ = ["circuits", "conditions", "credentials", "disclosures", "proofs", "verification"]
