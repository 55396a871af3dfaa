"""
Selective Disclosure Module
===========================

Builds the disclosure record a holder sends to a verifying party, and
re-verifies such records on the verifier's side.

Usage:
    from nfcareer.disclosure import DisclosureService, verify_disclosure

    package = await DisclosureService(prover).create(vcs, {"minToeicScore": 800})
    report = await verify_disclosure(package.public, verifier)
"""

from nfcareer.disclosure.builder import (
    DisclosureError,
    build_disclosure,
    compute_proof_hash,
)
from nfcareer.disclosure.models import (
    ConditionVerification,
    DisclosedCondition,
    DisclosedProof,
    DisclosurePackage,
    DisclosureRecord,
    DisclosureVerification,
    PrivateDisclosure,
    VerificationStatus,
)
from nfcareer.disclosure.service import DisclosureService
from nfcareer.disclosure.verification import verify_disclosure


__all__ = [
    "DisclosureError",
    "build_disclosure",
    "compute_proof_hash",
    "DisclosureService",
    "verify_disclosure",
    "DisclosedProof",
    "DisclosedCondition",
    "DisclosureRecord",
    "PrivateDisclosure",
    "DisclosurePackage",
    "DisclosureVerification",
    "ConditionVerification",
    "VerificationStatus",
]
