"""
Credentials Module
==================

Verifiable Credential models, W3C format conversion and the condition
matcher.

Usage:
    from nfcareer.credentials import ConditionMatcher, load_credential

    vcs = [load_credential(raw) for raw in wallet_credentials]
    results = ConditionMatcher().match(vcs, {"minToeicScore": 800})
"""

from nfcareer.credentials.conditions import (
    CONDITION_DEFINITIONS,
    Condition,
    ConditionDefinition,
    ConditionResult,
    ConditionStatus,
    get_definition,
    is_vacuously_satisfied,
    parse_conditions,
)
from nfcareer.credentials.matcher import ConditionMatcher, match_conditions
from nfcareer.credentials.models import (
    CertificationCredential,
    CredentialReference,
    CredentialType,
    DegreeCredential,
    IdentityCredential,
    ToeicCredential,
    VerifiableCredential,
    parse_credential,
)
from nfcareer.credentials.w3c import (
    from_w3c,
    is_w3c_format,
    load_credential,
    to_w3c,
)


__all__ = [
    # Models
    "VerifiableCredential",
    "IdentityCredential",
    "ToeicCredential",
    "DegreeCredential",
    "CertificationCredential",
    "CredentialType",
    "CredentialReference",
    "parse_credential",
    # W3C
    "from_w3c",
    "to_w3c",
    "is_w3c_format",
    "load_credential",
    # Conditions
    "CONDITION_DEFINITIONS",
    "Condition",
    "ConditionDefinition",
    "ConditionResult",
    "ConditionStatus",
    "get_definition",
    "is_vacuously_satisfied",
    "parse_conditions",
    # Matcher
    "ConditionMatcher",
    "match_conditions",
]
