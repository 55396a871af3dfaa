"""
Service Dependencies
====================

Shared component instances for route handlers. Tests replace them through
`app.dependency_overrides`.
"""

from functools import lru_cache

from fastapi import Depends

from nfcareer.credentials import ConditionMatcher
from nfcareer.disclosure import DisclosureService
from nfcareer.storage import (
    CredentialRepository,
    DisclosureStore,
    InMemoryCredentialRepository,
    get_disclosure_store,
)
from nfcareer.zk import CredentialProver, CredentialVerifier


@lru_cache
def get_prover() -> CredentialProver:
    return CredentialProver()


@lru_cache
def get_verifier() -> CredentialVerifier:
    return CredentialVerifier()


@lru_cache
def get_matcher() -> ConditionMatcher:
    return ConditionMatcher()


@lru_cache
def get_credential_repository() -> CredentialRepository:
    return InMemoryCredentialRepository()


def get_store() -> DisclosureStore:
    return get_disclosure_store()


def get_disclosure_service(
    prover: CredentialProver = Depends(get_prover),
    matcher: ConditionMatcher = Depends(get_matcher),
) -> DisclosureService:
    return DisclosureService(prover, matcher)
