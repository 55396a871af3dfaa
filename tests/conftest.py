"""
Test Configuration
==================

Pytest fixtures for NonFungibleCareer tests.
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["STORAGE_BACKEND"] = "memory"

from nfcareer.config import DuplicatePolicy  # noqa: E402
from nfcareer.credentials import ConditionMatcher  # noqa: E402
from nfcareer.disclosure import DisclosureService  # noqa: E402
from nfcareer.storage import InMemoryCredentialRepository, InMemoryDisclosureStore  # noqa: E402
from nfcareer.zk import CredentialProver, CredentialVerifier  # noqa: E402
from tests.fakes import REFERENCE_DATE, FakeSnarkjs, provision_build_dir  # noqa: E402


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


# =============================================================================
# Proof system
# =============================================================================


@pytest.fixture
def fake_snarkjs() -> FakeSnarkjs:
    return FakeSnarkjs()


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """A build directory with placeholder assets for every circuit."""
    return provision_build_dir(tmp_path / "build")


@pytest.fixture
def prover(build_dir: Path, fake_snarkjs: FakeSnarkjs) -> CredentialProver:
    return CredentialProver(build_dir=build_dir, snarkjs=fake_snarkjs)


@pytest.fixture
def verifier(build_dir: Path, fake_snarkjs: FakeSnarkjs) -> CredentialVerifier:
    return CredentialVerifier(build_dir=build_dir, snarkjs=fake_snarkjs)


@pytest.fixture
def matcher() -> ConditionMatcher:
    return ConditionMatcher(DuplicatePolicy.FIRST, today=REFERENCE_DATE)


@pytest.fixture
def disclosure_service(prover: CredentialProver, matcher: ConditionMatcher) -> DisclosureService:
    return DisclosureService(prover, matcher)


# =============================================================================
# Credentials
# =============================================================================


@pytest.fixture
def identity_vc() -> dict[str, Any]:
    """My Number credential; 30 years old on REFERENCE_DATE."""
    return {
        "id": "vc-identity-001",
        "type": "myNumber",
        "issuer": "Digital Agency",
        "issuedAt": "2023-04-01T00:00:00Z",
        "attributes": {
            "name": "Yamada Taro",
            "dateOfBirth": "1995-06-10",
            "nationality": "JP",
        },
    }


@pytest.fixture
def toeic_vc() -> dict[str, Any]:
    return {
        "id": "vc-toeic-001",
        "type": "toeic",
        "issuer": "IIBC",
        "issuedAt": "2024-07-01T00:00:00Z",
        "attributes": {
            "score": 850,
            "testDate": "2024-06-16",
            "testCenter": "Tokyo",
        },
    }


@pytest.fixture
def degree_vc() -> dict[str, Any]:
    return {
        "id": "vc-degree-001",
        "type": "degree",
        "issuer": "University of Tokyo",
        "issuedAt": "2018-03-25T00:00:00Z",
        "attributes": {
            "gpa": 3.8,
            "university": "University of Tokyo",
            "major": "Computer Science",
            "degree": "Bachelor",
        },
    }


@pytest.fixture
def credentials(
    identity_vc: dict[str, Any],
    toeic_vc: dict[str, Any],
    degree_vc: dict[str, Any],
) -> list[dict[str, Any]]:
    return [identity_vc, toeic_vc, degree_vc]


# =============================================================================
# Service
# =============================================================================


@pytest.fixture
def credential_repository() -> InMemoryCredentialRepository:
    return InMemoryCredentialRepository()


@pytest.fixture
def disclosure_store() -> InMemoryDisclosureStore:
    return InMemoryDisclosureStore()


@pytest_asyncio.fixture
async def credential_proofs_client(
    prover: CredentialProver,
    verifier: CredentialVerifier,
    matcher: ConditionMatcher,
    credential_repository: InMemoryCredentialRepository,
    disclosure_store: InMemoryDisclosureStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Credential Proofs Service."""
    from services.credential_proofs import dependencies
    from services.credential_proofs.main import app

    app.dependency_overrides[dependencies.get_prover] = lambda: prover
    app.dependency_overrides[dependencies.get_verifier] = lambda: verifier
    app.dependency_overrides[dependencies.get_matcher] = lambda: matcher
    app.dependency_overrides[dependencies.get_credential_repository] = lambda: credential_repository
    app.dependency_overrides[dependencies.get_store] = lambda: disclosure_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
