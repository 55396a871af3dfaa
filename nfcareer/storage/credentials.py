"""
Credential Repository
=====================

Where the service looks up a holder's credentials by wallet address.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping

from nfcareer.credentials.models import VerifiableCredential
from nfcareer.credentials.w3c import load_credential
from nfcareer.logging import get_logger


logger = get_logger(__name__)


def normalize_wallet(wallet_address: str) -> str:
    """Wallet addresses are compared case-insensitively."""
    return wallet_address.strip().lower()


class CredentialRepository(ABC):
    """Abstract credential lookup."""

    @abstractmethod
    async def add(
        self,
        wallet_address: str,
        credential: VerifiableCredential | Mapping[str, Any],
    ) -> VerifiableCredential:
        """Attach a credential to a wallet. Either format is accepted."""
        ...

    @abstractmethod
    async def list_for_wallet(self, wallet_address: str) -> list[VerifiableCredential]:
        """All credentials held by a wallet, in insertion order."""
        ...


class InMemoryCredentialRepository(CredentialRepository):
    """
    In-memory repository for development and testing.

    Data is lost on restart.
    """

    def __init__(self) -> None:
        self._by_wallet: dict[str, list[VerifiableCredential]] = {}

    async def add(
        self,
        wallet_address: str,
        credential: VerifiableCredential | Mapping[str, Any],
    ) -> VerifiableCredential:
        vc = load_credential(credential)
        wallet = normalize_wallet(wallet_address)
        held = self._by_wallet.setdefault(wallet, [])
        held[:] = [c for c in held if c.id != vc.id]
        held.append(vc)
        logger.debug("credential_added", wallet=wallet, credential_id=vc.id, type=vc.type)
        return vc

    async def list_for_wallet(self, wallet_address: str) -> list[VerifiableCredential]:
        return list(self._by_wallet.get(normalize_wallet(wallet_address), []))
