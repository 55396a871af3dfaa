"""
Disclosure Store
================

Keeps the two halves of a disclosure apart:

- public: what any verifying party may fetch by id or wallet
- private: the full package including witness values, for the holder only

Proof ids follow `<proofHash>_<millis>_<random>`.

Version: 0.1.0
"""

import asyncio
import json
import re
import secrets
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from nfcareer.config import StorageBackend, settings
from nfcareer.disclosure.models import DisclosurePackage, DisclosureRecord, PrivateDisclosure
from nfcareer.logging import get_logger
from nfcareer.storage.credentials import normalize_wallet


logger = get_logger(__name__)

PROOF_ID_PATTERN = re.compile(r"^[0-9A-Za-z]+_\d+_[0-9a-f]+$")


def new_proof_id(proof_hash: str) -> str:
    millis = int(datetime.now(UTC).timestamp() * 1000)
    return f"{proof_hash}_{millis}_{secrets.token_hex(5)}"


def is_valid_proof_id(proof_id: str) -> bool:
    return bool(PROOF_ID_PATTERN.match(proof_id))


class StoredDisclosure(BaseModel):
    """Public entry of a stored disclosure."""

    proof_id: str
    wallet_address: str
    proof_hash: str
    record: DisclosureRecord
    satisfied_conditions: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_package(cls, proof_id: str, wallet_address: str, package: DisclosurePackage) -> "StoredDisclosure":
        record = package.public
        return cls(
            proof_id=proof_id,
            wallet_address=normalize_wallet(wallet_address),
            proof_hash=record.proof_hash,
            record=record,
            satisfied_conditions=[
                name for name, claim in record.public_inputs.items() if claim.satisfied
            ],
        )


class DisclosureStore(ABC):
    """Abstract disclosure storage."""

    @abstractmethod
    async def save(self, wallet_address: str, package: DisclosurePackage) -> StoredDisclosure:
        """Store both halves and return the public entry with its new id."""
        ...

    @abstractmethod
    async def get_public(self, proof_id: str) -> StoredDisclosure | None:
        ...

    @abstractmethod
    async def get_private(self, proof_id: str) -> PrivateDisclosure | None:
        ...

    @abstractmethod
    async def list_for_wallet(self, wallet_address: str) -> list[StoredDisclosure]:
        """Public entries for a wallet, newest first."""
        ...


class InMemoryDisclosureStore(DisclosureStore):
    """In-memory store for development and testing."""

    def __init__(self) -> None:
        self._public: dict[str, StoredDisclosure] = {}
        self._private: dict[str, PrivateDisclosure] = {}

    async def save(self, wallet_address: str, package: DisclosurePackage) -> StoredDisclosure:
        proof_id = new_proof_id(package.public.proof_hash)
        entry = StoredDisclosure.from_package(proof_id, wallet_address, package)
        self._public[proof_id] = entry
        self._private[proof_id] = package.private
        logger.info("disclosure_stored", proof_id=proof_id, wallet=entry.wallet_address, backend="memory")
        return entry

    async def get_public(self, proof_id: str) -> StoredDisclosure | None:
        return self._public.get(proof_id)

    async def get_private(self, proof_id: str) -> PrivateDisclosure | None:
        return self._private.get(proof_id)

    async def list_for_wallet(self, wallet_address: str) -> list[StoredDisclosure]:
        wallet = normalize_wallet(wallet_address)
        entries = [e for e in self._public.values() if e.wallet_address == wallet]
        return sorted(entries, key=lambda e: e.created_at, reverse=True)


class FileDisclosureStore(DisclosureStore):
    """
    Filesystem store.

    Layout under `data_dir`:
        <proof_id>.json          private half
        public/<proof_id>.json   public entry
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)
        self.public_dir = self.data_dir / "public"
        self.public_dir.mkdir(parents=True, exist_ok=True)

    def _private_path(self, proof_id: str) -> Path | None:
        if not is_valid_proof_id(proof_id):
            return None
        return self.data_dir / f"{proof_id}.json"

    def _public_path(self, proof_id: str) -> Path | None:
        if not is_valid_proof_id(proof_id):
            return None
        return self.public_dir / f"{proof_id}.json"

    def _write(self, entry: StoredDisclosure, private: PrivateDisclosure) -> None:
        self._private_path(entry.proof_id).write_text(private.model_dump_json(indent=2), encoding="utf-8")
        self._public_path(entry.proof_id).write_text(entry.model_dump_json(indent=2), encoding="utf-8")

    async def save(self, wallet_address: str, package: DisclosurePackage) -> StoredDisclosure:
        proof_id = new_proof_id(package.public.proof_hash)
        entry = StoredDisclosure.from_package(proof_id, wallet_address, package)
        await asyncio.to_thread(self._write, entry, package.private)
        logger.info("disclosure_stored", proof_id=proof_id, wallet=entry.wallet_address, backend="filesystem")
        return entry

    async def get_public(self, proof_id: str) -> StoredDisclosure | None:
        path = self._public_path(proof_id)
        if path is None or not path.exists():
            return None
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return StoredDisclosure.model_validate_json(text)

    async def get_private(self, proof_id: str) -> PrivateDisclosure | None:
        path = self._private_path(proof_id)
        if path is None or not path.exists():
            return None
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        return PrivateDisclosure.model_validate_json(text)

    def _scan(self, wallet: str) -> list[StoredDisclosure]:
        entries = []
        for path in self.public_dir.glob("*.json"):
            try:
                entry = StoredDisclosure.model_validate(json.loads(path.read_text(encoding="utf-8")))
            except (OSError, ValueError) as e:
                logger.warning("disclosure_entry_unreadable", path=str(path), error=str(e))
                continue
            if entry.wallet_address == wallet:
                entries.append(entry)
        return sorted(entries, key=lambda e: e.created_at, reverse=True)

    async def list_for_wallet(self, wallet_address: str) -> list[StoredDisclosure]:
        return await asyncio.to_thread(self._scan, normalize_wallet(wallet_address))


# Global store instance
_store: DisclosureStore | None = None


def get_disclosure_store() -> DisclosureStore:
    """
    Get the configured disclosure store.

    Returns:
        DisclosureStore instance based on settings
    """
    global _store

    if _store is None:
        backend = settings.storage.backend
        if backend == StorageBackend.MEMORY:
            _store = InMemoryDisclosureStore()
        elif backend == StorageBackend.FILESYSTEM:
            _store = FileDisclosureStore(settings.storage.data_dir)
        else:
            raise ValueError(f"Unknown storage backend: {backend}")

        logger.info("disclosure_store_initialized", backend=backend.value)

    return _store


def set_disclosure_store(store: DisclosureStore) -> None:
    """Use a custom store instead of the configured one."""
    global _store
    _store = store


def reset_disclosure_store() -> None:
    """Reset the store to be re-initialized."""
    global _store
    _store = None
