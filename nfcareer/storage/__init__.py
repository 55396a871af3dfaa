"""
Storage Module
==============

Ports for credential lookup and disclosure persistence.

Backends:
- memory (development/testing)
- filesystem (private halves as JSON files under STORAGE_DATA_DIR)

Usage:
    from nfcareer.storage import get_disclosure_store

    store = get_disclosure_store()
    entry = await store.save(wallet, package)
    public = await store.get_public(entry.proof_id)
"""

from nfcareer.storage.credentials import (
    CredentialRepository,
    InMemoryCredentialRepository,
    normalize_wallet,
)
from nfcareer.storage.disclosures import (
    DisclosureStore,
    FileDisclosureStore,
    InMemoryDisclosureStore,
    StoredDisclosure,
    get_disclosure_store,
    is_valid_proof_id,
    new_proof_id,
    reset_disclosure_store,
    set_disclosure_store,
)

__all__ = [
    "CredentialRepository",
    "InMemoryCredentialRepository",
    "normalize_wallet",
    "DisclosureStore",
    "InMemoryDisclosureStore",
    "FileDisclosureStore",
    "StoredDisclosure",
    "get_disclosure_store",
    "set_disclosure_store",
    "reset_disclosure_store",
    "new_proof_id",
    "is_valid_proof_id",
]
