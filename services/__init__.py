"""
NonFungibleCareer Services
==========================

HTTP services built on the nfcareer library.

Services:
- credential_proofs: ZK threshold proofs, condition matching and selective disclosure
"""

__all__ = [
    "credential_proofs",
]
