"""
Non-Fungible Career Credential Proofs
=====================================

Privacy-preserving credential checks for the Non-Fungible Career platform.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - credentials: Verifiable Credential models, W3C conversion, condition matching
    - zk: Groth16 circuit registry, snarkjs prover and verifier
    - disclosure: Selective-disclosure records and the end-to-end service
    - storage: Credential repository and disclosure store ports

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Non-Fungible Career Team"

from nfcareer.config import settings
from nfcareer.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
