"""
Credential Proofs Service
=========================

FastAPI service for proving credential thresholds in zero knowledge,
building selective disclosures, and re-verifying them.

Port: 8010 (CREDENTIAL_PROOFS_PORT)
"""
