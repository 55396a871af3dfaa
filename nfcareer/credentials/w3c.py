"""
W3C Credential Format
=====================

Conversion between the simple credential format used internally
(`{id, type, issuer, issuedAt, attributes}`) and the W3C Verifiable
Credentials data model. This is a compatibility layer only; nothing here
checks signatures or issuer trust.
"""

from datetime import UTC, datetime
from typing import Any, Mapping
from uuid import uuid4

from nfcareer.credentials.models import (
    VerifiableCredential,
    parse_credential,
)


W3C_CONTEXT = [
    "https://www.w3.org/2018/credentials/v1",
    "https://www.w3.org/2018/credentials/examples/v1",
]

BASE_TYPE = "VerifiableCredential"

TYPE_TO_W3C = {
    "myNumber": "MyNumberCredential",
    "toeic": "TOEICCredential",
    "degree": "DegreeCredential",
    "certification": "CertificationCredential",
}
W3C_TO_TYPE = {v: k for k, v in TYPE_TO_W3C.items()}


def is_w3c_format(data: Mapping[str, Any]) -> bool:
    """Check for the fields every W3C credential must carry."""
    types = data.get("type")
    return (
        "@context" in data
        and isinstance(types, list)
        and BASE_TYPE in types
        and "credentialSubject" in data
        and "issuanceDate" in data
    )


def type_from_w3c(types: Any) -> str:
    """Pick the simple type tag out of a W3C `type` value."""
    if isinstance(types, list):
        custom = next((t for t in types if t != BASE_TYPE), None)
        if custom:
            return W3C_TO_TYPE.get(custom, custom.lower().replace("credential", ""))
        return "unknown"
    return types if isinstance(types, str) else "unknown"


def issuer_name(issuer: Any) -> str:
    if isinstance(issuer, str):
        return issuer
    if isinstance(issuer, Mapping):
        return issuer.get("name") or issuer.get("id") or "Unknown"
    return "Unknown"


def from_w3c(data: Mapping[str, Any]) -> VerifiableCredential:
    """Convert a W3C credential to the typed simple model."""
    subject = dict(data.get("credentialSubject") or {})
    subject.pop("id", None)
    # A W3C `proof` is the issuer's signature and is not an attribute.
    subject.pop("proof", None)

    return parse_credential(
        {
            "id": data.get("id") or f"urn:uuid:{uuid4()}",
            "type": type_from_w3c(data.get("type")),
            "issuer": issuer_name(data.get("issuer")),
            "issuedAt": data.get("issuanceDate"),
            "attributes": subject,
        }
    )


def to_w3c(
    credential: VerifiableCredential,
    subject_id: str | None = None,
) -> dict[str, Any]:
    """Convert a credential to a W3C Verifiable Credential document."""
    issued_at = credential.issued_at or datetime.now(UTC)
    return {
        "@context": list(W3C_CONTEXT),
        "type": [BASE_TYPE, TYPE_TO_W3C.get(credential.type, credential.type)],
        "id": credential.id,
        "issuer": {"id": credential.issuer, "name": credential.issuer},
        "issuanceDate": issued_at.isoformat(),
        "credentialSubject": {
            "id": subject_id or f"urn:uuid:{uuid4()}",
            **credential.attributes,
        },
    }


def load_credential(data: Mapping[str, Any] | VerifiableCredential) -> VerifiableCredential:
    """Accept a credential in either format (or an already-built model)."""
    if isinstance(data, VerifiableCredential):
        return data
    if not isinstance(data, Mapping):
        raise TypeError(f"Credential must be a mapping, got {type(data).__name__}")
    if is_w3c_format(data):
        return from_w3c(data)
    return parse_credential(data)
