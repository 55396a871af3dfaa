"""
Disclosure Models
=================

The public disclosure record a verifying party receives, and the private
half the holder keeps.

Version: 0.1.0
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from nfcareer.credentials.conditions import ConditionStatus
from nfcareer.credentials.models import CredentialReference
from nfcareer.zk.circuits import CircuitId
from nfcareer.zk.models import Groth16Proof


class DisclosedProof(BaseModel):
    """One proof included in a disclosure."""

    condition: str
    circuit_id: CircuitId
    proof: Groth16Proof | None = None
    public_signals: list[str] = Field(default_factory=list)
    skipped: bool = False


class DisclosedCondition(BaseModel):
    """Public claim about one condition. Never carries the private value."""

    condition_label: str
    threshold: float | None = None
    satisfied: bool | None = None
    status: ConditionStatus
    circuit_id: CircuitId


class DisclosureRecord(BaseModel):
    """
    Public half of a disclosure.

    `hidden_attribute_names` tells the verifier what was withheld. It is
    informational; withholding is enforced by the proofs themselves.
    """

    proofs: list[DisclosedProof] = Field(default_factory=list)
    public_inputs: dict[str, DisclosedCondition] = Field(default_factory=dict)
    hidden_attribute_names: list[str] = Field(default_factory=list)
    revealed_attributes: dict[str, Any] = Field(default_factory=dict)
    used_credentials: list[CredentialReference] = Field(default_factory=list)
    proof_hash: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class PrivateDisclosure(BaseModel):
    """Private half: the record plus the witness values behind it."""

    record: DisclosureRecord
    witnesses: dict[str, Any] = Field(default_factory=dict)
    results: dict[str, dict[str, Any]] = Field(default_factory=dict)


class DisclosurePackage(BaseModel):
    """Both halves, produced together. Storing them is the caller's job."""

    public: DisclosureRecord
    private: PrivateDisclosure


class VerificationStatus(str, Enum):
    """Per-condition outcome of re-verifying a disclosure."""

    VERIFIED = "verified"
    REJECTED = "rejected"
    SKIPPED = "skipped"
    UNEVALUATED = "unevaluated"


class ConditionVerification(BaseModel):
    condition: str
    status: VerificationStatus
    satisfied: bool | None = None
    error: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status in (VerificationStatus.VERIFIED, VerificationStatus.SKIPPED)


class DisclosureVerification(BaseModel):
    """Result of independently re-verifying a disclosure record."""

    all_verified: bool
    results: list[ConditionVerification] = Field(default_factory=list)
    verified_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
