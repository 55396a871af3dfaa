"""
ZK-SNARK Data Models
====================

Pydantic models for Groth16 proof data.

Version: 0.1.0
"""

import hashlib
import json
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nfcareer.zk.circuits import CircuitId


def _check_decimal(value: str) -> str:
    if not isinstance(value, str) or not value.isdigit():
        raise ValueError(f"Expected a decimal field element, got {value!r}")
    return value


class Groth16Proof(BaseModel):
    """
    A Groth16 proof.

    Compatible with the snarkjs proof.json format.
    """

    model_config = ConfigDict(frozen=True)

    # Proof points (G1 and G2 elements, projective coordinates)
    pi_a: list[str] = Field(..., description="Proof point A (G1)")
    pi_b: list[list[str]] = Field(..., description="Proof point B (G2)")
    pi_c: list[str] = Field(..., description="Proof point C (G1)")

    protocol: str = Field(default="groth16")
    curve: str = Field(default="bn128")

    @field_validator("pi_a", "pi_c")
    @classmethod
    def g1_point_shape(cls, v: list[str]) -> list[str]:
        if len(v) != 3:
            raise ValueError(f"G1 point must have 3 coordinates, got {len(v)}")
        return [_check_decimal(c) for c in v]

    @field_validator("pi_b")
    @classmethod
    def g2_point_shape(cls, v: list[list[str]]) -> list[list[str]]:
        if len(v) != 3 or any(len(pair) != 2 for pair in v):
            raise ValueError("G2 point must be 3 pairs of coordinates")
        return [[_check_decimal(c) for c in pair] for pair in v]

    @field_validator("protocol")
    @classmethod
    def protocol_is_groth16(cls, v: str) -> str:
        if v != "groth16":
            raise ValueError(f"Unsupported proof protocol '{v}'")
        return v


class ProofResult(BaseModel):
    """
    Output of the proof generator for one circuit.

    `public_signals` is `[threshold, satisfied]` in circuit units. A skipped
    result (vacuous degree threshold) carries no proof and no signals and is
    not cryptographically equivalent to a proved result.
    """

    model_config = ConfigDict(frozen=True)

    circuit_id: CircuitId
    proof: Groth16Proof | None = None
    public_signals: list[str] = Field(default_factory=list)
    skipped: bool = False
    proving_time_ms: int = Field(default=0, ge=0)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def skipped_for(cls, circuit_id: CircuitId) -> "ProofResult":
        """Sentinel result for a condition that needs no proof."""
        return cls(circuit_id=circuit_id, skipped=True)

    @property
    def threshold_signal(self) -> int | None:
        return int(self.public_signals[0]) if self.public_signals else None

    @property
    def satisfied_bit(self) -> int | None:
        return int(self.public_signals[1]) if len(self.public_signals) > 1 else None

    def digest(self) -> str:
        """SHA-256 over the canonical JSON of proof and public signals."""
        payload = {
            "circuit_id": self.circuit_id.value,
            "proof": self.proof.model_dump() if self.proof else None,
            "public_signals": self.public_signals,
            "skipped": self.skipped,
        }
        encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode()
        return "0x" + hashlib.sha256(encoded).hexdigest()


class VerificationResult(BaseModel):
    """Result of verifying a single proof."""

    circuit_id: CircuitId
    valid: bool
    skipped: bool = False
    verified_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    verification_time_ms: int = Field(default=0, ge=0)
    error: str | None = None
