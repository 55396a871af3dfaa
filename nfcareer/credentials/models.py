"""
Verifiable Credential Models
============================

Typed credential variants. Every credential keeps its open `attributes`
mapping; the subclasses add accessors for the attributes that matter to
their type. Unknown credential types load as the generic base model.

Version: 0.1.0
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CredentialType(str, Enum):
    """Known credential types, keyed by their wire tag."""

    IDENTITY = "myNumber"
    TOEIC = "toeic"
    DEGREE = "degree"
    CERTIFICATION = "certification"


def as_number(value: Any) -> int | float | None:
    """Read a numeric attribute; None if absent or not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            return None
    return None


def years_between(born: date, on: date) -> int:
    """Whole years since birth, counting the birthday itself."""
    years = on.year - born.year
    if (on.month, on.day) < (born.month, born.day):
        years -= 1
    return years


def as_date(value: Any) -> date | None:
    """Read an ISO date (or datetime) attribute."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


class VerifiableCredential(BaseModel):
    """
    A credential as held by the wallet owner.

    Credentials are never mutated; replacing one means issuing a new
    credential with a new id.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Unique credential identifier")
    type: str = Field(..., description="Credential type tag (myNumber, toeic, degree, ...)")
    issuer: str = Field(default="Unknown", description="Issuer name or identifier")
    issued_at: datetime | None = Field(default=None, alias="issuedAt")
    attributes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("attributes")
    @classmethod
    def attributes_must_not_carry_proofs(cls, v: dict[str, Any]) -> dict[str, Any]:
        if "proof" in v:
            raise ValueError("Credential attributes must not contain a proof")
        return v

    @property
    def credential_type(self) -> CredentialType | None:
        try:
            return CredentialType(self.type)
        except ValueError:
            return None

    @property
    def attribute_names(self) -> list[str]:
        return list(self.attributes)

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)


class IdentityCredential(VerifiableCredential):
    """National identity credential (My Number card)."""

    @property
    def date_of_birth(self) -> date | None:
        return as_date(self.get("dateOfBirth"))

    @property
    def nationality(self) -> str | None:
        return self.get("nationality")

    def age(self, on: date | None = None) -> int | None:
        born = self.date_of_birth
        if born is None:
            return None
        return years_between(born, on or date.today())


class ToeicCredential(VerifiableCredential):
    """TOEIC language test result."""

    @property
    def score(self) -> int | float | None:
        return as_number(self.get("score"))

    @property
    def test_date(self) -> date | None:
        return as_date(self.get("testDate"))

    @property
    def test_center(self) -> str | None:
        return self.get("testCenter")


class DegreeCredential(VerifiableCredential):
    """University degree with grade point average."""

    @property
    def gpa(self) -> int | float | None:
        return as_number(self.get("gpa"))

    @property
    def university(self) -> str | None:
        return self.get("university")

    @property
    def major(self) -> str | None:
        return self.get("major")

    @property
    def degree(self) -> str | None:
        return self.get("degree")


class CertificationCredential(VerifiableCredential):
    """Professional certification."""

    @property
    def name(self) -> str | None:
        return self.get("name")


CREDENTIAL_CLASSES: dict[str, type[VerifiableCredential]] = {
    CredentialType.IDENTITY.value: IdentityCredential,
    CredentialType.TOEIC.value: ToeicCredential,
    CredentialType.DEGREE.value: DegreeCredential,
    CredentialType.CERTIFICATION.value: CertificationCredential,
}


def parse_credential(data: Mapping[str, Any]) -> VerifiableCredential:
    """Build the typed credential for a simple-format mapping."""
    cls = CREDENTIAL_CLASSES.get(data.get("type"), VerifiableCredential)
    return cls.model_validate(dict(data))


class CredentialReference(BaseModel):
    """Public description of a credential used in a disclosure."""

    id: str
    type: str
    issuer: str

    @classmethod
    def of(cls, credential: VerifiableCredential) -> "CredentialReference":
        return cls(id=credential.id, type=credential.type, issuer=credential.issuer)
