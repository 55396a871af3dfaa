"""
Credential Conditions
=====================

Named threshold conditions (e.g. `minToeicScore >= 800`) and their
per-condition evaluation results.

Version: 0.1.0
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field, computed_field

from nfcareer.credentials.models import (
    CredentialType,
    DegreeCredential,
    IdentityCredential,
    ToeicCredential,
    VerifiableCredential,
    as_date,
    as_number,
    years_between,
)
from nfcareer.zk.circuits import CircuitId, get_circuit, is_vacuous_threshold


class ConditionStatus(str, Enum):
    """Outcome of evaluating one condition."""

    SATISFIED = "satisfied"
    UNSATISFIED = "unsatisfied"
    VACUOUS = "vacuous"
    MISSING_CREDENTIAL = "missing_credential"
    MISSING_ATTRIBUTE = "missing_attribute"


def format_threshold(value: float | None) -> str:
    if value is None:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _identity_age(credential: VerifiableCredential, on: date) -> int | None:
    if isinstance(credential, IdentityCredential):
        return credential.age(on)
    born = as_date(credential.get("dateOfBirth"))
    return years_between(born, on) if born else None


def _toeic_score(credential: VerifiableCredential, on: date) -> int | float | None:
    if isinstance(credential, ToeicCredential):
        return credential.score
    return as_number(credential.get("score"))


def _degree_gpa(credential: VerifiableCredential, on: date) -> int | float | None:
    if isinstance(credential, DegreeCredential):
        return credential.gpa
    return as_number(credential.get("gpa"))


@dataclass(frozen=True)
class ConditionDefinition:
    """Binds a condition name to one credential type, attribute and circuit."""

    name: str
    credential_type: CredentialType
    attribute: str
    circuit_id: CircuitId
    extract: Callable[[VerifiableCredential, date], Any]
    label_prefix: str = ""

    def label(self, threshold: float | None) -> str:
        """Human-readable comparison, safe to disclose."""
        if is_vacuous_threshold(threshold):
            return "credential present"
        return f"{self.label_prefix}>= {format_threshold(threshold)}"


CONDITION_DEFINITIONS: dict[str, ConditionDefinition] = {
    "minAge": ConditionDefinition(
        name="minAge",
        credential_type=CredentialType.IDENTITY,
        attribute="dateOfBirth",
        circuit_id=CircuitId.AGE,
        extract=_identity_age,
    ),
    "minToeicScore": ConditionDefinition(
        name="minToeicScore",
        credential_type=CredentialType.TOEIC,
        attribute="score",
        circuit_id=CircuitId.TOEIC,
        extract=_toeic_score,
    ),
    "minGpa": ConditionDefinition(
        name="minGpa",
        credential_type=CredentialType.DEGREE,
        attribute="gpa",
        circuit_id=CircuitId.DEGREE,
        extract=_degree_gpa,
        label_prefix="GPA ",
    ),
}


def get_definition(name: str) -> ConditionDefinition:
    try:
        return CONDITION_DEFINITIONS[name]
    except KeyError as e:
        raise ValueError(
            f"Unknown condition '{name}', expected one of {sorted(CONDITION_DEFINITIONS)}"
        ) from e


class Condition(BaseModel):
    """A named threshold to evaluate against the holder's credentials."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Condition key, e.g. minToeicScore")
    threshold: float | None = Field(default=None, ge=0)

    @property
    def definition(self) -> ConditionDefinition:
        return get_definition(self.name)


def is_vacuously_satisfied(condition: Condition) -> bool:
    """
    A zero or absent threshold only asks for the credential to exist.

    Such conditions are satisfied whenever the credential is present, and
    the degree circuit skips proof generation for them.
    """
    return is_vacuous_threshold(condition.threshold)


def parse_conditions(conditions: Any) -> list[Condition]:
    """
    Normalise conditions given as a list or as `{name: threshold}`.

    Raises:
        TypeError: If `conditions` is neither a list nor a mapping
        ValueError: On unknown or repeated condition names, or a threshold
            the circuit cannot represent
    """
    if isinstance(conditions, Mapping):
        items = [Condition(name=name, threshold=value) for name, value in conditions.items()]
    elif isinstance(conditions, (list, tuple)):
        items = [c if isinstance(c, Condition) else Condition.model_validate(c) for c in conditions]
    else:
        raise TypeError(f"Conditions must be a list or mapping, got {type(conditions).__name__}")

    seen: set[str] = set()
    for condition in items:
        definition = get_definition(condition.name)
        if condition.name in seen:
            raise ValueError(f"Condition '{condition.name}' given more than once")
        seen.add(condition.name)
        if condition.threshold is not None:
            spec = get_circuit(definition.circuit_id)
            spec.to_field(condition.threshold, signal=spec.threshold_signal)
    return items


class ConditionResult(BaseModel):
    """
    Evaluation of one condition.

    `value` is the private value that was compared. It is excluded from
    every serialisation and must never reach a disclosure record.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    status: ConditionStatus
    condition_label: str
    threshold: float | None = None
    circuit_id: CircuitId
    credential_id: str | None = None
    value: Any = Field(default=None, exclude=True, repr=False)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def satisfied(self) -> bool | None:
        if self.status in (ConditionStatus.SATISFIED, ConditionStatus.VACUOUS):
            return True
        if self.status == ConditionStatus.UNSATISFIED:
            return False
        return None

    @property
    def evaluated(self) -> bool:
        return self.satisfied is not None
