"""
Credential Condition Matcher
============================

Decides, per condition, whether the holder's credentials satisfy it.

Absence is a result, not an error: a missing credential or attribute
yields `satisfied=None`, which stays distinct from `satisfied=False`.

Version: 0.1.0
"""

from datetime import date
from typing import Any, Mapping, Sequence

from nfcareer.config import DuplicatePolicy, get_settings
from nfcareer.credentials.conditions import (
    Condition,
    ConditionDefinition,
    ConditionResult,
    ConditionStatus,
    is_vacuously_satisfied,
    parse_conditions,
)
from nfcareer.credentials.models import VerifiableCredential
from nfcareer.credentials.w3c import load_credential
from nfcareer.logging import get_logger
from nfcareer.zk.circuits import CircuitSpec, get_circuit
from nfcareer.zk.errors import ProvingError


logger = get_logger(__name__)


def to_circuit_units(spec: CircuitSpec, value: Any) -> int | None:
    """The integer the circuit would compare, or None if it cannot take the value."""
    try:
        return spec.to_field(value)
    except ProvingError:
        return None


class ConditionMatcher:
    """
    Evaluates conditions against a caller-supplied list of credentials.

    The matcher never reads or stores credentials itself.

    Usage:
        matcher = ConditionMatcher()
        results = matcher.match(credentials, {"minToeicScore": 800, "minGpa": 3.0})
        results["minToeicScore"].satisfied  # True / False / None
    """

    def __init__(
        self,
        duplicate_policy: DuplicatePolicy | None = None,
        today: date | None = None,
    ):
        """
        Args:
            duplicate_policy: Which credential wins when several share a type.
                Defaults to the configured MATCHER_DUPLICATE_POLICY.
            today: Reference date for age conditions (defaults to the current date)
        """
        self.duplicate_policy = duplicate_policy or get_settings().matcher.duplicate_policy
        self.today = today

    def _reference_date(self) -> date:
        return self.today or date.today()

    def select_credential(
        self,
        credentials: Sequence[VerifiableCredential],
        definition: ConditionDefinition,
    ) -> VerifiableCredential | None:
        """Pick the credential a condition is evaluated against."""
        candidates = [c for c in credentials if c.type == definition.credential_type.value]
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.debug(
                "duplicate_credentials",
                credential_type=definition.credential_type.value,
                count=len(candidates),
                policy=self.duplicate_policy.value,
            )

        if self.duplicate_policy == DuplicatePolicy.MOST_RECENT:
            dated = [c for c in candidates if c.issued_at is not None]
            return max(dated, key=lambda c: c.issued_at) if dated else candidates[0]

        if self.duplicate_policy == DuplicatePolicy.HIGHEST:
            on = self._reference_date()
            valued = [(definition.extract(c, on), c) for c in candidates]
            valued = [(v, c) for v, c in valued if v is not None]
            return max(valued, key=lambda vc: vc[0])[1] if valued else candidates[0]

        return candidates[0]

    def evaluate(
        self,
        credentials: Sequence[VerifiableCredential],
        condition: Condition,
    ) -> ConditionResult:
        """Evaluate a single condition."""
        definition = condition.definition
        common = {
            "name": condition.name,
            "threshold": condition.threshold,
            "circuit_id": definition.circuit_id,
            "condition_label": definition.label(condition.threshold),
        }

        credential = self.select_credential(credentials, definition)
        if credential is None:
            return ConditionResult(status=ConditionStatus.MISSING_CREDENTIAL, **common)

        spec = get_circuit(definition.circuit_id)
        value = definition.extract(credential, self._reference_date())
        field_value = None if value is None else to_circuit_units(spec, value)
        if value is not None and field_value is None:
            logger.warning(
                "condition_value_out_of_circuit_range",
                condition=condition.name,
                credential_id=credential.id,
            )
            value = None

        # Existence-only check, whatever the attribute holds.
        if is_vacuously_satisfied(condition):
            return ConditionResult(
                status=ConditionStatus.VACUOUS,
                credential_id=credential.id,
                value=value,
                **common,
            )

        if value is None:
            return ConditionResult(
                status=ConditionStatus.MISSING_ATTRIBUTE,
                credential_id=credential.id,
                **common,
            )

        # Compared in circuit units so the outcome matches the proof's bit.
        threshold = spec.to_field(condition.threshold, signal=spec.threshold_signal)
        status = (
            ConditionStatus.SATISFIED
            if field_value >= threshold
            else ConditionStatus.UNSATISFIED
        )
        return ConditionResult(
            status=status,
            credential_id=credential.id,
            value=value,
            **common,
        )

    def match(
        self,
        credentials: Sequence[VerifiableCredential | Mapping[str, Any]],
        conditions: Any,
    ) -> dict[str, ConditionResult]:
        """
        Evaluate every condition.

        Args:
            credentials: Holder's credentials (models, or dicts in either format)
            conditions: List of Condition / dicts, or `{name: threshold}`

        Returns:
            Mapping of condition name to its result, in condition order

        Raises:
            TypeError: If either argument has the wrong shape
            ValueError: On unknown condition names
        """
        if isinstance(credentials, (str, bytes)) or not isinstance(credentials, Sequence):
            raise TypeError(f"Credentials must be a list, got {type(credentials).__name__}")

        loaded = [load_credential(c) for c in credentials]
        parsed = parse_conditions(conditions)

        results = {condition.name: self.evaluate(loaded, condition) for condition in parsed}

        logger.info(
            "conditions_evaluated",
            credentials=len(loaded),
            results={name: r.status.value for name, r in results.items()},
        )
        return results


def match_conditions(
    credentials: Sequence[VerifiableCredential | Mapping[str, Any]],
    conditions: Any,
    duplicate_policy: DuplicatePolicy | None = None,
) -> dict[str, ConditionResult]:
    """Evaluate conditions with a one-off matcher."""
    return ConditionMatcher(duplicate_policy).match(credentials, conditions)
