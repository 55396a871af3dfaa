"""
Circuit Registry
================

Describes the three threshold circuits in `circuits/`:

    witness (private) >= threshold  ->  [threshold, satisfied] (public)

Each circuit publishes the threshold and the satisfied bit, in that order.
Values are fed to the circuits as non-negative integers; the degree circuit
works on GPA scaled by 100 (3.8 -> 380).

Version: 0.1.0
"""

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Mapping

from nfcareer.zk.errors import ProvingError


class CircuitId(str, Enum):
    """Compiled circuits available to the prover."""

    AGE = "age"
    TOEIC = "toeic"
    DEGREE = "degree"


def is_vacuous_threshold(threshold: float | None) -> bool:
    """True when a threshold is absent or exactly zero."""
    return threshold is None or threshold == 0


@dataclass(frozen=True)
class CircuitSpec:
    """Input schema and asset layout for one circuit."""

    circuit_id: CircuitId
    witness_signal: str
    threshold_signal: str
    bits: int
    scale: int = 1
    skips_vacuous_threshold: bool = False
    public_signal_count: int = 2

    @property
    def name(self) -> str:
        return self.circuit_id.value

    @property
    def input_names(self) -> frozenset[str]:
        return frozenset({self.witness_signal, self.threshold_signal})

    @property
    def max_field_value(self) -> int:
        return (1 << self.bits) - 1

    @property
    def wasm_file(self) -> str:
        return f"{self.name}.wasm"

    @property
    def zkey_file(self) -> str:
        return f"{self.name}.zkey"

    @property
    def vkey_file(self) -> str:
        return f"{self.name}.vkey.json"

    def to_field(self, value: Any, signal: str | None = None) -> int:
        """
        Convert a domain value to the integer the circuit consumes.

        Rounds half up after scaling (GPA 3.8 -> 380, 3.456 -> 346).

        Raises:
            ProvingError: If the value is not numeric or outside the
                circuit's bit width.
        """
        signal = signal or self.witness_signal
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ProvingError(
                f"Circuit '{self.name}' input '{signal}' must be numeric, "
                f"got {type(value).__name__}"
            )
        if not math.isfinite(value):
            raise ProvingError(f"Circuit '{self.name}' input '{signal}' must be finite")

        scaled = math.floor(value * self.scale + 0.5)
        if scaled < 0 or scaled > self.max_field_value:
            # The witness is private; only the allowed range is reported.
            if signal == self.witness_signal:
                raise ProvingError(
                    f"Circuit '{self.name}' input '{signal}' out of range "
                    f"[0, {self.max_field_value}]"
                )
            raise ProvingError(
                f"Circuit '{self.name}' input '{signal}' out of range: "
                f"{scaled} not in [0, {self.max_field_value}]"
            )
        return scaled

    def from_field(self, raw: int | str) -> int | float:
        """Convert a circuit integer back to the domain unit."""
        value = int(raw)
        if self.scale == 1:
            return value
        return value / self.scale

    def circuit_inputs(self, private_value: Any, threshold: Any) -> dict[str, Any]:
        """Name the two values the way the circuit's signals are named."""
        return {
            self.witness_signal: private_value,
            self.threshold_signal: threshold,
        }

    def check_inputs(self, inputs: Mapping[str, Any]) -> dict[str, int]:
        """
        Validate an input mapping against the circuit schema.

        Returns the inputs converted to field integers.

        Raises:
            ProvingError: On missing or unexpected signal names, or bad values.
        """
        if not isinstance(inputs, Mapping):
            raise ProvingError(f"Circuit '{self.name}' inputs must be a mapping")

        names = set(inputs)
        missing = self.input_names - names
        unexpected = names - self.input_names
        if missing or unexpected:
            raise ProvingError(
                f"Circuit '{self.name}' expects inputs {sorted(self.input_names)}; "
                f"missing={sorted(missing)} unexpected={sorted(unexpected)}"
            )

        return {name: self.to_field(inputs[name], signal=name) for name in sorted(names)}


CIRCUITS: dict[CircuitId, CircuitSpec] = {
    CircuitId.AGE: CircuitSpec(
        circuit_id=CircuitId.AGE,
        witness_signal="age",
        threshold_signal="minAge",
        bits=8,
    ),
    CircuitId.TOEIC: CircuitSpec(
        circuit_id=CircuitId.TOEIC,
        witness_signal="score",
        threshold_signal="minScore",
        bits=10,
    ),
    CircuitId.DEGREE: CircuitSpec(
        circuit_id=CircuitId.DEGREE,
        witness_signal="gpa",
        threshold_signal="minGpa",
        bits=10,
        scale=100,
        skips_vacuous_threshold=True,
    ),
}


def get_circuit(circuit: CircuitId | str) -> CircuitSpec:
    """
    Look up a circuit by id or name.

    Raises:
        ValueError: If the circuit is unknown.
    """
    try:
        return CIRCUITS[CircuitId(circuit)]
    except ValueError as e:
        raise ValueError(
            f"Unknown circuit '{circuit}', expected one of {[c.value for c in CircuitId]}"
        ) from e
