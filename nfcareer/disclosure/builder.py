"""
Selective-Disclosure Record Builder
===================================

Packages matcher results and generated proofs into a disclosure record.

Rules:
- Every included, evaluated condition needs a proof whose public signals
  agree with the matcher result. Only vacuous conditions may carry a
  skipped proof.
- Conditions that could not be evaluated (credential or attribute
  missing) are listed with `satisfied=None` and no proof.
- Private values never enter the public record.

Version: 0.1.0
"""

import hashlib
import json
from typing import Any, Iterable, Mapping, Sequence

from nfcareer.credentials.conditions import (
    ConditionResult,
    ConditionStatus,
    get_definition,
)
from nfcareer.credentials.models import CredentialReference, VerifiableCredential
from nfcareer.disclosure.models import (
    DisclosedCondition,
    DisclosedProof,
    DisclosurePackage,
    DisclosureRecord,
    PrivateDisclosure,
)
from nfcareer.logging import get_logger
from nfcareer.zk.circuits import get_circuit
from nfcareer.zk.models import ProofResult


logger = get_logger(__name__)


class DisclosureError(ValueError):
    """The requested disclosure cannot be built from the given inputs."""


def _check_proof(result: ConditionResult, proof: ProofResult | None) -> None:
    name = result.name
    if proof is None:
        raise DisclosureError(f"No proof generated for condition '{name}'")
    if proof.circuit_id != result.circuit_id:
        raise DisclosureError(
            f"Condition '{name}' needs a '{result.circuit_id.value}' proof, "
            f"got '{proof.circuit_id.value}'"
        )

    if proof.skipped:
        if result.status != ConditionStatus.VACUOUS:
            raise DisclosureError(
                f"Condition '{name}' has a real threshold; a skipped proof is not enough"
            )
        return

    spec = get_circuit(result.circuit_id)
    if len(proof.public_signals) != spec.public_signal_count:
        raise DisclosureError(f"Proof for '{name}' has malformed public signals")

    expected_threshold = spec.to_field(result.threshold or 0, signal=spec.threshold_signal)
    if proof.threshold_signal != expected_threshold:
        raise DisclosureError(
            f"Proof for '{name}' was generated for threshold {proof.threshold_signal}, "
            f"condition requires {expected_threshold}"
        )
    if bool(proof.satisfied_bit) != result.satisfied:
        raise DisclosureError(
            f"Proof for '{name}' disagrees with the evaluated result "
            f"(satisfied={result.satisfied})"
        )


def compute_proof_hash(proofs: Sequence[DisclosedProof]) -> str:
    payload = [p.model_dump(mode="json") for p in proofs]
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode()
    return "0x" + hashlib.sha256(encoded).hexdigest()


def build_disclosure(
    results: Mapping[str, ConditionResult],
    proofs: Mapping[str, ProofResult],
    disclose: Iterable[str],
    credentials: Sequence[VerifiableCredential],
    reveal: Iterable[str] = (),
) -> DisclosurePackage:
    """
    Build the public disclosure record and its private counterpart.

    Args:
        results: Matcher output, condition name -> result
        proofs: Generated proofs, condition name -> proof
        disclose: Condition names the holder chose to disclose, in order
        credentials: The source credentials the results were computed from
        reveal: Attribute names the holder chose to show in plain text

    Returns:
        DisclosurePackage with `public` and `private` halves

    Raises:
        DisclosureError: On unknown conditions, missing or inconsistent
            proofs, or an attempt to reveal a witness attribute
    """
    selected = list(dict.fromkeys(disclose))
    by_id = {c.id: c for c in credentials}

    disclosed_proofs: list[DisclosedProof] = []
    public_inputs: dict[str, DisclosedCondition] = {}
    witnesses: dict[str, Any] = {}
    proved_attributes: set[tuple[str, str]] = set()
    used_ids: set[str] = set()

    for name in selected:
        result = results.get(name)
        if result is None:
            raise DisclosureError(f"Condition '{name}' was not evaluated")

        definition = get_definition(name)
        public_inputs[name] = DisclosedCondition(
            condition_label=result.condition_label,
            threshold=result.threshold,
            satisfied=result.satisfied,
            status=result.status,
            circuit_id=result.circuit_id,
        )

        if not result.evaluated:
            continue

        proof = proofs.get(name)
        _check_proof(result, proof)

        disclosed_proofs.append(
            DisclosedProof(
                condition=name,
                circuit_id=proof.circuit_id,
                proof=proof.proof,
                public_signals=list(proof.public_signals),
                skipped=proof.skipped,
            )
        )
        witnesses[name] = result.value
        if result.credential_id is not None:
            used_ids.add(result.credential_id)
            proved_attributes.add((result.credential_id, definition.attribute))

    # Witness attributes of any evaluated condition stay private, even if
    # the holder did not disclose that condition.
    witness_names = {
        get_definition(r.name).attribute for r in results.values() if r.credential_id is not None
    }

    revealed: dict[str, Any] = {}
    for attribute in dict.fromkeys(reveal):
        if attribute in witness_names:
            raise DisclosureError(f"Attribute '{attribute}' is a proof witness and cannot be revealed")
        holder = next((c for c in credentials if attribute in c.attributes), None)
        if holder is None:
            logger.warning("reveal_attribute_not_found", attribute=attribute)
            continue
        revealed[attribute] = holder.attributes[attribute]
        used_ids.add(holder.id)

    hidden: list[str] = []
    for credential in credentials:
        for attribute in credential.attributes:
            if (credential.id, attribute) in proved_attributes or attribute in revealed:
                continue
            if attribute not in hidden:
                hidden.append(attribute)

    record = DisclosureRecord(
        proofs=disclosed_proofs,
        public_inputs=public_inputs,
        hidden_attribute_names=hidden,
        revealed_attributes=revealed,
        used_credentials=[
            CredentialReference.of(by_id[cid]) for cid in by_id if cid in used_ids
        ],
        proof_hash=compute_proof_hash(disclosed_proofs),
    )

    private = PrivateDisclosure(
        record=record,
        witnesses=witnesses,
        results={
            name: {**result.model_dump(mode="json"), "value": result.value}
            for name, result in results.items()
        },
    )

    logger.info(
        "disclosure_built",
        conditions=selected,
        proofs=len(disclosed_proofs),
        hidden=len(hidden),
        proof_hash=record.proof_hash,
    )
    return DisclosurePackage(public=record, private=private)
