"""
Disclosure Verification
=======================

Re-verifies a disclosure record at the verifying party. Nothing the record
claims is trusted: each claimed threshold and outcome is checked against
the proof's public signals, and each proof is verified again.
"""

from nfcareer.credentials.conditions import ConditionStatus, get_definition
from nfcareer.disclosure.models import (
    ConditionVerification,
    DisclosedCondition,
    DisclosedProof,
    DisclosureRecord,
    DisclosureVerification,
    VerificationStatus,
)
from nfcareer.logging import get_logger
from nfcareer.zk.circuits import get_circuit
from nfcareer.zk.errors import MalformedProofError, ProvingError
from nfcareer.zk.verifier import CredentialVerifier


logger = get_logger(__name__)


def _rejected(name: str, error: str) -> ConditionVerification:
    return ConditionVerification(condition=name, status=VerificationStatus.REJECTED, error=error)


def _claim_mismatch(claim: DisclosedCondition, entry: DisclosedProof) -> str | None:
    """Describe how a claim differs from its proof's public signals, if it does."""
    try:
        definition = get_definition(entry.condition)
    except ValueError as e:
        return str(e)
    if definition.circuit_id != entry.circuit_id or claim.circuit_id != entry.circuit_id:
        return f"Condition '{entry.condition}' cannot be proved by circuit '{entry.circuit_id.value}'"

    spec = get_circuit(entry.circuit_id)
    if len(entry.public_signals) != spec.public_signal_count:
        return f"Expected {spec.public_signal_count} public signals"
    if not all(s.isdigit() for s in entry.public_signals):
        return "Non-numeric public signal"

    try:
        threshold = spec.to_field(claim.threshold or 0, signal=spec.threshold_signal)
    except ProvingError as e:
        return str(e)
    if int(entry.public_signals[0]) != threshold:
        return "Claimed threshold does not match the proof"
    if claim.satisfied is None or int(entry.public_signals[1]) != int(claim.satisfied):
        return "Claimed outcome does not match the proof"
    return None


async def verify_disclosure(
    record: DisclosureRecord,
    verifier: CredentialVerifier,
) -> DisclosureVerification:
    """
    Verify every condition in a disclosure record.

    Skipped proofs are accepted only for vacuous conditions and stay
    labelled `skipped`. Conditions listed without evaluation are reported
    as `unevaluated` and do not count as verified or rejected.

    Raises:
        MissingAssetError: If a verification key is not provisioned
        ToolchainError: If snarkjs cannot be run
    """
    results: list[ConditionVerification] = []
    proved = {p.condition: p for p in record.proofs}

    for entry in record.proofs:
        name = entry.condition
        claim = record.public_inputs.get(name)
        if claim is None:
            results.append(_rejected(name, "Proof has no matching public input"))
            continue

        if entry.skipped:
            if claim.status == ConditionStatus.VACUOUS and claim.satisfied is True:
                results.append(
                    ConditionVerification(
                        condition=name,
                        status=VerificationStatus.SKIPPED,
                        satisfied=True,
                    )
                )
            else:
                results.append(_rejected(name, "Skipped proof for a non-vacuous condition"))
            continue

        mismatch = _claim_mismatch(claim, entry)
        if mismatch:
            results.append(_rejected(name, mismatch))
            continue

        try:
            valid = await verifier.verify(entry.circuit_id, entry.proof, entry.public_signals)
        except MalformedProofError as e:
            results.append(_rejected(name, str(e)))
            continue

        if valid:
            results.append(
                ConditionVerification(
                    condition=name,
                    status=VerificationStatus.VERIFIED,
                    satisfied=entry.public_signals[1] == "1",
                )
            )
        else:
            results.append(_rejected(name, "Proof verification failed"))

    for name, claim in record.public_inputs.items():
        if name in proved:
            continue
        if claim.satisfied is None:
            results.append(
                ConditionVerification(condition=name, status=VerificationStatus.UNEVALUATED)
            )
        else:
            results.append(_rejected(name, "Claimed outcome has no proof"))

    all_verified = all(
        r.accepted for r in results if r.status != VerificationStatus.UNEVALUATED
    )

    logger.info(
        "disclosure_verified",
        proof_hash=record.proof_hash,
        all_verified=all_verified,
        statuses={r.condition: r.status.value for r in results},
    )
    return DisclosureVerification(all_verified=all_verified, results=results)
