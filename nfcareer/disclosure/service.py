"""
Disclosure Service
==================

Runs one disclosure request end to end:

    credentials -> matcher -> prover (per selected condition) -> builder

Selected conditions are proved concurrently; each proof touches only its
own witness and threshold.

Version: 0.1.0
"""

import asyncio
from typing import Any, Iterable, Mapping, Sequence

from nfcareer.credentials.conditions import ConditionResult, ConditionStatus
from nfcareer.credentials.matcher import ConditionMatcher
from nfcareer.credentials.models import VerifiableCredential
from nfcareer.credentials.w3c import load_credential
from nfcareer.disclosure.builder import DisclosureError, build_disclosure
from nfcareer.disclosure.models import DisclosurePackage
from nfcareer.logging import get_logger
from nfcareer.zk.models import ProofResult
from nfcareer.zk.prover import CredentialProver


logger = get_logger(__name__)


class DisclosureService:
    """
    Builds disclosure packages from a holder's credentials.

    Usage:
        service = DisclosureService(CredentialProver())
        package = await service.create(
            credentials,
            {"minToeicScore": 800, "minGpa": 3.0},
            disclose=["minToeicScore"],
            reveal=["university"],
        )
    """

    def __init__(
        self,
        prover: CredentialProver,
        matcher: ConditionMatcher | None = None,
    ):
        self.prover = prover
        self.matcher = matcher or ConditionMatcher()

    async def prove_condition(self, result: ConditionResult) -> ProofResult:
        """
        Prove one evaluated condition.

        Vacuous conditions are proved against threshold 0. When the
        credential holds no usable value there is nothing to prove and a
        skipped result is returned.
        """
        if result.status == ConditionStatus.VACUOUS and result.value is None:
            return ProofResult.skipped_for(result.circuit_id)

        threshold = result.threshold or 0
        return await self.prover.generate(result.circuit_id, result.value, threshold)

    async def create(
        self,
        credentials: Sequence[VerifiableCredential | Mapping[str, Any]],
        conditions: Any,
        disclose: Iterable[str] | None = None,
        reveal: Iterable[str] = (),
    ) -> DisclosurePackage:
        """
        Evaluate, prove and package.

        Args:
            credentials: Holder's credentials (either format)
            conditions: Conditions as accepted by ConditionMatcher.match
            disclose: Conditions to include; defaults to every satisfied one
            reveal: Attribute names to show in plain text

        Raises:
            DisclosureError: If a selected condition was not requested
            ProvingError / MissingAssetError: From the prover, unchanged
        """
        loaded = [load_credential(c) for c in credentials]
        results = self.matcher.match(loaded, conditions)

        if disclose is None:
            selected = [name for name, r in results.items() if r.satisfied]
        else:
            selected = list(dict.fromkeys(disclose))
            unknown = [name for name in selected if name not in results]
            if unknown:
                raise DisclosureError(f"Conditions not requested: {unknown}")

        to_prove = [results[name] for name in selected if results[name].evaluated]
        proved = await asyncio.gather(*(self.prove_condition(r) for r in to_prove))
        proofs = {r.name: p for r, p in zip(to_prove, proved)}

        logger.info(
            "disclosure_proofs_generated",
            selected=selected,
            proved=[name for name, p in proofs.items() if not p.skipped],
            skipped=[name for name, p in proofs.items() if p.skipped],
        )

        return build_disclosure(results, proofs, selected, loaded, reveal)
