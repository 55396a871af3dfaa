"""
Condition Matcher Tests
=======================
"""

from datetime import date
from typing import Any

import pytest

from nfcareer.config import DuplicatePolicy
from nfcareer.credentials import (
    Condition,
    ConditionMatcher,
    ConditionStatus,
    is_vacuously_satisfied,
    match_conditions,
    parse_conditions,
)
from nfcareer.zk import CircuitId
from tests.fakes import REFERENCE_DATE


class TestConditionParsing:
    def test_mapping_form(self):
        conditions = parse_conditions({"minToeicScore": 800, "minGpa": 3.0})

        assert [c.name for c in conditions] == ["minToeicScore", "minGpa"]
        assert conditions[0].threshold == 800

    def test_list_form(self):
        conditions = parse_conditions([{"name": "minAge", "threshold": 18}, Condition(name="minGpa")])

        assert [c.name for c in conditions] == ["minAge", "minGpa"]
        assert conditions[1].threshold is None

    def test_unknown_condition(self):
        with pytest.raises(ValueError, match="Unknown condition"):
            parse_conditions({"minSalary": 5_000_000})

    def test_negative_threshold(self):
        with pytest.raises(ValueError):
            parse_conditions({"minToeicScore": -1})

    def test_wrong_shape(self):
        with pytest.raises(TypeError):
            parse_conditions("minToeicScore")

    def test_repeated_name(self):
        with pytest.raises(ValueError, match="more than once"):
            parse_conditions([{"name": "minGpa", "threshold": 3.0}, {"name": "minGpa", "threshold": 3.5}])

    def test_threshold_beyond_circuit(self):
        with pytest.raises(ValueError, match="out of range"):
            parse_conditions({"minToeicScore": 1200})

    def test_vacuous(self):
        assert is_vacuously_satisfied(Condition(name="minGpa", threshold=0))
        assert is_vacuously_satisfied(Condition(name="minGpa"))
        assert not is_vacuously_satisfied(Condition(name="minGpa", threshold=2.5))


class TestConditionMatcher:
    def test_satisfied_and_unsatisfied(self, matcher: ConditionMatcher, credentials):
        results = matcher.match(credentials, {"minToeicScore": 800, "minGpa": 3.9, "minAge": 18})

        assert results["minToeicScore"].status == ConditionStatus.SATISFIED
        assert results["minToeicScore"].satisfied is True
        assert results["minGpa"].status == ConditionStatus.UNSATISFIED
        assert results["minGpa"].satisfied is False
        assert results["minAge"].satisfied is True

    def test_result_order_follows_conditions(self, matcher, credentials):
        results = matcher.match(credentials, {"minGpa": 3.0, "minAge": 18, "minToeicScore": 800})

        assert list(results) == ["minGpa", "minAge", "minToeicScore"]

    def test_boundary_is_inclusive(self, matcher, credentials):
        results = matcher.match(credentials, {"minToeicScore": 850, "minGpa": 3.8})

        assert results["minToeicScore"].satisfied is True
        assert results["minGpa"].satisfied is True

    @pytest.mark.parametrize(
        "credential_type, attribute, value, condition, threshold",
        [
            ("degree", "gpa", 2.996, "minGpa", 3.0),
            ("toeic", "score", 799.6, "minToeicScore", 800),
        ],
    )
    def test_compares_in_circuit_units(self, matcher, credential_type, attribute, value, condition, threshold):
        """Values that round up to the threshold count as meeting it."""
        credential = {"id": "vc-1", "type": credential_type, "attributes": {attribute: value}}

        result = matcher.match([credential], {condition: threshold})[condition]

        assert result.status == ConditionStatus.SATISFIED
        assert result.value == value

    def test_rounding_down_stays_unsatisfied(self, matcher):
        degree = {"id": "vc-1", "type": "degree", "attributes": {"gpa": 2.994}}

        assert matcher.match([degree], {"minGpa": 3.0})["minGpa"].satisfied is False

    def test_value_beyond_circuit_is_missing(self, matcher):
        degree = {"id": "vc-1", "type": "degree", "attributes": {"gpa": 10.5}}

        result = matcher.match([degree], {"minGpa": 3.0})["minGpa"]

        assert result.status == ConditionStatus.MISSING_ATTRIBUTE
        assert result.value is None

    def test_result_fields(self, matcher, credentials):
        result = matcher.match(credentials, {"minToeicScore": 800})["minToeicScore"]

        assert result.circuit_id == CircuitId.TOEIC
        assert result.credential_id == "vc-toeic-001"
        assert result.condition_label == ">= 800"
        assert result.threshold == 800
        assert result.value == 850

    def test_gpa_label(self, matcher, credentials):
        result = matcher.match(credentials, {"minGpa": 3.5})["minGpa"]

        assert result.condition_label == "GPA >= 3.5"

    def test_value_never_serialised(self, matcher, credentials):
        result = matcher.match(credentials, {"minToeicScore": 800})["minToeicScore"]

        dumped = result.model_dump()
        assert "value" not in dumped
        assert dumped["satisfied"] is True
        assert "850" not in result.model_dump_json()
        assert "850" not in repr(result)

    def test_missing_credential_is_distinct_from_false(self, matcher, toeic_vc):
        results = matcher.match([toeic_vc], {"minGpa": 3.0})

        assert results["minGpa"].status == ConditionStatus.MISSING_CREDENTIAL
        assert results["minGpa"].satisfied is None
        assert results["minGpa"].evaluated is False
        assert results["minGpa"].credential_id is None

    def test_missing_attribute(self, matcher):
        degree = {"id": "vc-d", "type": "degree", "attributes": {"university": "Kyoto"}}

        result = matcher.match([degree], {"minGpa": 3.0})["minGpa"]

        assert result.status == ConditionStatus.MISSING_ATTRIBUTE
        assert result.satisfied is None
        assert result.credential_id == "vc-d"

    def test_unreadable_attribute(self, matcher):
        toeic = {"id": "vc-t", "type": "toeic", "attributes": {"score": "pending"}}

        result = matcher.match([toeic], {"minToeicScore": 700})["minToeicScore"]

        assert result.status == ConditionStatus.MISSING_ATTRIBUTE

    def test_vacuous_threshold(self, matcher, credentials):
        """Zero or absent threshold needs only the credential."""
        results = matcher.match(credentials, [{"name": "minGpa", "threshold": 0}, {"name": "minToeicScore"}])

        assert results["minGpa"].status == ConditionStatus.VACUOUS
        assert results["minGpa"].satisfied is True
        assert results["minGpa"].condition_label == "credential present"
        assert results["minToeicScore"].status == ConditionStatus.VACUOUS

    def test_vacuous_without_credential(self, matcher, toeic_vc):
        result = matcher.match([toeic_vc], {"minGpa": 0})["minGpa"]

        assert result.status == ConditionStatus.MISSING_CREDENTIAL
        assert result.satisfied is None

    def test_vacuous_with_missing_attribute(self, matcher):
        degree = {"id": "vc-d", "type": "degree", "attributes": {}}

        result = matcher.match([degree], {"minGpa": 0})["minGpa"]

        assert result.status == ConditionStatus.VACUOUS
        assert result.satisfied is True
        assert result.value is None

    def test_age_from_date_of_birth(self, identity_vc):
        """The day before the 18th birthday is still 17."""
        before = ConditionMatcher(today=date(2013, 6, 9)).match([identity_vc], {"minAge": 18})["minAge"]
        on = ConditionMatcher(today=date(2013, 6, 10)).match([identity_vc], {"minAge": 18})["minAge"]

        assert before.value == 17
        assert before.satisfied is False
        assert on.value == 18
        assert on.satisfied is True

    def test_age_on_reference_date(self, matcher, identity_vc):
        result = matcher.match([identity_vc], {"minAge": 30})["minAge"]

        assert result.value == 30
        assert result.satisfied is True

    def test_w3c_credentials_accepted(self, matcher):
        w3c = {
            "@context": ["https://www.w3.org/2018/credentials/v1"],
            "type": ["VerifiableCredential", "TOEICCredential"],
            "issuer": "IIBC",
            "issuanceDate": "2024-07-01T00:00:00Z",
            "credentialSubject": {"score": 905},
        }

        assert matcher.match([w3c], {"minToeicScore": 900})["minToeicScore"].satisfied is True

    def test_empty_inputs(self, matcher, credentials):
        assert matcher.match(credentials, {}) == {}
        assert matcher.match([], {"minAge": 18})["minAge"].satisfied is None

    def test_rejects_non_list_credentials(self, matcher, toeic_vc):
        with pytest.raises(TypeError):
            matcher.match(toeic_vc, {"minToeicScore": 800})
        with pytest.raises(TypeError):
            matcher.match("vc-toeic-001", {"minToeicScore": 800})

    def test_rejects_bad_conditions(self, matcher, credentials):
        with pytest.raises(TypeError):
            matcher.match(credentials, 800)

    def test_match_conditions_helper(self, credentials):
        results = match_conditions(credentials, {"minToeicScore": 800}, DuplicatePolicy.FIRST)

        assert results["minToeicScore"].satisfied is True


class TestDuplicatePolicy:
    @pytest.fixture
    def toeic_history(self) -> list[dict[str, Any]]:
        return [
            {"id": "vc-old", "type": "toeic", "issuedAt": "2021-01-10T00:00:00Z", "attributes": {"score": 920}},
            {"id": "vc-new", "type": "toeic", "issuedAt": "2024-05-10T00:00:00Z", "attributes": {"score": 780}},
            {"id": "vc-mid", "type": "toeic", "issuedAt": "2022-08-01T00:00:00Z", "attributes": {"score": 850}},
        ]

    def test_first(self, toeic_history):
        matcher = ConditionMatcher(DuplicatePolicy.FIRST, today=REFERENCE_DATE)
        result = matcher.match(toeic_history, {"minToeicScore": 800})["minToeicScore"]

        assert result.credential_id == "vc-old"
        assert result.satisfied is True

    def test_most_recent(self, toeic_history):
        matcher = ConditionMatcher(DuplicatePolicy.MOST_RECENT, today=REFERENCE_DATE)
        result = matcher.match(toeic_history, {"minToeicScore": 800})["minToeicScore"]

        assert result.credential_id == "vc-new"
        assert result.satisfied is False

    def test_highest(self, toeic_history):
        matcher = ConditionMatcher(DuplicatePolicy.HIGHEST, today=REFERENCE_DATE)
        result = matcher.match(toeic_history, {"minToeicScore": 900})["minToeicScore"]

        assert result.credential_id == "vc-old"
        assert result.satisfied is True

    def test_most_recent_without_dates_falls_back_to_first(self):
        history = [
            {"id": "vc-a", "type": "toeic", "attributes": {"score": 700}},
            {"id": "vc-b", "type": "toeic", "attributes": {"score": 900}},
        ]
        matcher = ConditionMatcher(DuplicatePolicy.MOST_RECENT, today=REFERENCE_DATE)

        assert matcher.match(history, {"minToeicScore": 800})["minToeicScore"].credential_id == "vc-a"

    def test_default_policy_from_settings(self):
        assert ConditionMatcher().duplicate_policy == DuplicatePolicy.FIRST
