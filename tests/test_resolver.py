"""
Unit tests for the field resolver and the computed rule catalog.
"""

import logging
from datetime import datetime
from unittest.mock import patch

import pytest

from claimform import rules
from claimform.builder import build_dataset
from claimform.errors import UnknownRuleError
from claimform.field_mapping import (
    AI_FIELDS,
    DISABILITY_FIELD_1,
    DISABILITY_PROMPT,
    FIELD_MAPPINGS,
    AIMapping,
    CheckboxMapping,
    ComputedMapping,
    MappingKind,
    MultiChoiceMapping,
    RandomMapping,
    StaticMapping,
)
from claimform.resolver import AIRequest, FieldResolver
from claimform.rng import DeterministicRandom

NOW = datetime(2026, 3, 15, 10, 30, 0)


def _dataset(seed=4242, **probabilities):
    return build_dataset(seed, "resolver-test", NOW, probabilities=probabilities or None)


def _with_states(dataset, **states):
    merged = {**dataset.checkbox_states, **states}
    return dataset.model_copy(update={"checkbox_states": merged})


class TestCatalog:

    @pytest.mark.parametrize("seed", [0, 3, 555, 123456])
    def test_every_mapping_resolves(self, seed):
        dataset = _dataset(seed)
        resolver = FieldResolver()
        for name, mapping in FIELD_MAPPINGS.items():
            resolver.resolve(name, mapping, dataset)

    def test_every_computed_rule_exists(self):
        for name, mapping in FIELD_MAPPINGS.items():
            if isinstance(mapping, (ComputedMapping, MultiChoiceMapping)):
                assert mapping.rule in rules.RULES, name

    def test_ai_fields(self):
        assert DISABILITY_FIELD_1 in AI_FIELDS
        assert all(FIELD_MAPPINGS[name].kind is MappingKind.AI for name in AI_FIELDS)

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            FIELD_MAPPINGS["new field"] = StaticMapping("x")


class TestResolve:

    def test_random_matches_fresh_draw(self):
        dataset = _dataset()
        value = FieldResolver().resolve("5 - City", RandomMapping("city"), dataset)
        assert value == DeterministicRandom(dataset.seed).fresh("city")

    def test_one_stream_per_resolver(self):
        dataset = _dataset()
        with patch("claimform.resolver.DeterministicRandom", wraps=DeterministicRandom) as rng_class:
            resolver = FieldResolver()
            for name, mapping in FIELD_MAPPINGS.items():
                resolver.resolve(name, mapping, dataset)
        assert rng_class.call_count == 1

    def test_shared_stream_does_not_leak_between_runs(self):
        first, second = _dataset(seed=11), _dataset(seed=12)
        resolver = FieldResolver()
        resolver.resolve("5 - City", RandomMapping("city"), first)
        resolver.resolve("Some Unmapped Box", CheckboxMapping(0.5), first)
        assert resolver.resolve("5 - City", RandomMapping("city"), second) == (
            DeterministicRandom(second.seed).fresh("city")
        )
        assert resolver.resolve("Some Unmapped Box", CheckboxMapping(0.5), second) is (
            FieldResolver().resolve("Some Unmapped Box", CheckboxMapping(0.5), second)
        )

    def test_static(self):
        assert FieldResolver().resolve("6 - State", StaticMapping("NY"), _dataset()) == "NY"

    def test_ai_returns_request(self):
        request = FieldResolver().resolve(
            DISABILITY_FIELD_1, AIMapping(DISABILITY_PROMPT, "disability_description"), _dataset()
        )
        assert request == AIRequest(DISABILITY_FIELD_1, "disability_description", DISABILITY_PROMPT)

    def test_checkbox_from_state_key(self):
        dataset = _with_states(_dataset(), union_member=True)
        assert FieldResolver().resolve("73 - Union Member?", CheckboxMapping(0.15), dataset) is True
        dataset = _with_states(dataset, union_member=False)
        assert FieldResolver().resolve("73 - Union Member?", CheckboxMapping(0.15), dataset) is False

    def test_checkbox_fixed_values(self):
        resolver = FieldResolver()
        dataset = _dataset()
        work_related = "21 - Is the employee's disability work-related?"
        assert resolver.resolve(work_related, FIELD_MAPPINGS[work_related], dataset) is False
        assert resolver.resolve("14 - Employees Role", FIELD_MAPPINGS["14 - Employees Role"], dataset) is True

    def test_savings_is_opposite_of_checking(self):
        resolver = FieldResolver()
        for checking in (True, False):
            dataset = _with_states(_dataset(), checking_account=checking)
            assert resolver.resolve("4 Checking account", CheckboxMapping(0.8), dataset) is checking
            assert resolver.resolve("4 Savings account", CheckboxMapping(0.2), dataset) is (not checking)

    def test_unmapped_checkbox_is_stable(self):
        dataset = _dataset()
        resolver = FieldResolver()
        first = resolver.resolve("Some new box", CheckboxMapping(0.5), dataset)
        assert all(resolver.resolve("Some new box", CheckboxMapping(0.5), dataset) == first for _ in range(5))

    def test_unmapped_checkbox_probability(self):
        dataset = _dataset()
        assert FieldResolver().resolve("Some new box", CheckboxMapping(1.0), dataset) is True
        resolver = FieldResolver(probabilities={"Some new box": 0.0})
        assert resolver.resolve("Some new box", CheckboxMapping(1.0), dataset) is False

    def test_gender_selection(self):
        dataset = _dataset()
        assert FieldResolver().resolve("17 - Gender", MultiChoiceMapping("gender_selection"), dataset) == dataset.claimant.gender

    def test_unknown_rule_raises(self, caplog):
        with caplog.at_level(logging.WARNING):
            with pytest.raises(UnknownRuleError):
                FieldResolver().resolve("x", ComputedMapping("no_such_rule"), _dataset())
        assert any("Unknown computed rule" in r.message for r in caplog.records)

    def test_unknown_random_method_raises(self):
        with pytest.raises(UnknownRuleError):
            FieldResolver().resolve("x", RandomMapping("no_such_faker_method"), _dataset())


class TestRules:

    def test_date_parts(self):
        dataset = _dataset()
        dob = dataset.claimant.date_of_birth
        assert rules.compute("dob_month", dataset) == f"{dob.month:02d}"
        assert rules.compute("dob_day", dataset) == f"{dob.day:02d}"
        assert rules.compute("dob_year", dataset) == str(dob.year)

    def test_formatted_dates(self):
        dataset = _dataset()
        assert rules.compute("signature_date", dataset) == "03/15/2026"
        assert rules.compute("last_day_worked", dataset) == dataset.dates.last_day_worked.strftime("%m/%d/%Y")

    def test_return_to_work_blank_when_not_recovered(self):
        dataset = _dataset(has_recovered=0.0)
        assert rules.compute("return_to_work_month", dataset) == ""
        assert rules.compute("return_to_work_year", dataset) == ""

    def test_return_to_work_when_recovered(self):
        dataset = _dataset(has_recovered=1.0)
        assert rules.compute("return_to_work_year", dataset) == "2026"

    def test_weekly_lookups(self):
        dataset = _dataset()
        week3 = dataset.wages.weekly_wages[2]
        assert rules.compute("weekly_wage", dataset, 3) == f"{week3.gross_amount:.2f}"
        assert rules.compute("days_worked_week", dataset, 3) == str(week3.days_worked)
        assert rules.compute("week_end_date", dataset, 3) == week3.week_end_date.strftime("%m/%d/%Y")
        assert rules.compute("weekly_wage", dataset, 9) == ""

    def test_average_weekly_wage_two_decimals(self):
        dataset = _dataset()
        assert rules.compute("average_weekly_wage", dataset) == f"{dataset.wages.average_weekly_wage:.2f}"

    def test_employer_phone_split(self):
        dataset = _dataset()
        area = rules.compute("employer_phone_area_code", dataset)
        number = rules.compute("employer_phone_number", dataset)
        assert len(area) == 3 and area.isdigit()
        assert len(number) == 8 and number[3] == "-"

    @pytest.mark.parametrize("phone,expected", [
        ("(212) 555-0199", ("212", "555-0199")),
        ("212.555.0199", ("212", "555-0199")),
        ("2125550199", ("212", "555-0199")),
        ("not a phone", ("", "not a phone")),
    ])
    def test_split_phone(self, phone, expected):
        assert rules.split_phone(phone) == expected

    def test_received_or_claimed_none_without_benefits(self):
        dataset = _with_states(_dataset(), **{key: False for key in rules.BENEFIT_STATE_KEYS})
        assert rules.compute("received_or_claimed", dataset) is None

    def test_received_or_claimed_stable_with_benefit(self):
        states = {key: False for key in rules.BENEFIT_STATE_KEYS}
        states["workers_comp"] = True
        dataset = _with_states(_dataset(), **states)
        first = rules.compute("received_or_claimed", dataset)
        assert first in ("Received", "Claimed")
        assert rules.compute("received_or_claimed", dataset) == first

    @pytest.mark.parametrize("disability,pfl,expected", [
        (True, True, "Both"),
        (True, False, "NYS#20Disability"),
        (False, True, "PFL"),
        (False, False, "None"),
    ])
    def test_prior_leave_type(self, disability, pfl, expected):
        dataset = _with_states(_dataset(), prior_disability=disability, prior_pfl=pfl)
        assert rules.compute("prior_leave_type", dataset) == expected

    def test_union_rules(self):
        member = _dataset(union_member=1.0)
        assert rules.compute("union_name", member) == member.union.name
        assert rules.compute("union_member_checkbox", member) is True
        non_member = _dataset(union_member=0.0)
        assert rules.compute("union_name", non_member) == ""
        assert rules.compute("union_member_checkbox", non_member) is False

    @pytest.mark.parametrize("member", [True, False])
    def test_union_member_field_follows_state(self, member):
        field = "11 - Is the employee a member of a union?"
        dataset = _with_states(_dataset(), union_member=member)
        assert FieldResolver().resolve(field, FIELD_MAPPINGS[field], dataset) is member

    def test_signatory(self):
        dataset = _dataset()
        employer = dataset.employer
        assert rules.compute("employer_signatory_name_title", dataset) == (
            f"{employer.contact_name}, {employer.contact_title}"
        )
