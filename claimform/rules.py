"""
Computed rule catalog.

Every ComputedMapping and MultiChoiceMapping names one rule here. A rule is
a pure function of the dataset (plus optional args from the mapping) that
returns the string written into the field. Multi-choice rules return an
option label, or None when no option applies.
"""

import logging
import re
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from claimform.builder import checkbox_state, format_date
from claimform.errors import UnknownRuleError
from claimform.rng import DeterministicRandom, derive_seed
from claimform.schema import Dataset, WeekWage

logger = logging.getLogger(__name__)

Rule = Callable[..., Any]

PHONE_PATTERN = re.compile(r"\(?(\d{3})\)?[\s.-]?(\d{3})[\s.-]?(\d{4})")

# Any of these being true means item 13 needs a Received/Claimed answer
BENEFIT_STATE_KEYS = (
    "receiving_wages",
    "unemployment_benefits",
    "paid_family_leave",
    "workers_comp",
    "no_fault_accident",
    "third_party_injury",
    "long_term_disability",
)


def _month(value: Optional[date]) -> str:
    return f"{value.month:02d}" if value else ""


def _day(value: Optional[date]) -> str:
    return f"{value.day:02d}" if value else ""


def _year(value: Optional[date]) -> str:
    return str(value.year) if value else ""


def _date_or_blank(value: Optional[date]) -> str:
    return format_date(value) if value else ""


def _week(dataset: Dataset, week: int) -> Optional[WeekWage]:
    for entry in dataset.wages.weekly_wages:
        if entry.week_number == week:
            return entry
    return None


def split_phone(phone: str):
    """(area code, "NNN-NNNN"), or ("", phone) when the number does not parse."""
    match = PHONE_PATTERN.search(phone or "")
    if not match:
        return "", phone or ""
    area, prefix, line = match.groups()
    return area, f"{prefix}-{line}"


_answer_rng = DeterministicRandom()


def received_or_claimed(dataset: Dataset) -> Optional[str]:
    """
    Item 13 follow-up. Only answered when some benefit box is checked;
    drawn from its own seed so the answer is stable across fills.
    """
    if not any(dataset.checkbox_states.get(key, False) for key in BENEFIT_STATE_KEYS):
        return None
    _answer_rng.seed(derive_seed(dataset.seed, "received_or_claimed"))
    return "Received" if _answer_rng.boolean(0.5) else "Claimed"


def prior_leave_type(dataset: Dataset) -> str:
    """Part C item 47, derived from the claimant's own prior benefit answers."""
    disability = dataset.checkbox_states.get("prior_disability", False)
    pfl = dataset.checkbox_states.get("prior_pfl", False)
    if disability and pfl:
        return "Both"
    if disability:
        return "NYS#20Disability"
    if pfl:
        return "PFL"
    return "None"


def _employer_signatory(dataset: Dataset) -> str:
    employer = dataset.employer
    return f"{employer.contact_name}, {employer.contact_title}"


_RULES: Dict[str, Rule] = {
    # Claimant
    "claimant_email": lambda d: d.claimant.email,
    "ssn_part1": lambda d: d.claimant.ssn.part1,
    "ssn_part2": lambda d: d.claimant.ssn.part2,
    "ssn_part3": lambda d: d.claimant.ssn.part3,
    "dob_month": lambda d: _month(d.claimant.date_of_birth),
    "dob_day": lambda d: _day(d.claimant.date_of_birth),
    "dob_year": lambda d: _year(d.claimant.date_of_birth),

    # Disability timeline
    "disability_start_month": lambda d: _month(d.dates.disability_start),
    "disability_start_day": lambda d: _day(d.dates.disability_start),
    "disability_start_year": lambda d: _year(d.dates.disability_start),
    "return_to_work_month": lambda d: _month(d.conditional_data.return_to_work_date),
    "return_to_work_day": lambda d: _day(d.conditional_data.return_to_work_date),
    "return_to_work_year": lambda d: _year(d.conditional_data.return_to_work_date),
    "worked_for_wages_dates": lambda d: d.conditional_data.worked_for_wages_dates,
    "employment_start_date": lambda d: format_date(d.dates.employment_start),
    "hire_date": lambda d: format_date(d.dates.employment_start),
    "last_day_worked": lambda d: format_date(d.dates.last_day_worked),
    "signature_date": lambda d: format_date(d.dates.signature_date),

    # Employer
    "employer_business_name": lambda d: d.employer.name,
    "employer_address": lambda d: d.employer.address,
    "employer_city_state_zip": lambda d: f"{d.employer.city}, {d.employer.state} {d.employer.zip}",
    "employer_full_address": lambda d: (
        f"{d.employer.address}, {d.employer.city}, {d.employer.state} {d.employer.zip}"
    ),
    "employer_phone": lambda d: d.employer.phone,
    "employer_fein1": lambda d: d.employer.fein.part1,
    "employer_fein2": lambda d: d.employer.fein.part2,
    "employer_contact_name": lambda d: d.employer.contact_name,
    "employer_contact_phone": lambda d: d.employer.contact_phone,
    "employer_email": lambda d: d.employer.contact_email,
    "employer_signatory_name_title": _employer_signatory,
    "employer_phone_area_code": lambda d: split_phone(d.employer.contact_phone)[0],
    "employer_phone_number": lambda d: split_phone(d.employer.contact_phone)[1],
    "policy_number": lambda d: d.employer.policy_number,

    # Wages
    "average_weekly_wage": lambda d: f"{d.wages.average_weekly_wage:.2f}",
    "week_end_date": lambda d, week: _date_or_blank(getattr(_week(d, week), "week_end_date", None)),
    "days_worked_week": lambda d, week: str(_week(d, week).days_worked) if _week(d, week) else "",
    "weekly_wage": lambda d, week: f"{_week(d, week).gross_amount:.2f}" if _week(d, week) else "",
    "wages_continued_type": lambda d: d.conditional_data.wages_continued_type,

    # Union
    "union_name": lambda d: d.union.name if d.union else "",
    "union_member_checkbox": lambda d: checkbox_state(d, "union_member"),

    # Unemployment
    "unemployment_explanation": lambda d: d.conditional_data.unemployment_explanation,
    "unemployment_periods": lambda d: d.conditional_data.unemployment_periods,

    # Item 13-15 prior benefits
    "claimed_from": lambda d: d.prior_benefits.claimed_from,
    "claimed_period_start_month": lambda d: _month(d.prior_benefits.claimed_period_start),
    "claimed_period_start_day": lambda d: _day(d.prior_benefits.claimed_period_start),
    "claimed_period_start_year": lambda d: _year(d.prior_benefits.claimed_period_start),
    "claimed_period_end_month": lambda d: _month(d.prior_benefits.claimed_period_end),
    "claimed_period_end_day": lambda d: _day(d.prior_benefits.claimed_period_end),
    "claimed_period_end_year": lambda d: _year(d.prior_benefits.claimed_period_end),
    "prior_disability_paid_by": lambda d: d.prior_benefits.prior_disability_paid_by,
    "prior_disability_start_month": lambda d: _month(d.prior_benefits.prior_disability_start),
    "prior_disability_start_day": lambda d: _day(d.prior_benefits.prior_disability_start),
    "prior_disability_start_year": lambda d: _year(d.prior_benefits.prior_disability_start),
    "prior_disability_end_month": lambda d: _month(d.prior_benefits.prior_disability_end),
    "prior_disability_end_day": lambda d: _day(d.prior_benefits.prior_disability_end),
    "prior_disability_end_year": lambda d: _year(d.prior_benefits.prior_disability_end),
    "prior_pfl_paid_by": lambda d: d.prior_benefits.prior_pfl_paid_by,
    "prior_pfl_start_month": lambda d: _month(d.prior_benefits.prior_pfl_start),
    "prior_pfl_start_day": lambda d: _day(d.prior_benefits.prior_pfl_start),
    "prior_pfl_start_year": lambda d: _year(d.prior_benefits.prior_pfl_start),
    "prior_pfl_end_month": lambda d: _month(d.prior_benefits.prior_pfl_end),
    "prior_pfl_end_day": lambda d: _day(d.prior_benefits.prior_pfl_end),
    "prior_pfl_end_year": lambda d: _year(d.prior_benefits.prior_pfl_end),
    "prior_disability_dates": lambda d: d.conditional_data.prior_disability_dates,
    "prior_pfl_dates": lambda d: d.conditional_data.prior_pfl_dates,

    # Multi-choice
    "gender_selection": lambda d: d.claimant.gender,
    "received_or_claimed": received_or_claimed,
    "prior_leave_type": prior_leave_type,
}

RULES: Mapping[str, Rule] = MappingProxyType(_RULES)


def compute(rule: str, dataset: Dataset, *args: Any) -> Any:
    """
    Evaluate a named rule against the dataset.

    Raises:
        UnknownRuleError: if the rule is not in the catalog
    """
    fn = RULES.get(rule)
    if fn is None:
        logger.warning(f"Unknown computed rule: {rule}")
        raise UnknownRuleError(f"Unknown computed rule: {rule}")
    return fn(dataset, *args)
