"""
Field mapping catalog for the NY DB-450 claim form.

Each form field name maps to one declarative descriptor:
  - RandomMapping: Faker/facade draw, re-seeded to the run's base seed
  - ComputedMapping: named rule over the dataset (see rules.py)
  - StaticMapping: fixed literal
  - AIMapping: AI-generated prose, cached per category
  - CheckboxMapping: boolean from the dataset's checkbox states
  - MultiChoiceMapping: named rule returning one option label

Field names are copied verbatim from the form, including stray spaces,
tabs and typos. They are tied to one form revision.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Tuple, Union


class MappingKind(str, Enum):
    RANDOM = "random"
    COMPUTED = "computed"
    STATIC = "static"
    AI = "ai"
    CHECKBOX = "checkbox"
    MULTI_CHOICE = "checkbox-multi"


@dataclass(frozen=True)
class RandomMapping:
    method: str
    args: Tuple[Any, ...] = ()
    kind: MappingKind = MappingKind.RANDOM


@dataclass(frozen=True)
class ComputedMapping:
    rule: str
    args: Tuple[Any, ...] = ()
    kind: MappingKind = MappingKind.COMPUTED


@dataclass(frozen=True)
class StaticMapping:
    value: str = ""
    kind: MappingKind = MappingKind.STATIC


@dataclass(frozen=True)
class AIMapping:
    prompt: str
    category: str
    kind: MappingKind = MappingKind.AI


@dataclass(frozen=True)
class CheckboxMapping:
    probability: float = 0.5
    kind: MappingKind = MappingKind.CHECKBOX


@dataclass(frozen=True)
class MultiChoiceMapping:
    rule: str
    kind: MappingKind = MappingKind.MULTI_CHOICE


FieldMapping = Union[
    RandomMapping, ComputedMapping, StaticMapping, AIMapping, CheckboxMapping, MultiChoiceMapping
]


def _weekly(week: int, names: Tuple[str, str, str]) -> Dict[str, FieldMapping]:
    """Three consecutive fields (end date, days worked, gross) for one wage week."""
    return {
        names[0]: ComputedMapping("week_end_date", (week,)),
        names[1]: ComputedMapping("days_worked_week", (week,)),
        names[2]: ComputedMapping("weekly_wage", (week,)),
    }


# Part A wage table field names (the form numbers them 47-70, with a typo at 63)
_PART_A_WAGE_FIELDS = [
    ("47 - Last Day Worked", "48 - No of Days Worked", "49 - Gross Amount Paid"),
    ("50 - Last Day Worked", "51 - No of Days Worked", "52 - Gross Amount Paid"),
    ("53 - Last Day Worked", "54 - No of Days Worked", "55 - Gross Amount Paid"),
    ("56 - Last Day Worked", "57 - No of Days Worked", "58 - Gross Amount Paid"),
    ("59 - Last Day Worked", "60 - No of Days Worked", "61 - Gross Amount Paid"),
    ("62 - Last Day Worked", "63- No of Days Worked", "64 - Gross Amount Paid"),
    ("65 - Last Day Worked", "66 - No of Days Worked", "67 - Gross Amount Paid"),
    ("68 - Last Day Worked", "69 - No of Days Worked", "70 - Gross Amount Paid"),
]

# Part C wage table field names (22-45)
_PART_C_WAGE_FIELDS = [
    (f"{n} - Week ending date", f"{n + 1} - No of days worked", f"{n + 2} - Gross amount paid")
    for n in range(22, 46, 3)
]


DISABILITY_PROMPT = (
    "Generate a brief medical disability description (1-2 sentences) for a non-work-related "
    "condition like back pain, knee injury, or recovery from surgery. Be specific but concise."
)
DISABILITY_CONTINUED_PROMPT = (
    "Continue the disability description with additional details about how the injury/condition "
    "occurred, when it started, and current limitations."
)

DISABILITY_FIELD_1 = "20 -  Describe your disability if injury also state how when and where it occurred 1"
DISABILITY_FIELD_2 = "21 -  Describe your disability if injury also state how when and where it occurred 2"


_FIELD_MAPPINGS: Dict[str, FieldMapping] = {
    # ===========================================
    # PART A - CLAIMANT'S INFORMATION (page 1)
    # ===========================================
    "2 - Last Name": RandomMapping("last_name"),
    "3 - First Name": RandomMapping("first_name"),
    "3a - Middle Initial": RandomMapping("alpha", (1,)),
    "4 - Mailing Address Street  Apt": RandomMapping("street_address"),
    "5 - City": RandomMapping("city"),
    "6 - State": StaticMapping("NY"),
    "7 - Zip": RandomMapping("zipcode"),
    "9 - Daytime Phone": RandomMapping("numerify", ("###-###-####",)),
    "10 - Email Address": ComputedMapping("claimant_email"),

    "11 - Social Security 1": ComputedMapping("ssn_part1"),
    "12 - Social 2": ComputedMapping("ssn_part2"),
    "13 - Social Security": ComputedMapping("ssn_part3"),

    "14 - Date of Birth": ComputedMapping("dob_month"),
    "15 - Date of Birth": ComputedMapping("dob_day"),
    "16 - Date of Birth": ComputedMapping("dob_year"),

    "17 - Gender": MultiChoiceMapping("gender_selection"),

    DISABILITY_FIELD_1: AIMapping(DISABILITY_PROMPT, "disability_description"),
    DISABILITY_FIELD_2: AIMapping(DISABILITY_CONTINUED_PROMPT, "disability_description_continued"),

    "22 - Date you became disabled": ComputedMapping("disability_start_month"),
    "23 - Date you became disabled": ComputedMapping("disability_start_day"),
    "24 - Date you became diabled": ComputedMapping("disability_start_year"),

    "25 - Did you work that day?": CheckboxMapping(0.3),
    "27 - Have you recovered from this disability?": CheckboxMapping(0.2),

    "29 - date you were able to return to work": ComputedMapping("return_to_work_month"),
    "30 - date you were able to return to work": ComputedMapping("return_to_work_day"),
    "31 - date you were able to return to work": ComputedMapping("return_to_work_year"),

    "32 - Have you since worked for wages or profit?": CheckboxMapping(0.1),
    "34 - List Dates": ComputedMapping("worked_for_wages_dates"),

    # Primary employer
    "35 - Firm or Trade Name": ComputedMapping("employer_business_name"),
    "36 - Address": ComputedMapping("employer_full_address"),
    "37 - Phone Number": ComputedMapping("employer_phone"),
    "38 - First Day": ComputedMapping("employment_start_date"),
    "39 - Last Day Worked": ComputedMapping("last_day_worked"),
    "40 - Average Weekly Wage": ComputedMapping("average_weekly_wage"),

    # Secondary employer (left blank)
    "41 - Firm or Trade Name": StaticMapping(""),
    "42 - Address": StaticMapping(""),
    "43 - Phone Number": StaticMapping(""),
    "44 - First Day": StaticMapping(""),
    "45 - Last Day Worked": StaticMapping(""),
    "46 - Average Weekly Wage": StaticMapping(""),

    "71 - Calculated average gross weekly wage:": ComputedMapping("average_weekly_wage"),

    "72 -  My job is or was": RandomMapping("job"),
    "73 - Union Member?": CheckboxMapping(0.15),
    "75 - Name of Union": ComputedMapping("union_name"),

    # Item 12 - unemployment
    "76 - Were you claiming or receiving unemployment prior to this disability?": CheckboxMapping(0.1),
    "78 - Explain": ComputedMapping("unemployment_explanation"),
    "79 - Explain": StaticMapping(""),
    "80 - If you did receive unemployment benefits, provide all periods collected": ComputedMapping(
        "unemployment_periods"
    ),

    # ===========================================
    # PART A - PAGE 2 (claims and benefits)
    # ===========================================
    "1 - Claim Number": StaticMapping(""),

    # Item 13 - benefits
    "2 - A.\tAre you receiving wages, salary or separation pay?": CheckboxMapping(0.3),
    "3 - Unemployment Benefits?": CheckboxMapping(0.1),
    "4 - Paid Family Leave?": CheckboxMapping(0.1),
    "5 - Workers Compensation?": CheckboxMapping(0.05),
    "6 - No fault motor vehicle accident?": CheckboxMapping(0.08),
    "7 - personal injury involving third party?": CheckboxMapping(0.05),
    "8 - Long-term disability benefits under the Federal Social Security Act for this disability?": CheckboxMapping(0.05),
    "9 - If yes is checked": MultiChoiceMapping("received_or_claimed"),

    "10 - Claimed from": ComputedMapping("claimed_from"),
    "11 - for the period": ComputedMapping("claimed_period_start_month"),
    "12 - for the period of": ComputedMapping("claimed_period_start_day"),
    "13 - for the period of": ComputedMapping("claimed_period_start_year"),
    "14 - for the period": ComputedMapping("claimed_period_end_month"),
    "15 - for the period of": ComputedMapping("claimed_period_end_day"),
    "16 - for the period of": ComputedMapping("claimed_period_end_year"),

    # Item 14 - prior disability benefits
    "17 - have you received disability benefits for other periods of disability?": CheckboxMapping(0.15),
    "18 - If yes Paid by": ComputedMapping("prior_disability_paid_by"),
    "19 - From": ComputedMapping("prior_disability_start_month"),
    "20 - From": ComputedMapping("prior_disability_start_day"),
    "21 - From": ComputedMapping("prior_disability_start_year"),
    "22 - To": ComputedMapping("prior_disability_end_month"),
    "23 - To": ComputedMapping("prior_disability_end_day"),
    "24 - To": ComputedMapping("prior_disability_end_year"),

    # Item 15 - prior PFL
    "25 -  In the year (52 weeks) before your disability began, have you received Paid Family Leave?": CheckboxMapping(0.1),
    "26 - If yes Paid by": ComputedMapping("prior_pfl_paid_by"),
    "27 - From": ComputedMapping("prior_pfl_start_month"),
    "28 - From": ComputedMapping("prior_pfl_start_day"),
    "29 - From": ComputedMapping("prior_pfl_start_year"),
    "30 - To": ComputedMapping("prior_pfl_end_month"),
    "31 - To": ComputedMapping("prior_pfl_end_day"),
    "32 - To": ComputedMapping("prior_pfl_end_year"),

    "33 - Signature Date": ComputedMapping("signature_date"),
    "34 - Address of signatory on behalf of the claimant": StaticMapping(""),
    "35 - Relationship to Claimant": StaticMapping(""),

    # ===========================================
    # PART C - EMPLOYER INFORMATION
    # ===========================================
    "1 - Policy Number": ComputedMapping("policy_number"),
    "2 - Business Name": ComputedMapping("employer_business_name"),
    "3 - Mailing Address": ComputedMapping("employer_address"),
    "4 - City State Zip Code": ComputedMapping("employer_city_state_zip"),
    "5 - Country if not USA": StaticMapping(""),
    "6 - Employers FEIN": ComputedMapping("employer_fein1"),
    "6a - Employers FEIN": ComputedMapping("employer_fein2"),
    "6a - FEIN2": StaticMapping(""),

    "7 - Employers contact name for questions relating to disability": ComputedMapping("employer_contact_name"),
    "9 - Employers contact phone number": ComputedMapping("employer_contact_phone"),
    "10 - Employers contact email address": ComputedMapping("employer_email"),

    "11 - Is the employee a member of a union?": CheckboxMapping(0.15),
    "12 - If yes provide Union name address and contact information": StaticMapping(""),
    "13 - If yes provide Union name address and contact information": StaticMapping(""),

    "14 - Employees Role": CheckboxMapping(0.95),

    "15 - Employees date of hire": ComputedMapping("hire_date"),
    "16 - Date employee last worked": ComputedMapping("last_day_worked"),
    "17 - Date employee returned to work if applicable": StaticMapping(""),

    "18 - Were wages continued during disability?": CheckboxMapping(0.3),
    "19 - If yes what type PTO sick time other": ComputedMapping("wages_continued_type"),
    "20 - If yes, is reimbursement requested by employer?": CheckboxMapping(0.2),
    "21 - Is the employee's disability work-related?": CheckboxMapping(0.0),

    "46 - Gross amount paidCalculated average gross weekly wage": ComputedMapping("average_weekly_wage"),

    "47 - In the preceding 52 weeks has the employee taken leave for:": MultiChoiceMapping("prior_leave_type"),
    "48 - Disability Please provide specific dates for disability": ComputedMapping("prior_disability_dates"),
    "49 - PFL: Please provide specific dates for PFL": ComputedMapping("prior_pfl_dates"),

    "50 - Is employee still in your employment?": CheckboxMapping(0.85),
    "51 - If no date employment was terminated": StaticMapping(""),
    "52 - If employee received unemployment benefits date the benefit was last received": StaticMapping(""),

    # Employer signature
    "1 - Employer Name and Title": ComputedMapping("employer_signatory_name_title"),
    "2 - Employer Contact Phone Number": ComputedMapping("employer_contact_phone"),
    "3 - Date": ComputedMapping("signature_date"),

    # ===========================================
    # DB-450 SUPPLEMENT
    # ===========================================
    "10 - Payment": CheckboxMapping(0.7),
    "11 - Date signed": ComputedMapping("signature_date"),
    "12 - Date Signed": ComputedMapping("signature_date"),
    "13 - Date signed": ComputedMapping("signature_date"),

    "18 - Does employee contribute?": CheckboxMapping(0.6),
    "19 - Yes  dollar amount per week": StaticMapping("0.60"),
    "20 - percentage of contribution": StaticMapping(""),

    "21 - Employer Name  and Title": ComputedMapping("employer_signatory_name_title"),
    "22 - Employer Contact Email": ComputedMapping("employer_email"),
    "23 - Employer Contact Phone": ComputedMapping("employer_phone_area_code"),
    "24 - Employer Contact Phone": ComputedMapping("employer_phone_number"),
    "25 - Date Signed": ComputedMapping("signature_date"),
    "26 - Date Signed": ComputedMapping("signature_date"),
    "27 - Date Signed": ComputedMapping("signature_date"),

    # ===========================================
    # DIRECT DEPOSIT FORM
    # ===========================================
    "4 Checking account": CheckboxMapping(0.8),
    "4 Savings account": CheckboxMapping(0.2),
    "EOBs": CheckboxMapping(0.3),
    "Date mmddyyyy": ComputedMapping("signature_date"),
}

for _week, _names in enumerate(_PART_A_WAGE_FIELDS, start=1):
    _FIELD_MAPPINGS.update(
        _weekly(_week, _names)
    )
for _week, _names in enumerate(_PART_C_WAGE_FIELDS, start=1):
    _FIELD_MAPPINGS.update(
        _weekly(_week, _names)
    )

FIELD_MAPPINGS: Mapping[str, FieldMapping] = MappingProxyType(_FIELD_MAPPINGS)

AI_FIELDS = tuple(name for name, m in _FIELD_MAPPINGS.items() if m.kind is MappingKind.AI)


# Checkbox field name -> dataset checkbox state key, fixed boolean, or derived value
CheckboxSource = Union[str, bool, Callable[[Mapping[str, bool]], bool]]

CHECKBOX_STATE_MAP: Mapping[str, CheckboxSource] = MappingProxyType({
    "25 - Did you work that day?": "did_work_on_disability_day",
    "27 - Have you recovered from this disability?": "has_recovered",
    "32 - Have you since worked for wages or profit?": "worked_for_wages",
    "73 - Union Member?": "union_member",
    "76 - Were you claiming or receiving unemployment prior to this disability?": "unemployment_benefits",
    "2 - A.\tAre you receiving wages, salary or separation pay?": "receiving_wages",
    "3 - Unemployment Benefits?": "unemployment_benefits",
    "4 - Paid Family Leave?": "paid_family_leave",
    "5 - Workers Compensation?": "workers_comp",
    "6 - No fault motor vehicle accident?": "no_fault_accident",
    "7 - personal injury involving third party?": "third_party_injury",
    "8 - Long-term disability benefits under the Federal Social Security Act for this disability?": "long_term_disability",
    "17 - have you received disability benefits for other periods of disability?": "prior_disability",
    "25 -  In the year (52 weeks) before your disability began, have you received Paid Family Leave?": "prior_pfl",
    "11 - Is the employee a member of a union?": "union_member",
    "18 - Were wages continued during disability?": "wages_continued",
    "20 - If yes, is reimbursement requested by employer?": "reimbursement_requested",
    "21 - Is the employee's disability work-related?": False,  # always No on a DBL claim
    "50 - Is employee still in your employment?": "still_employed",
    "10 - Payment": "direct_deposit",
    "18 - Does employee contribute?": "employee_contributes",
    "4 Checking account": "checking_account",
    "4 Savings account": lambda states: not states.get("checking_account", False),
    "EOBs": "no_eobs",
    "14 - Employees Role": True,  # "Employee"
})


# Fallback descriptions when AI is off or fails; selected by seed % 5
SAMPLE_DISABILITY_DESCRIPTIONS: Tuple[Dict[str, str], ...] = (
    {
        "line1": "Lower back strain with herniated disc L4-L5. Pain radiates down left leg.",
        "line2": "Occurred while lifting boxes at home on 12/15/2025. Currently unable to sit or stand for extended periods.",
    },
    {
        "line1": "Right knee injury - torn meniscus requiring surgical repair.",
        "line2": "Slipped on ice in parking lot on 01/02/2026. Surgery scheduled, recovery expected 6-8 weeks.",
    },
    {
        "line1": "Post-surgical recovery following appendectomy due to acute appendicitis.",
        "line2": "Emergency surgery performed on 12/28/2025. Restricted from lifting over 10 lbs during recovery.",
    },
    {
        "line1": "Severe migraine disorder with visual aura and photophobia.",
        "line2": "Condition worsened significantly in early January 2026. Unable to work due to frequency and severity of episodes.",
    },
    {
        "line1": "Fractured right wrist (distal radius) from fall.",
        "line2": "Fell on stairs at home on 01/05/2026. Cast applied, unable to perform job duties requiring manual dexterity.",
    },
)


def get_mapping(field_name: str):
    """Return the mapping for a field name, or None when the field is unmapped."""
    return FIELD_MAPPINGS.get(field_name)
