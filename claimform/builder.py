"""
Base dataset builder.

build_dataset() is a pure function of (seed, run_id, now). All random draws
happen here, once; gated narrative fields are derived from booleans that
were already drawn, so a gated field can never disagree with its checkbox.
"""

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from claimform.field_mapping import FIELD_MAPPINGS, SAMPLE_DISABILITY_DESCRIPTIONS, RandomMapping
from claimform.rng import DeterministicRandom, derive_seed
from claimform.schema import (
    FEIN,
    SSN,
    Claimant,
    ConditionalData,
    Dataset,
    Disability,
    Employer,
    KeyDates,
    Medical,
    MedicalProvider,
    PriorBenefits,
    Union,
    Wages,
    WeekWage,
)

logger = logging.getLogger(__name__)

WEEKS_IN_LEDGER = 8

# Default probability of each independent checkbox fact being True.
# Order matters: draws happen in this order.
CHECKBOX_PROBABILITIES: Mapping[str, float] = MappingProxyType({
    "did_work_on_disability_day": 0.3,
    "has_recovered": 0.2,
    "worked_for_wages": 0.1,
    "union_member": 0.15,
    # Item 13 - usually "No" for most benefits
    "receiving_wages": 0.3,
    "unemployment_benefits": 0.1,
    "paid_family_leave": 0.1,
    "workers_comp": 0.05,
    "no_fault_accident": 0.08,
    "third_party_injury": 0.05,
    "long_term_disability": 0.05,
    # Items 14 & 15
    "prior_disability": 0.15,
    "prior_pfl": 0.1,
    # Item 16
    "employer_provided_rights": 0.9,
    # Part C
    "wages_continued": 0.3,
    "reimbursement_requested": 0.2,
    "still_employed": 0.85,
    # Supplement / direct deposit
    "direct_deposit": 0.7,
    "employee_contributes": 0.6,
    "checking_account": 0.8,
    "no_eobs": 0.3,
    # Part B
    "hospitalized": 0.1,
    "surgery": 0.15,
})

# Dataset claimant attribute -> catalog field whose random draw it must equal
CLAIMANT_IDENTITY_FIELDS: Mapping[str, str] = MappingProxyType({
    "last_name": "2 - Last Name",
    "first_name": "3 - First Name",
    "middle_initial": "3a - Middle Initial",
    "address": "4 - Mailing Address Street  Apt",
    "city": "5 - City",
    "zip": "7 - Zip",
    "phone": "9 - Daytime Phone",
    "occupation": "72 -  My job is or was",
})

GENDERS = ("Male", "Female", "X")
PRIOR_BENEFITS_PAYER = "ShelterPoint Life"
UNEMPLOYMENT_EXPLANATION = "Did not apply for unemployment benefits as disability began while employed."
WAGES_CONTINUED_TYPES = ("PTO", "Sick time", "Salary continuation")
UNION_TRADES = ("Service", "Transit", "Retail", "Healthcare", "Construction", "Hospitality", "Warehouse")
PROVIDER_ROLES = ("Physician", "Chiropractor", "Podiatrist", "Psychologist", "Nurse Practitioner")

# Part B details aligned with SAMPLE_DISABILITY_DESCRIPTIONS by index
SAMPLE_MEDICAL_DETAILS = (
    {
        "diagnosis_analysis": "Lumbar disc herniation L4-L5 with left radiculopathy",
        "symptoms": "Low back pain radiating to left leg, limited sitting tolerance",
        "objective_findings": "Positive straight leg raise on left, paraspinal muscle spasm",
        "icd_code": "M51.26",
    },
    {
        "diagnosis_analysis": "Tear of medial meniscus, right knee",
        "symptoms": "Knee pain, swelling and locking with weight bearing",
        "objective_findings": "Joint line tenderness, positive McMurray test, effusion",
        "icd_code": "S83.241A",
    },
    {
        "diagnosis_analysis": "Post-operative recovery, laparoscopic appendectomy",
        "symptoms": "Abdominal incision pain, fatigue, lifting restriction",
        "objective_findings": "Healing port sites, no signs of infection",
        "icd_code": "Z48.815",
    },
    {
        "diagnosis_analysis": "Migraine with aura, intractable",
        "symptoms": "Recurrent severe headaches with visual aura and light sensitivity",
        "objective_findings": "Normal neurological exam between episodes",
        "icd_code": "G43.119",
    },
    {
        "diagnosis_analysis": "Closed fracture of distal radius, right wrist",
        "symptoms": "Wrist pain and swelling, loss of grip strength",
        "objective_findings": "X-ray confirms distal radius fracture, cast in place",
        "icd_code": "S52.501A",
    },
)


@dataclass(frozen=True)
class GatedField:
    """A dataset path that must be non-empty exactly when its gate holds."""
    path: str
    gate: str
    when: bool = True


GATED_FIELDS = (
    GatedField("prior_benefits.claimed_from", "receiving_wages"),
    GatedField("prior_benefits.claimed_period_start", "receiving_wages"),
    GatedField("prior_benefits.claimed_period_end", "receiving_wages"),
    GatedField("prior_benefits.prior_disability_paid_by", "prior_disability"),
    GatedField("prior_benefits.prior_disability_start", "prior_disability"),
    GatedField("prior_benefits.prior_disability_end", "prior_disability"),
    GatedField("prior_benefits.prior_pfl_paid_by", "prior_pfl"),
    GatedField("prior_benefits.prior_pfl_start", "prior_pfl"),
    GatedField("prior_benefits.prior_pfl_end", "prior_pfl"),
    GatedField("conditional_data.return_to_work_date", "has_recovered"),
    GatedField("conditional_data.worked_for_wages_dates", "worked_for_wages"),
    GatedField("conditional_data.unemployment_explanation", "unemployment_benefits", when=False),
    GatedField("conditional_data.unemployment_periods", "unemployment_benefits"),
    GatedField("conditional_data.wages_continued_type", "wages_continued"),
    GatedField("conditional_data.prior_disability_dates", "prior_disability"),
    GatedField("conditional_data.prior_pfl_dates", "prior_pfl"),
    GatedField("union", "union_member"),
)


def format_date(value: date) -> str:
    """MM/DD/YYYY"""
    return value.strftime("%m/%d/%Y")


def _years_before(value: date, years: int) -> date:
    try:
        return value.replace(year=value.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return value.replace(year=value.year - years, day=28)


def _months_before(value: date, months: int) -> date:
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def checkbox_state(dataset: Dataset, key: str) -> bool:
    """Stored checkbox fact; unknown keys log a warning and read as False."""
    if key not in dataset.checkbox_states:
        logger.warning(f"Unknown checkbox state: {key}")
        return False
    return dataset.checkbox_states[key]


def _draw_identity(rng: DeterministicRandom) -> Dict[str, Any]:
    """
    Claimant identity values, each drawn fresh from the base seed with the
    same method the catalog declares, so random-kind fields match the dataset.
    """
    identity: Dict[str, Any] = {}
    for attr, field_name in CLAIMANT_IDENTITY_FIELDS.items():
        mapping = FIELD_MAPPINGS.get(field_name)
        if not isinstance(mapping, RandomMapping):
            logger.warning(f"No random mapping for identity field {field_name!r}; leaving {attr} blank")
            identity[attr] = ""
            continue
        identity[attr] = str(rng.fresh(mapping.method, *mapping.args))
    return identity


def _email_local_part(*names: str) -> str:
    return ".".join(re.sub(r"[^a-z]", "", n.lower()) for n in names if n)


def build_dataset(
    seed: int,
    run_id: str,
    now: datetime,
    probabilities: Optional[Mapping[str, float]] = None,
) -> Dataset:
    """
    Build the complete, self-consistent dataset for one run.

    Args:
        seed: Base seed (hash_string(run_id) for stored runs)
        run_id: Run identifier recorded on the dataset
        now: Generation time; signature date and all relative dates hang off it
        probabilities: Optional overrides for CHECKBOX_PROBABILITIES

    Returns:
        Dataset with every cross-field invariant satisfied
    """
    rng = DeterministicRandom(seed)
    today = now.date()

    identity = _draw_identity(rng)

    rng.seed(derive_seed(seed, "gender"))
    gender = rng.pick_one(GENDERS)

    # Bulk generation: one seed, fixed draw order
    rng.seed(seed)
    fake = rng.faker

    disability_start = today - timedelta(days=rng.integer(7, 21))
    last_day_worked = disability_start - timedelta(days=1)
    employment_start = _years_before(last_day_worked, rng.integer(1, 10))
    date_of_birth = today - timedelta(days=rng.integer(25 * 366, 60 * 365))

    base_weekly_wage = rng.float(800, 2500, 2)
    weekly_wages = []
    for week in range(1, WEEKS_IN_LEDGER + 1):
        days_worked = rng.integer(4, 5)
        gross = round(base_weekly_wage + rng.float(-100, 100, 2), 2)
        weekly_wages.append(WeekWage(
            week_number=week,
            week_end_date=last_day_worked - timedelta(days=7 * (week - 1)),
            days_worked=days_worked,
            gross_amount=gross,
        ))
    average_weekly_wage = round(sum(w.gross_amount for w in weekly_wages) / len(weekly_wages), 2)

    ssn1, ssn2, ssn3 = rng.numeric_string(3), rng.numeric_string(2), rng.numeric_string(4)
    email_domain = fake.free_email_domain()

    employer_name = fake.company()
    employer_phone = fake.numerify("(###) ###-####")
    employer = Employer(
        name=employer_name,
        address=fake.street_address(),
        city=fake.city(),
        zip=fake.zipcode(),
        phone=employer_phone,
        fein=FEIN(part1=rng.numeric_string(2), part2=rng.numeric_string(7)),
        contact_name=fake.name(),
        contact_title=fake.job(),
        contact_email=fake.company_email(),
        contact_phone=employer_phone,
        policy_number=rng.alphanumeric(8).upper(),
    )

    probs = dict(CHECKBOX_PROBABILITIES)
    if probabilities:
        probs.update(probabilities)
    states = {key: rng.boolean(p) for key, p in probs.items()}

    # Values gated fields may use; always drawn so the gate never shifts the stream
    prior_start = _months_before(disability_start, rng.integer(6, 10))
    prior_end = prior_start + timedelta(days=rng.integer(14, 60))
    union_local = rng.integer(1, 999)
    union_trade = rng.pick_one(UNION_TRADES)
    wages_continued_type = rng.pick_one(WAGES_CONTINUED_TYPES)
    worked_for_wages_date = disability_start + timedelta(days=rng.integer(1, 6))

    provider = MedicalProvider(
        role=rng.pick_one(PROVIDER_ROLES),
        full_name=f"{fake.first_name()} {fake.last_name()}",
        license_number=rng.numeric_string(7),
        address=f"{fake.street_address()}, {fake.city()}, NY",
        phone=fake.numerify("###-###-####"),
    )

    prior_range = f"{format_date(prior_start)} - {format_date(prior_end)}"

    prior_benefits = PriorBenefits(
        claimed_from=employer_name if states["receiving_wages"] else "",
        claimed_period_start=prior_start if states["receiving_wages"] else None,
        claimed_period_end=prior_end if states["receiving_wages"] else None,
        prior_disability_paid_by=PRIOR_BENEFITS_PAYER if states["prior_disability"] else "",
        prior_disability_start=prior_start if states["prior_disability"] else None,
        prior_disability_end=prior_end if states["prior_disability"] else None,
        prior_pfl_paid_by=PRIOR_BENEFITS_PAYER if states["prior_pfl"] else "",
        prior_pfl_start=prior_start if states["prior_pfl"] else None,
        prior_pfl_end=prior_end if states["prior_pfl"] else None,
    )

    conditional = ConditionalData(
        return_to_work_date=today if states["has_recovered"] else None,
        worked_for_wages_dates=format_date(worked_for_wages_date) if states["worked_for_wages"] else "",
        unemployment_explanation="" if states["unemployment_benefits"] else UNEMPLOYMENT_EXPLANATION,
        unemployment_periods=prior_range if states["unemployment_benefits"] else "",
        wages_continued_type=wages_continued_type if states["wages_continued"] else "",
        prior_disability_dates=prior_range if states["prior_disability"] else "",
        prior_pfl_dates=prior_range if states["prior_pfl"] else "",
    )

    sample_index = seed % len(SAMPLE_DISABILITY_DESCRIPTIONS)
    description = SAMPLE_DISABILITY_DESCRIPTIONS[sample_index]
    details = SAMPLE_MEDICAL_DETAILS[sample_index % len(SAMPLE_MEDICAL_DETAILS)]

    first_name = identity["first_name"]
    last_name = identity["last_name"]
    middle_initial = identity["middle_initial"]

    claimant = Claimant(
        first_name=first_name,
        last_name=last_name,
        middle_initial=middle_initial,
        full_name=f"{first_name} {middle_initial}. {last_name}",
        gender=gender,
        address=identity["address"],
        city=identity["city"],
        zip=identity["zip"],
        phone=identity["phone"],
        email=f"{_email_local_part(first_name, last_name)}@{email_domain}",
        ssn=SSN(part1=ssn1, part2=ssn2, part3=ssn3, full=f"{ssn1}-{ssn2}-{ssn3}"),
        date_of_birth=date_of_birth,
        occupation=identity["occupation"],
    )

    return Dataset(
        run_id=run_id,
        seed=seed,
        generated_at=now,
        claimant=claimant,
        dates=KeyDates(
            disability_start=disability_start,
            last_day_worked=last_day_worked,
            employment_start=employment_start,
            signature_date=today,
        ),
        employer=employer,
        wages=Wages(
            weekly_wages=weekly_wages,
            average_weekly_wage=average_weekly_wage,
            base_weekly_wage=base_weekly_wage,
        ),
        union=Union(name=f"Local {union_local} - {union_trade} Workers Union") if states["union_member"] else None,
        disability=Disability(description1=description["line1"], description2=description["line2"]),
        medical=Medical(
            **details,
            hospitalized=states["hospitalized"],
            surgery=states["surgery"],
            work_related=False,
            first_treatment=disability_start,
            recent_treatment=today,
        ),
        medical_provider=provider,
        prior_benefits=prior_benefits,
        conditional_data=conditional,
        checkbox_states=states,
    )
