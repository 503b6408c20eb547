"""
Data models for generated claim datasets and fill reports.
Uses Pydantic for validation and JSON persistence.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FieldKind(str, Enum):
    """
    Closed set of form field kinds. Every field the form document reports
    has exactly one of these.
    """
    TEXT = "text"
    CHECKBOX = "checkbox"    # boolean or multi-widget checkbox
    RADIO = "radio"          # single-choice group
    DROPDOWN = "dropdown"    # combo box / list box


class FieldInfo(BaseModel):
    """A field as reported by the form document."""
    name: str
    kind: FieldKind
    on_states: List[str] = []
    page_index: int = 0


class SSN(BaseModel):
    part1: str
    part2: str
    part3: str
    full: str


class FEIN(BaseModel):
    part1: str
    part2: str


class Claimant(BaseModel):
    first_name: str
    last_name: str
    middle_initial: str
    full_name: str
    gender: str
    address: str
    city: str
    state: str = "NY"
    zip: str
    phone: str
    email: str
    ssn: SSN
    date_of_birth: date
    occupation: str


class KeyDates(BaseModel):
    """Claim timeline. last_day_worked is always disability_start - 1 day."""
    disability_start: date
    last_day_worked: date
    employment_start: date
    signature_date: date


class Employer(BaseModel):
    name: str
    address: str
    city: str
    state: str = "NY"
    zip: str
    phone: str
    fein: FEIN
    contact_name: str
    contact_title: str
    contact_email: str
    contact_phone: str
    policy_number: str


class WeekWage(BaseModel):
    week_number: int
    week_end_date: date
    days_worked: int
    gross_amount: float


class Wages(BaseModel):
    weekly_wages: List[WeekWage]
    average_weekly_wage: float
    base_weekly_wage: float


class Union(BaseModel):
    name: str


class PriorBenefits(BaseModel):
    """Items 13-15. Each group is populated only when its checkbox is true."""
    claimed_from: str = ""
    claimed_period_start: Optional[date] = None
    claimed_period_end: Optional[date] = None
    prior_disability_paid_by: str = ""
    prior_disability_start: Optional[date] = None
    prior_disability_end: Optional[date] = None
    prior_pfl_paid_by: str = ""
    prior_pfl_start: Optional[date] = None
    prior_pfl_end: Optional[date] = None


class ConditionalData(BaseModel):
    return_to_work_date: Optional[date] = None
    worked_for_wages_dates: str = ""
    unemployment_explanation: str = ""
    unemployment_periods: str = ""
    wages_continued_type: str = ""
    prior_disability_dates: str = ""
    prior_pfl_dates: str = ""


class Disability(BaseModel):
    description1: str
    description2: str


class Medical(BaseModel):
    """Part B (health care provider) facts."""
    diagnosis_analysis: str
    symptoms: str
    objective_findings: str
    icd_code: str
    hospitalized: bool = False
    surgery: bool = False
    work_related: bool = False
    first_treatment: date
    recent_treatment: date


class MedicalProvider(BaseModel):
    role: str
    full_name: str
    license_number: str
    address: str
    phone: str


class Dataset(BaseModel):
    """
    Complete fact set for one run id.
    Built once, then read-only apart from ai_content appends.
    """
    run_id: str
    seed: int
    generated_at: datetime

    claimant: Claimant
    dates: KeyDates
    employer: Employer
    wages: Wages
    union: Optional[Union] = None
    disability: Disability
    medical: Medical
    medical_provider: MedicalProvider

    prior_benefits: PriorBenefits
    conditional_data: ConditionalData
    checkbox_states: Dict[str, bool]

    # category -> generated text (medical_details holds a dict)
    ai_content: Dict[str, Any] = Field(default_factory=dict)


class FieldOutcome(BaseModel):
    name: str
    value: str = ""
    type: str = ""
    reason: str = ""


class FillReport(BaseModel):
    """Per-run summary written next to the output PDF."""
    run_id: str
    generated_at: datetime
    claimant: str
    employer: str
    filled_fields: int
    skipped_fields: int
    errors: int
    output_path: Optional[str] = None
