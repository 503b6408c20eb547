"""
Part B (Health Care Provider) coordinate catalog.

Part B has no fillable widgets; values are drawn as text at fixed points on
page index 4. Coordinates are PDF points with y measured from the bottom edge.
"""

from dataclasses import dataclass
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from claimform.builder import format_date
from claimform.schema import Dataset

PART_B_PAGE_INDEX = 4
CHECK_MARK = "X"


@dataclass(frozen=True)
class CoordinateField:
    x: float
    y: float
    kind: str               # text | static | date-part | check | boolean-check | date-now
    source: str = ""        # dotted path into the coordinate context
    value: Any = None       # literal for static; match value for check kinds
    part: str = ""          # month | day | year for date-part
    limit: Optional[int] = None


def _text(x, y, source, limit=None):
    return CoordinateField(x, y, "text", source=source, limit=limit)


def _date_part(x, y, source, part):
    return CoordinateField(x, y, "date-part", source=source, part=part)


def _check(x, y, source, value):
    return CoordinateField(x, y, "check", source=source, value=value)


def _bool_check(x, y, source, value):
    return CoordinateField(x, y, "boolean-check", source=source, value=value)


PART_B_COORDINATES: Mapping[str, CoordinateField] = MappingProxyType({
    # Claimant info (repeated)
    "last name claimant": _text(100, 366, "claimant.last_name"),
    "first name claimant": _text(328, 366, "claimant.first_name"),
    "middle initial claimant": _text(514, 366, "claimant.middle_initial"),

    "gender male": _check(87, 349, "claimant.gender", "Male"),
    "gender female": _check(116, 349, "claimant.gender", "Female"),
    "gender X": _check(142, 349, "claimant.gender", "X"),

    "DOB mm": _date_part(252, 349, "claimant.date_of_birth", "month"),
    "DOB dd": _date_part(276, 349, "claimant.date_of_birth", "day"),
    "DOB yyyy": _date_part(309, 349, "claimant.date_of_birth", "year"),

    # Diagnosis
    "Diagnosis analysis": _text(135, 336, "medical.diagnosis_analysis", limit=70),
    "diagnosis code": _text(462, 336, "medical.icd_code"),
    "claimant symptoms": _text(158, 319, "medical.symptoms", limit=70),
    "objective findings": _text(141, 290, "medical.objective_findings", limit=70),

    "claimant hospitalized yes": _bool_check(154, 265, "medical.hospitalized", True),
    "claimant hospitalized no": _bool_check(185, 263, "medical.hospitalized", False),
    "operation indicated yes": _bool_check(154, 246, "medical.surgery", True),
    "operation indicated no": _bool_check(184, 246, "medical.surgery", False),

    # Treatment dates
    "date of first treatment mm": _date_part(339, 216, "medical.first_treatment", "month"),
    "date of first treatment dd": _date_part(424, 216, "medical.first_treatment", "day"),
    "date of first treatment yyyy": _date_part(504, 216, "medical.first_treatment", "year"),
    "date of most recent treatment mm": _date_part(340, 205, "medical.recent_treatment", "month"),
    "date of most recent treatment dd": _date_part(424, 205, "medical.recent_treatment", "day"),
    "date of most recent treatment yyyy": _date_part(506, 205, "medical.recent_treatment", "year"),

    # Work ability
    "date claimant unable to work from mm": _date_part(339, 193, "dates.disability_start", "month"),
    "date claimant unable to work from dd": _date_part(425, 193, "dates.disability_start", "day"),
    "date claimant unable to work from yyyy": _date_part(505, 193, "dates.disability_start", "year"),
    "date claimant able to work again mm": _date_part(339, 179, "conditional_data.return_to_work_date", "month"),
    "date claimant able to work again dd": _date_part(425, 179, "conditional_data.return_to_work_date", "day"),
    "date claimant able to work again yyyy": _date_part(504, 179, "conditional_data.return_to_work_date", "year"),

    "is the injury result of work yes": _bool_check(52, 126, "medical.work_related", True),
    "is the injury result of work no": _bool_check(83, 126, "medical.work_related", False),

    # Provider
    "health care provider role": _text(44, 95, "medical_provider.role"),
    "license or certified state": CoordinateField(295, 94, "static", value="NY"),
    "license number": _text(433, 96, "medical_provider.license_number"),
    "health care providers name": _text(48, 67, "medical_provider.full_name"),
    "date": CoordinateField(482, 68, "date-now"),
    "health care providers address": _text(50, 44, "medical_provider.address"),
    "phone number": _text(454, 43, "medical_provider.phone"),
})


def build_context(dataset: Dataset, medical_details: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Dataset as nested dicts, with AI medical details layered over dataset.medical."""
    context = dataset.model_dump()
    if medical_details:
        context["medical"] = {**context["medical"], **medical_details}
    return context


def resolve_path(context: Mapping[str, Any], path: str) -> Any:
    """Dotted lookup ("claimant.last_name"); any missing step yields None."""
    value: Any = context
    for key in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
        if value is None:
            return None
    return value


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return None


def coordinate_value(field: CoordinateField, context: Mapping[str, Any], today: date) -> Optional[str]:
    """Text to draw for one coordinate field, or None to draw nothing."""
    if field.kind == "text":
        value = resolve_path(context, field.source)
        if value is None or value == "":
            return None
        text = str(value)
        if field.limit and len(text) > field.limit:
            text = text[:field.limit]
        return text

    if field.kind == "static":
        return field.value or None

    if field.kind == "date-now":
        return format_date(today)

    if field.kind == "date-part":
        value = _as_date(resolve_path(context, field.source))
        if value is None:
            return None
        if field.part == "month":
            return f"{value.month:02d}"
        if field.part == "day":
            return f"{value.day:02d}"
        if field.part == "year":
            return str(value.year)
        raise ValueError(f"Unknown date part: {field.part}")

    if field.kind in ("check", "boolean-check"):
        actual = resolve_path(context, field.source)
        if field.kind == "boolean-check":
            # strict: a missing value must not tick the "no" box
            return CHECK_MARK if actual is field.value else None
        return CHECK_MARK if actual == field.value else None

    raise ValueError(f"Unknown coordinate kind: {field.kind}")
