"""
Form filling orchestrator.

fill_form() loads (or generates) the dataset for a run id, resolves every
form field through its mapping, writes values into the document, draws the
Part B coordinate fields, and saves the PDF plus a JSON report.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Union

from claimform import widgets
from claimform.ai import AIContentCache, AIProvider, fallback_text, get_ai_provider
from claimform.builder import format_date
from claimform.config import Settings
from claimform.coordinates import PART_B_COORDINATES, PART_B_PAGE_INDEX, build_context, coordinate_value
from claimform.document import FormDocument
from claimform.errors import MissingInputError, UnknownRuleError
from claimform.field_mapping import get_mapping
from claimform.resolver import AIRequest, FieldResolver
from claimform.schema import Dataset, FieldKind, FieldOutcome, FillReport
from claimform.store import DatasetStore

logger = logging.getLogger(__name__)


@dataclass
class FillResult:
    run_id: str
    dataset: Dataset
    filled: List[FieldOutcome] = field(default_factory=list)
    skipped: List[FieldOutcome] = field(default_factory=list)
    errors: List[FieldOutcome] = field(default_factory=list)
    output_path: Optional[Path] = None
    report_path: Optional[Path] = None


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _apply_value(document: FormDocument, info, value: Any) -> str:
    """Write one resolved value; returns the label recorded as filled."""
    if info.kind is FieldKind.TEXT:
        text = str(value)
        document.set_text(info.name, text)
        return text[:50]
    if info.kind in (FieldKind.CHECKBOX, FieldKind.RADIO):
        return widgets.apply_state(document, info.name, value)
    if info.kind is FieldKind.DROPDOWN:
        document.select_option(info.name, str(value))
        return str(value)
    raise ValueError(f"Unsupported field kind: {info.kind}")


def _fill_part_b(
    document: FormDocument,
    dataset: Dataset,
    result: FillResult,
    cache: Optional[AIContentCache],
    today,
    font_size: float,
) -> None:
    if document.page_count <= PART_B_PAGE_INDEX:
        logger.warning(
            f"PDF has {document.page_count} pages; skipping Part B coordinate filling"
        )
        return

    medical_details = {}
    if cache is not None:
        logger.info("Generating Part B medical details via AI...")
        medical_details = cache.get_medical_details(dataset)

    context = build_context(dataset, medical_details)
    for label, coord in PART_B_COORDINATES.items():
        name = f"[Part B] {label}"
        try:
            text = coordinate_value(coord, context, today)
            if not text:
                continue
            document.draw_text(PART_B_PAGE_INDEX, coord.x, coord.y, text, font_size)
            result.filled.append(FieldOutcome(name=name, value=text, type="coordinate"))
        except Exception as e:
            logger.warning(f"Error filling Part B field {label}: {e}")
            result.errors.append(FieldOutcome(name=name, reason=str(e)))


def _log_preview(result: FillResult) -> None:
    dataset = result.dataset
    logger.info("=== PREVIEW MODE ===")
    logger.info(f"  Claimant: {dataset.claimant.full_name}")
    logger.info(f"  SSN: {dataset.claimant.ssn.full}")
    logger.info(f"  DOB: {format_date(dataset.claimant.date_of_birth)}")
    logger.info(f"  Employer: {dataset.employer.name}")
    logger.info(f"  Disability Start: {format_date(dataset.dates.disability_start)}")
    logger.info(f"  Avg Weekly Wage: ${dataset.wages.average_weekly_wage:.2f}")
    for outcome in result.filled:
        logger.info(f"  [{outcome.type}] {outcome.name}: {outcome.value}")
    for outcome in result.skipped:
        logger.info(f"  skipped {outcome.name}: {outcome.reason}")
    for outcome in result.errors:
        logger.info(f"  error {outcome.name}: {outcome.reason}")


def fill_form(
    run_id: str,
    *,
    settings: Optional[Settings] = None,
    input_path: Optional[Union[str, Path]] = None,
    output_path: Optional[Union[str, Path]] = None,
    use_ai: bool = False,
    flatten: bool = False,
    preview: bool = False,
    provider: Optional[AIProvider] = None,
    structured_ai: bool = False,
    store: Optional[DatasetStore] = None,
    now: Optional[datetime] = None,
) -> FillResult:
    """
    Fill the claim form for one run id.

    Args:
        run_id: Run identifier (dataset cache key and seed source)
        settings: Runtime settings (defaults to Settings.from_env())
        input_path: Blank form PDF (defaults to settings.input_pdf)
        output_path: Filled PDF path (defaults to <output_dir>/<run_id>.pdf)
        use_ai: Generate free-text fields with the AI backend
        flatten: Make fields non-editable in the output
        preview: Resolve and log values without writing anything
        provider: AI backend to use instead of the configured one
        structured_ai: Generate both disability lines with one call
        store: Dataset store (defaults to one over settings.data_dir)
        now: Generation time for a new dataset and Part B dates

    Returns:
        FillResult with filled/skipped/error outcomes

    Raises:
        MissingInputError: input PDF does not exist
        MissingCredentialError: AI mode without a key for the configured backend
    """
    settings = settings or Settings.from_env()
    input_path = Path(input_path or settings.input_pdf)
    now = now or datetime.now()

    # Preconditions, before any generation or file output
    if not input_path.exists():
        raise MissingInputError(f"PDF not found: {input_path}")
    if use_ai and provider is None:
        provider = get_ai_provider(settings.ai_provider, settings)

    store = store or DatasetStore(settings.data_dir)
    dataset = store.get_or_create(run_id, now=now)
    cache = AIContentCache(store, provider, structured=structured_ai) if use_ai else None
    resolver = FieldResolver()
    result = FillResult(run_id=run_id, dataset=dataset)

    logger.info(f"=== NY DBL Form Filler === Run ID: {run_id}")

    document = FormDocument.open(input_path)
    try:
        fields = document.list_fields()
        logger.info(f"Processing {len(fields)} form fields...")

        for info in fields:
            mapping = get_mapping(info.name)
            if mapping is None:
                result.skipped.append(FieldOutcome(name=info.name, reason="No mapping defined"))
                continue

            try:
                value = resolver.resolve(info.name, mapping, dataset)
                if isinstance(value, AIRequest):
                    text = ""
                    if cache is not None:
                        text = cache.get_or_generate(value.category, value.prompt, dataset)
                    value = text or fallback_text(value.category, dataset)

                if _is_blank(value):
                    result.skipped.append(FieldOutcome(name=info.name, reason="left blank"))
                    continue

                label = _apply_value(document, info, value)
                result.filled.append(FieldOutcome(name=info.name, value=label, type=mapping.kind.value))
            except UnknownRuleError as e:
                result.skipped.append(FieldOutcome(name=info.name, reason=str(e)))
            except Exception as e:
                logger.warning(f"Error filling {info.name!r}: {e}")
                result.errors.append(FieldOutcome(name=info.name, reason=str(e)))

        _fill_part_b(document, dataset, result, cache, now.date(), settings.font_size)

        if preview:
            _log_preview(result)
            return result

        if flatten:
            document.flatten()
            logger.info("Form flattened (fields are now non-editable)")

        output_dir = Path(settings.output_dir)
        result.output_path = Path(output_path) if output_path else output_dir / f"{run_id}.pdf"
        document.save(result.output_path)
    finally:
        document.close()

    report = FillReport(
        run_id=run_id,
        generated_at=datetime.now(),
        claimant=dataset.claimant.full_name,
        employer=dataset.employer.name,
        filled_fields=len(result.filled),
        skipped_fields=len(result.skipped),
        errors=len(result.errors),
        output_path=str(result.output_path),
    )
    result.report_path = store.save_report(report, output_dir)

    logger.info(
        f"Summary: {len(result.filled)} filled, {len(result.skipped)} skipped, "
        f"{len(result.errors)} errors -> {result.output_path}"
    )
    return result
