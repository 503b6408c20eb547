"""
Batch form filling: count runs named <prefix>-001 .. <prefix>-NNN, one after another.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from claimform.ai import get_ai_provider
from claimform.config import Settings
from claimform.errors import MissingInputError
from claimform.filler import fill_form

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    run_id: str
    success: bool
    output_path: Optional[Path] = None
    claimant: str = ""
    employer: str = ""
    error: str = ""


def batch_run_id(prefix: str, index: int) -> str:
    return f"{prefix}-{index:03d}"


def batch_fill(count: int, prefix: str = "claim", **fill_kwargs: Any) -> List[BatchResult]:
    """
    Fill count forms sequentially. A failing run is recorded and the batch continues.

    Args:
        count: Number of forms (>= 1)
        prefix: Run id prefix
        **fill_kwargs: Passed through to fill_form (settings, use_ai, flatten, ...)

    Returns:
        One BatchResult per run id, in order
    """
    if count < 1:
        raise ValueError("count must be a positive number")

    # Preconditions are checked once for the whole batch
    settings = fill_kwargs.get("settings") or Settings.from_env()
    fill_kwargs["settings"] = settings
    input_path = Path(fill_kwargs.get("input_path") or settings.input_pdf)
    if not input_path.exists():
        raise MissingInputError(f"PDF not found: {input_path}")
    if fill_kwargs.get("use_ai") and fill_kwargs.get("provider") is None:
        fill_kwargs["provider"] = get_ai_provider(settings.ai_provider, settings)

    logger.info(f"=== Batch Form Filler === Generating {count} forms with prefix: {prefix}")
    results: List[BatchResult] = []
    start = time.monotonic()

    for i in range(1, count + 1):
        run_id = batch_run_id(prefix, i)
        logger.info(f"[{i}/{count}] Processing {run_id}...")
        try:
            fill = fill_form(run_id, **fill_kwargs)
            results.append(BatchResult(
                run_id=run_id,
                success=True,
                output_path=fill.output_path,
                claimant=fill.dataset.claimant.full_name,
                employer=fill.dataset.employer.name,
            ))
        except Exception as e:
            logger.error(f"  {run_id} failed: {e}")
            results.append(BatchResult(run_id=run_id, success=False, error=str(e)))

    succeeded = [r for r in results if r.success]
    failed = [r for r in results if not r.success]
    logger.info(
        f"=== Batch Complete === total {count}, success {len(succeeded)}, "
        f"failed {len(failed)}, time {time.monotonic() - start:.2f}s"
    )
    for r in succeeded:
        logger.info(f"  {r.run_id}: {r.claimant} @ {r.employer}")
    for r in failed:
        logger.info(f"  {r.run_id}: {r.error}")
    return results
