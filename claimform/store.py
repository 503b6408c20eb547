"""
Dataset store: one JSON file per run id under the data directory.

A stored dataset is the source of truth for its run. It is read back
verbatim on later fills; only AI content is ever appended to it.
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from claimform.builder import build_dataset
from claimform.rng import hash_string
from claimform.schema import Dataset, FillReport

logger = logging.getLogger(__name__)


def _atomic_write(path: Path, text: str) -> None:
    """Write text to a temp file in the target directory, then rename over path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


class DatasetStore:
    """Persistent run-id -> Dataset cache."""

    def __init__(self, data_dir: Union[str, Path] = "generated-data"):
        self.data_dir = Path(data_dir)

    def path_for(self, run_id: str) -> Path:
        return self.data_dir / f"{run_id}.json"

    def exists(self, run_id: str) -> bool:
        return self.path_for(run_id).exists()

    def load(self, run_id: str) -> Optional[Dataset]:
        path = self.path_for(run_id)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return Dataset.model_validate_json(f.read())

    def save(self, dataset: Dataset) -> Path:
        path = self.path_for(dataset.run_id)
        _atomic_write(path, dataset.model_dump_json(indent=2))
        return path

    def get_or_create(self, run_id: str, now: Optional[datetime] = None) -> Dataset:
        """
        Return the stored dataset for run_id, building and persisting it first
        if this run id has never been seen.

        Args:
            run_id: Run identifier; its hash is the dataset seed
            now: Generation time for a new dataset (defaults to datetime.now())

        Returns:
            Dataset, including any AI content appended by earlier fills
        """
        existing = self.load(run_id)
        if existing is not None:
            logger.info(f"Loaded existing dataset for run {run_id}")
            return existing

        seed = hash_string(run_id)
        dataset = build_dataset(seed, run_id, now or datetime.now())
        path = self.save(dataset)
        logger.info(f"Generated new dataset for run {run_id} (seed {seed}) -> {path}")
        return dataset

    def append(self, run_id: str, category: str, content: Any) -> Dataset:
        """Merge one AI content entry into the persisted dataset."""
        dataset = self.load(run_id)
        if dataset is None:
            raise FileNotFoundError(f"No dataset stored for run {run_id}")
        dataset.ai_content[category] = content
        self.save(dataset)
        return dataset

    def delete(self, run_id: str) -> bool:
        """Remove the stored dataset so the next fill regenerates it."""
        path = self.path_for(run_id)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Deleted dataset for run {run_id}")
        return True

    def save_report(self, report: FillReport, output_dir: Union[str, Path] = "output") -> Path:
        """Write <run_id>-report.json into output_dir."""
        path = Path(output_dir) / f"{report.run_id}-report.json"
        _atomic_write(path, json.dumps(report.model_dump(mode="json"), indent=2))
        return path
