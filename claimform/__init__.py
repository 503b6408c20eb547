"""
Synthetic data generator and form filler for the NY DB-450 disability claim form.
"""

from claimform.builder import build_dataset
from claimform.filler import fill_form
from claimform.store import DatasetStore

__all__ = ["build_dataset", "fill_form", "DatasetStore"]
