"""Core business-logic engines."""

from emissions_dashboard.engines.answer_classifier import classify
from emissions_dashboard.engines.data_reconciler import ReconciledData, reconcile
from emissions_dashboard.engines.question_deriver import (
    derive_keywords,
    derive_question,
    merge_keywords,
)

__all__ = [
    "classify",
    "derive_keywords",
    "derive_question",
    "merge_keywords",
    "reconcile",
    "ReconciledData",
]
