"""
Goal Normalizer

Folds free-text certificate-goal labels into the canonical vocabulary.
This is the single conversion boundary from user-facing or catalog labels
to CertificateGoal values.
"""

from typing import Iterable, Set

from .constants import CNA_SYNONYMS, CMA_MARKER, NURSING_ASSISTANT_TRAINING
from .contracts import CertificateGoal


def normalize_goal(goal: str) -> CertificateGoal:
    """
    Canonicalize a single goal label.

    Lower-cases and trims; any label containing a CNA/NAT synonym as a
    substring becomes "nursing assistant training".
    """
    text = str(goal or "").lower().strip()
    if any(synonym in text for synonym in CNA_SYNONYMS):
        return CertificateGoal(NURSING_ASSISTANT_TRAINING)
    return CertificateGoal(text)


def normalize_goals(goals: Iterable[str]) -> Set[CertificateGoal]:
    """Normalize a sequence of labels into a duplicate-free set. Blank labels are dropped."""
    normalized = {normalize_goal(g) for g in goals or []}
    normalized.discard(CertificateGoal(""))
    return normalized


def is_cma(goals: Iterable[str]) -> bool:
    """True if any goal names the clinical medical assistant track."""
    return any(CMA_MARKER in str(g).lower() for g in goals or [])
