"""
Analysis package: language-model impact assessment around the risk engine.

Builds the cache key for a request, calls the model, normalizes and
re-classifies its risk scoring deterministically, bounds the decision trace,
tracks token cost, and records each run in the run store.
"""

from changesim.analysis.hashing import make_input_hash
from changesim.analysis.schemas import ImpactAnalysisRequest, ImpactAnalysisResult
from changesim.analysis.service import AnalysisOutcome, ImpactAnalysisService

__all__ = [
    "make_input_hash",
    "ImpactAnalysisRequest",
    "ImpactAnalysisResult",
    "AnalysisOutcome",
    "ImpactAnalysisService",
]
