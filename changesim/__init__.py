"""
ChangeSim: organizational change impact analysis.

Combines a language-model qualitative assessment with a deterministic
risk-classification engine, then records and caches each run. Modular
layout: risk engine, analysis service, database, API server.
"""

__version__ = "0.1.0"
