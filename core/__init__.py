"""Core services of the hybrid translator.

This package contains the translation orchestrator and providers, the two-tier cache,
in-flight request coalescing, quality scoring, language validation and metrics.
"""

from core.shared_data import SharedData
from core.version import VERSION

__all__: list[str] = [
    "VERSION",
    "SharedData",
]
