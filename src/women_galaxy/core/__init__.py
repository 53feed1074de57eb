# ABOUTME: Business logic and orchestration layer
# ABOUTME: Sequences fetch, extraction, image upload and insert for one or many names

"""
Core Layer: Import orchestration

This layer handles:
- Effective title resolution and not-found reporting
- Linked-data vs text birth-year precedence
- Dry runs, skip-image mode and duplicate handling
- Sequential, rate-limited batch imports with tallies

Data Flow: extraction/ + services/ → Import outcomes → persistence/
"""

from .models import BatchResult, ImportOutcome, ImportRequest, ImportStatus

# Import service on-demand to avoid circular imports
# Use: from women_galaxy.core.service import ProfileImportService

__all__ = [
    "BatchResult",
    "ImportOutcome",
    "ImportRequest",
    "ImportStatus",
]
