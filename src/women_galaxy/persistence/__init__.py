# ABOUTME: Database operations and data persistence layer
# ABOUTME: Pipeline Stage 3: Derived profile → Database storage with a unique name constraint

"""
Persistence Layer: Save and retrieve imported profiles

This layer handles:
- SQLModel table for women profiles
- Insert-or-reject semantics for duplicate names
- Database connection and transaction management

Data Flow: core/ import service → Database
"""

from .manager import DatabaseManager, ProfileStore
from .models import WomanProfile

__all__ = [
    "DatabaseManager",
    "ProfileStore",
    "WomanProfile",
]
