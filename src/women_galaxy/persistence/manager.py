# ABOUTME: Database manager for async profile persistence using SQLAlchemy async components
# ABOUTME: Insert-or-reject semantics: duplicate names surface as ProfileConflictError

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from women_galaxy.errors import ProfileConflictError, ProfileStoreError
from women_galaxy.persistence.models import WomanProfile
from women_galaxy.utils.logging import get_logger


class ProfileStore(Protocol):
    """Keyed record store for profiles; only inserts are used by the importer."""

    async def insert_profile(self, profile: WomanProfile) -> WomanProfile:
        """Persist a new profile.

        Raises:
            ProfileConflictError: If a profile with the same name exists
            ProfileStoreError: For any other persistence failure
        """
        ...

    async def close(self) -> None: ...


class DatabaseManager:
    """Manages async database operations for profile persistence."""

    def __init__(self, database_url: str = "sqlite+aiosqlite:///./women_galaxy.db"):
        """Initialize the database manager.

        Args:
            database_url: SQLAlchemy async database URL (e.g. sqlite+aiosqlite:///./db.db)
        """
        self.database_url = database_url
        self.engine = create_async_engine(
            database_url,
            echo=False,  # Set to True for SQL query logging
        )

        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Allow access to attributes after commit
        )
        self.logger = get_logger(__name__)

    async def create_tables(self) -> None:
        """Create all database tables if they don't exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def insert_profile(self, profile: WomanProfile) -> WomanProfile:
        """Insert a profile, rejecting duplicates by name.

        Args:
            profile: The new profile

        Returns:
            The stored profile with database defaults populated
        """
        async with self.async_session() as session:
            session.add(profile)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                # Only the name carries a unique constraint
                if await self._name_exists(profile.name):
                    raise ProfileConflictError(profile.name) from e
                raise ProfileStoreError(str(e.orig)) from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise ProfileStoreError(str(e)) from e

            await session.refresh(profile)

        self.logger.info("Inserted profile", profile_id=str(profile.id), name=profile.name)
        return profile

    async def _name_exists(self, name: str) -> bool:
        return await self.get_profile_by_name(name) is not None

    async def get_profile_by_name(self, name: str) -> WomanProfile | None:
        """Look up a profile by its exact name."""
        async with self.async_session() as session:
            statement = select(WomanProfile).where(WomanProfile.name == name)
            result = await session.exec(statement)
            return result.first()

    async def list_profiles(self, limit: int | None = None) -> list[WomanProfile]:
        """Return profiles, newest first."""
        async with self.async_session() as session:
            statement = select(WomanProfile).order_by(WomanProfile.created_at.desc())  # type: ignore[union-attr]
            if limit is not None:
                statement = statement.limit(limit)
            result = await session.exec(statement)
            return list(result.all())

    async def close(self) -> None:
        """Close the database connection."""
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Get an async database session.

        Usage:
            async with db.session() as session:
                # Use session here
        """
        async with self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
