# ABOUTME: Exception hierarchy shared by the importer layers
# ABOUTME: Configuration, object storage, and profile store failures


class WomenGalaxyError(Exception):
    """Base exception for the importer."""

    pass


class ConfigurationError(WomenGalaxyError):
    """Raised when required credentials or settings are missing at startup."""

    pass


class StorageError(WomenGalaxyError):
    """Raised when the object store rejects or fails an upload."""

    pass


class ProfileStoreError(WomenGalaxyError):
    """Raised when the profile store fails to persist a profile."""

    pass


class ProfileConflictError(ProfileStoreError):
    """Raised when a profile with the same name already exists."""

    def __init__(self, name: str):
        super().__init__(f'"{name}" already exists in the database')
        self.name = name
