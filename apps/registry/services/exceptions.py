"""
Domain exceptions for the registry app.

Exception Hierarchy:
    RegistryError (base)
    ├── RegistryUnreachableError   transient, safe to retry
    └── UnitNotFoundError          terminal for the scanned unit
"""


class RegistryError(Exception):
    """Base exception for all registry lookup errors."""
    pass


class RegistryUnreachableError(RegistryError):
    """
    The registry could not be queried (connection refused, timeout, query error).

    No state has been written when this is raised, so the lookup may be
    repeated.
    """
    pass


class UnitNotFoundError(RegistryError):
    """No registry record matches the identifier after every lookup strategy."""
    pass
