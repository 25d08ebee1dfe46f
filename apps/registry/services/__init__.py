"""
Registry services - validation of scanned units against the external
manufacturing registry.
"""

from .unit_validation import (
    RegistryMatch,
    validate_unit,
    resolve_product_name,
)
from .strategies import (
    LookupStrategy,
    SerialNumberStrategy,
    PrintedUrlStrategy,
    DEFAULT_STRATEGIES,
)
from .exceptions import (
    RegistryError,
    RegistryUnreachableError,
    UnitNotFoundError,
)

__all__ = [
    # Validation
    'RegistryMatch',
    'validate_unit',
    'resolve_product_name',
    # Strategies
    'LookupStrategy',
    'SerialNumberStrategy',
    'PrintedUrlStrategy',
    'DEFAULT_STRATEGIES',
    # Exceptions
    'RegistryError',
    'RegistryUnreachableError',
    'UnitNotFoundError',
]
