"""
Registry lookup strategies.

Each strategy is one named way of finding a unit record for an identifier.
``DEFAULT_STRATEGIES`` fixes the order in which they are attempted; the
validator stops at the first match.
"""

from typing import Optional

from apps.registry.models import RegistryUnit


class LookupStrategy:
    """Base class: find a live registry unit for a canonical identifier."""

    name = ''

    def find_unit(self, unit_id: str, *, using: str) -> Optional[RegistryUnit]:
        raise NotImplementedError

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.name}>'


class SerialNumberStrategy(LookupStrategy):
    """Exact match on the unit serial number."""

    name = 'serial_number'

    def find_unit(self, unit_id, *, using):
        return (
            RegistryUnit.objects
            .using(using)
            .filter(serial_number=unit_id, deleted_at__isnull=True)
            .first()
        )


class PrintedUrlStrategy(LookupStrategy):
    """
    Identifier appearing inside the stored printed warranty URL.

    Covers units whose record holds the full link rather than the bare
    identifier as serial number.
    """

    name = 'printed_url'

    def find_unit(self, unit_id, *, using):
        return (
            RegistryUnit.objects
            .using(using)
            .filter(printed_url__icontains=unit_id, deleted_at__isnull=True)
            .order_by('serial_number')
            .first()
        )


DEFAULT_STRATEGIES = (
    SerialNumberStrategy(),
    PrintedUrlStrategy(),
)
