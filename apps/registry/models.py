"""
Read-only models over the external manufacturing registry.

The registry database belongs to the manufacturing system: these models are
unmanaged (no migrations, no writes) and are routed to the registry database
alias by ``apps.registry.routers.RegistryRouter``. Only the columns the
rewards program reads are declared.
"""
from django.db import models


class RegistryProduct(models.Model):
    """A manufactured product line (registry table ``products``)."""

    pid = models.IntegerField(primary_key=True)
    name = models.TextField()
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        managed = False
        db_table = 'products'

    def __str__(self):
        return self.name


class RegistryUnit(models.Model):
    """
    One manufactured physical unit (registry table ``po_items``).

    ``serial_number`` is the unit identifier printed in the warranty QR code.
    Some records carry the full warranty link in ``printed_url`` instead.
    ``product_id`` is kept as a plain column: the registry does not guarantee
    that the referenced product row exists.
    """

    serial_number = models.TextField(primary_key=True)
    product_id = models.IntegerField()
    printed_url = models.TextField(null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        managed = False
        db_table = 'po_items'

    def __str__(self):
        return self.serial_number
