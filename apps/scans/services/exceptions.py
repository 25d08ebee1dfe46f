"""
Domain-specific exceptions for scans app.

Every scan rejection carries a stable reason code. Callers branch on
``reason``; ``detail`` is for people.
"""

from django.db import models


class RejectionReason(models.TextChoices):
    INVALID_FORMAT = 'INVALID_FORMAT', 'Invalid format'
    INVALID_UUID = 'INVALID_UUID', 'Invalid unit identifier'
    ALREADY_SCANNED = 'ALREADY_SCANNED', 'Already scanned'
    UNKNOWN_UNIT = 'UNKNOWN_UNIT', 'Unknown unit'
    REGISTRY_UNREACHABLE = 'REGISTRY_UNREACHABLE', 'Registry unreachable'


class ScanRejectedError(Exception):
    """Base exception for all scan rejections."""

    reason = None
    retryable = False
    default_detail = 'The scan was rejected.'

    def __init__(self, detail=None, *, unit_id=None):
        self.detail = detail or self.default_detail
        self.unit_id = unit_id
        super().__init__(self.detail)


class InvalidFormatError(ScanRejectedError):
    """Raised when the scanned text matches no accepted code shape."""
    reason = RejectionReason.INVALID_FORMAT
    default_detail = 'This is not a valid warranty code.'


class InvalidUUIDError(ScanRejectedError):
    """Raised when the embedded identifier is not a version-4 UUID."""
    reason = RejectionReason.INVALID_UUID
    default_detail = 'The code does not contain a valid unit identifier.'


class AlreadyScannedError(ScanRejectedError):
    """Raised when the unit has already been claimed by any user."""
    reason = RejectionReason.ALREADY_SCANNED
    default_detail = 'This unit has already been scanned.'


class UnknownUnitError(ScanRejectedError):
    """Raised when the registry has no record of the unit."""
    reason = RejectionReason.UNKNOWN_UNIT
    default_detail = 'This unit is not registered.'


class RegistryUnavailableError(ScanRejectedError):
    """Raised when the registry cannot be reached; the scan may be retried."""
    reason = RejectionReason.REGISTRY_UNREACHABLE
    retryable = True
    default_detail = 'Product verification is temporarily unavailable. Please try again.'
