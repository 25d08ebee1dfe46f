"""Services for the scan-to-reward pipeline."""

from .exceptions import (
    RejectionReason,
    ScanRejectedError,
    InvalidFormatError,
    InvalidUUIDError,
    AlreadyScannedError,
    UnknownUnitError,
    RegistryUnavailableError,
)
from .parsing import (
    ParsedCode,
    parse_scanned_code,
    is_uuid4,
)
from .scan_submission import (
    ScanResult,
    submit_scan,
    get_user_scans,
)

__all__ = [
    # Exceptions
    'RejectionReason',
    'ScanRejectedError',
    'InvalidFormatError',
    'InvalidUUIDError',
    'AlreadyScannedError',
    'UnknownUnitError',
    'RegistryUnavailableError',
    # Parsing
    'ParsedCode',
    'parse_scanned_code',
    'is_uuid4',
    # Submission
    'ScanResult',
    'submit_scan',
    'get_user_scans',
]
