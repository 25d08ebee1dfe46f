"""
Scan submission service.

Turns raw scanned text into a reward, at most once per physical unit:

1. parse the code (pure);
2. reject units that already have a claim record (no registry call);
3. confirm the unit with the manufacturing registry (outside any
   database transaction, retried on transient failure);
4. in one database transaction: lock the user row, insert the claim
   record, append the EARNING transaction, recompute balance and badges.

The uniqueness constraint on ``ScannedUnit.unit_id`` is what decides
between concurrent submissions of one unit; step 2 only saves registry
calls in the common case.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from django.db import transaction, IntegrityError

from apps.accounts.models import User
from apps.registry.services import (
    RegistryMatch,
    RegistryUnreachableError,
    UnitNotFoundError,
    validate_unit,
)
from apps.rewards.models import TransactionKind
from apps.rewards.services import append_transaction, lock_user, points_for_product
from apps.scans.models import ScannedUnit

from .exceptions import (
    ScanRejectedError,
    AlreadyScannedError,
    UnknownUnitError,
    RegistryUnavailableError,
)
from .parsing import parse_scanned_code

logger = logging.getLogger(__name__)

LOG_PREVIEW_LENGTH = 80


@dataclass(frozen=True)
class ScanResult:
    """An accepted scan."""

    unit_id: str
    product_name: Optional[str]
    points_awarded: int
    new_balance: int
    badges: List[str] = field(default_factory=list)
    matched_by: str = ''


def _preview(raw_code) -> str:
    return str(raw_code)[:LOG_PREVIEW_LENGTH]


def _rejected(error: ScanRejectedError, *, user: User, raw_code=None) -> ScanRejectedError:
    logger.info(
        "Scan rejected for user %s: %s (unit %s, code %r)",
        user.pk, error.reason, error.unit_id,
        _preview(raw_code) if raw_code is not None else None,
    )
    return error


def submit_scan(*, raw_code: str, user: User) -> ScanResult:
    """
    Submit a scanned warranty code for points.

    Runs to completion once started: the registry lookup happens before
    the ledger transaction, and the ledger transaction either commits the
    claim, the EARNING entry and the refreshed balance together, or none
    of them.

    Args:
        raw_code: Text decoded from the QR code
        user: Claiming user

    Returns:
        ScanResult with the points awarded and the new ledger balance

    Raises:
        InvalidFormatError: Text matches no accepted code shape
        InvalidUUIDError: Identifier is not a version-4 UUID
        AlreadyScannedError: The unit was already claimed, by anyone
        UnknownUnitError: The registry has no record of the unit
        RegistryUnavailableError: The registry could not be reached
    """
    try:
        parsed = parse_scanned_code(raw_code)
    except ScanRejectedError as e:
        raise _rejected(e, user=user, raw_code=raw_code)

    unit_id = parsed.unit_id

    if ScannedUnit.objects.filter(unit_id=unit_id).exists():
        raise _rejected(AlreadyScannedError(unit_id=unit_id), user=user)

    try:
        match = validate_unit(unit_id)
    except UnitNotFoundError:
        raise _rejected(UnknownUnitError(unit_id=unit_id), user=user)
    except RegistryUnreachableError:
        raise _rejected(RegistryUnavailableError(unit_id=unit_id), user=user)

    points = points_for_product(match.product_name)

    result = _record_scan(user=user, match=match, points=points)

    logger.info(
        "Scan accepted: unit %s by user %s, %d points, new balance %d",
        unit_id, user.pk, points, result.new_balance,
    )
    return result


@transaction.atomic
def _record_scan(*, user: User, match: RegistryMatch, points: int) -> ScanResult:
    locked = lock_user(user=user)

    try:
        with transaction.atomic():
            ScannedUnit.objects.create(
                unit_id=match.unit_id,
                user=locked,
                product_name=match.product_name,
                points_awarded=points,
                matched_by=match.strategy,
            )
    except IntegrityError:
        logger.warning(
            "Concurrent duplicate for unit %s caught by uniqueness constraint (user %s)",
            match.unit_id, user.pk,
        )
        raise _rejected(AlreadyScannedError(unit_id=match.unit_id), user=user)

    ledger = append_transaction(
        user=locked,
        kind=TransactionKind.EARNING,
        amount=points,
        description=f"Scan: {match.product_name or 'Unidentified product'}",
        metadata={
            'unit_id': match.unit_id,
            'product_name': match.product_name,
            'matched_by': match.strategy,
        },
    )

    user.points = locked.points
    user.level = locked.level

    return ScanResult(
        unit_id=match.unit_id,
        product_name=match.product_name,
        points_awarded=points,
        new_balance=ledger.balance,
        badges=[badge.name for badge in ledger.badges],
        matched_by=match.strategy,
    )


def get_user_scans(*, user: User):
    """Return the units claimed by the user, newest first."""
    return ScannedUnit.objects.filter(user=user).order_by('-scanned_at')
