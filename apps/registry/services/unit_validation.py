"""Unit validation against the external manufacturing registry."""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from django.conf import settings
from django.db import DatabaseError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from apps.registry.models import RegistryProduct
from .exceptions import RegistryUnreachableError, UnitNotFoundError
from .strategies import DEFAULT_STRATEGIES, LookupStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryMatch:
    """A unit confirmed by the registry."""

    unit_id: str
    serial_number: str
    product_name: Optional[str]
    strategy: str

    @property
    def name_resolved(self) -> bool:
        return self.product_name is not None


def validate_unit(
    unit_id: str,
    *,
    strategies: Optional[Sequence[LookupStrategy]] = None,
    attempts: Optional[int] = None,
    backoff_seconds: Optional[float] = None,
) -> RegistryMatch:
    """
    Confirm that a unit identifier names a real manufactured unit.

    Transient registry failures are retried up to ``attempts`` times with
    exponential backoff. A unit that is not found is never retried and
    never cached: registry data may still be propagating.

    Args:
        unit_id: Canonical (lowercase, hyphenated) v4 UUID string
        strategies: Ordered lookup strategies (default: serial number,
            then printed URL)
        attempts: Total lookup attempts (default REWARDS['REGISTRY_LOOKUP_ATTEMPTS'])
        backoff_seconds: First retry delay, doubled per retry
            (default REWARDS['REGISTRY_RETRY_BACKOFF_SECONDS'])

    Returns:
        RegistryMatch; ``product_name`` is None when the unit exists but
        its product name could not be resolved

    Raises:
        UnitNotFoundError: No strategy matched
        RegistryUnreachableError: Every attempt failed to reach the registry
    """
    program = settings.REWARDS
    if strategies is None:
        strategies = DEFAULT_STRATEGIES
    if attempts is None:
        attempts = program['REGISTRY_LOOKUP_ATTEMPTS']
    if backoff_seconds is None:
        backoff_seconds = program['REGISTRY_RETRY_BACKOFF_SECONDS']
    attempts = max(1, attempts)

    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=backoff_seconds),
        retry=retry_if_exception_type(RegistryUnreachableError),
        before_sleep=_log_retry(unit_id, attempts),
        sleep=time.sleep,
        reraise=True,
    )
    try:
        return retrying(_lookup, unit_id, strategies)
    except RegistryUnreachableError:
        logger.error(
            "Registry unreachable for unit %s after %d attempt(s)",
            unit_id, attempts,
        )
        raise


def _log_retry(unit_id: str, attempts: int):
    def log(retry_state):
        logger.warning(
            "Registry unreachable for unit %s (attempt %d/%d), retrying in %.2fs",
            unit_id, retry_state.attempt_number, attempts, retry_state.next_action.sleep,
        )
    return log


def _lookup(unit_id: str, strategies: Sequence[LookupStrategy]) -> RegistryMatch:
    using = settings.REGISTRY_DATABASE_ALIAS

    for strategy in strategies:
        try:
            unit = strategy.find_unit(unit_id, using=using)
        except DatabaseError as e:
            logger.warning(
                "Registry strategy %s for unit %s: error (%s)",
                strategy.name, unit_id, e,
            )
            raise RegistryUnreachableError(str(e)) from e

        if unit is None:
            logger.info("Registry strategy %s for unit %s: no_match", strategy.name, unit_id)
            continue

        logger.info(
            "Registry strategy %s for unit %s: matched serial %s",
            strategy.name, unit_id, unit.serial_number,
        )
        product_name = resolve_product_name(unit.product_id, using=using)
        if product_name is None:
            logger.warning(
                "Registry unit %s exists but product %s has no resolvable name",
                unit.serial_number, unit.product_id,
            )

        return RegistryMatch(
            unit_id=unit_id,
            serial_number=unit.serial_number,
            product_name=product_name,
            strategy=strategy.name,
        )

    raise UnitNotFoundError(f"Unit {unit_id} is not registered")


def resolve_product_name(product_id: int, *, using: str) -> Optional[str]:
    """
    Look up the product name for a registry unit.

    Returns None when the product row is missing, soft-deleted or unnamed.

    Raises:
        RegistryUnreachableError: If the registry query fails
    """
    try:
        name = (
            RegistryProduct.objects
            .using(using)
            .filter(pid=product_id, deleted_at__isnull=True)
            .values_list('name', flat=True)
            .first()
        )
    except DatabaseError as e:
        raise RegistryUnreachableError(str(e)) from e

    if name is None:
        return None
    name = name.strip()
    return name or None
