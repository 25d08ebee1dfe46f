"""Product point catalogue and reward catalogue lookups."""

from typing import Optional

from django.conf import settings
from django.db.models import QuerySet
from django.db.models.functions import Length

from apps.rewards.models import Product, Reward


def find_catalogue_product(product_name: Optional[str]) -> Optional[Product]:
    """
    Match a registry product name against the active catalogue.

    Exact (case-insensitive) name first, then a partial match in either
    direction. Partial matches prefer the longest catalogue name so that
    "BQ520 BAREEQ 50W" wins over "BQ520".
    """
    if not product_name:
        return None
    name = product_name.strip()
    if not name:
        return None

    active = Product.objects.filter(is_active=True)

    exact = active.filter(name__iexact=name).first()
    if exact is not None:
        return exact

    # Either name contained in the other
    for product in active.order_by(Length('name').desc(), 'name'):
        catalogue_name = product.name.lower()
        if catalogue_name in name.lower() or name.lower() in catalogue_name:
            return product

    return None


def points_for_product(product_name: Optional[str]) -> int:
    """
    Points granted for one scanned unit of the named product.

    An explicitly configured catalogue value overrides the default; an
    unresolved name or an uncatalogued product earns
    REWARDS['DEFAULT_SCAN_POINTS'].
    """
    product = find_catalogue_product(product_name)
    if product is not None:
        return product.reward_points
    return settings.REWARDS['DEFAULT_SCAN_POINTS']


def get_active_rewards() -> QuerySet[Reward]:
    """Return rewards currently offered, cheapest first."""
    return Reward.objects.filter(is_active=True).order_by('points_cost', 'name')
