import pytest
from apps.rewards.models import Product


HAPPY_UNIT_ID = 'e9b3cb66-9341-4a8c-9b5d-c6b5cb65117e'
UNREGISTERED_UNIT_ID = '7c9e6679-7425-40de-944b-e07fc1f90ae7'
# Well-formed UUID, version 1
V1_UUID = 'c232ab00-9414-11ec-b3c8-9f6bdeced846'


@pytest.fixture
def bq520_product(db):
    """Catalogue entry granting 20 points for the BQ520 line."""
    return Product.objects.create(name='BQ520 BAREEQ 50W', reward_points=20)


@pytest.fixture
def happy_unit(registry_product, register_unit, bq520_product):
    """A registered BQ520 unit worth 20 points."""
    return register_unit(HAPPY_UNIT_ID, product_id=registry_product.pid)


@pytest.fixture
def long_url():
    def _url(unit_id=HAPPY_UNIT_ID):
        return f'https://warranty.example.com/p/{unit_id}'
    return _url


@pytest.fixture
def short_url():
    def _url(unit_id=HAPPY_UNIT_ID):
        return f'https://w.example.com/p/{unit_id}'
    return _url
