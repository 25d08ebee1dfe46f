"""
Project-wide fixtures.

The manufacturing registry is an external database with unmanaged models,
so the test database does not create its tables. ``registry_tables`` creates
them inside the test transaction on the default alias, which is where the
registry router points during tests.
"""
import pytest
from django.db import connection
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.registry.models import RegistryProduct, RegistryUnit
from apps.rewards.models import Transaction, TransactionKind


REGISTRY_DDL = [
    """
    CREATE TABLE IF NOT EXISTS products (
        pid integer PRIMARY KEY,
        name text NOT NULL,
        deleted_at datetime NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS po_items (
        serial_number text PRIMARY KEY,
        product_id integer NOT NULL,
        printed_url text NULL,
        deleted_at datetime NULL
    )
    """,
]


# =============================================================================
# Users and clients
# =============================================================================

def authenticate(client, user):
    """Attach a JWT access token for ``user`` to ``client``."""
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def installer(db):
    """Create and return an active installer with an empty ledger."""
    return User.objects.create_user(
        email='installer@example.com',
        password='TestPass123!',
        display_name='Test Installer',
    )


@pytest.fixture
def other_installer(db):
    """Create and return a second installer."""
    return User.objects.create_user(
        email='other@example.com',
        password='OtherPass123!',
        display_name='Other Installer',
    )


@pytest.fixture
def program_admin(db):
    """Create and return a program admin."""
    return User.objects.create_user(
        email='programadmin@example.com',
        password='AdminPass123!',
        display_name='Program Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def authenticated_client(api_client, installer):
    """Return an API client authenticated as the installer."""
    return authenticate(api_client, installer)


@pytest.fixture
def admin_api_client(program_admin):
    """Return an API client authenticated as the program admin."""
    return authenticate(APIClient(), program_admin)


# =============================================================================
# Registry
# =============================================================================

@pytest.fixture
def registry_tables(db):
    """Create the registry tables for the duration of the test."""
    with connection.cursor() as cursor:
        for statement in REGISTRY_DDL:
            cursor.execute(statement)


@pytest.fixture
def registry_product(registry_tables):
    """A registry product named like the BQ520 catalogue entry."""
    return RegistryProduct.objects.create(pid=1, name='BQ520')


@pytest.fixture
def register_unit(registry_tables):
    """Factory: add a manufactured unit to the registry."""
    def _register(serial_number, product_id=1, printed_url=None, deleted_at=None):
        return RegistryUnit.objects.create(
            serial_number=serial_number,
            product_id=product_id,
            printed_url=printed_url,
            deleted_at=deleted_at,
        )
    return _register


# =============================================================================
# Ledger
# =============================================================================

@pytest.fixture
def ledger_sum():
    """Independent balance computation over the full history."""
    def _sum(user):
        total = 0
        for entry in Transaction.objects.filter(user=user):
            if entry.kind == TransactionKind.EARNING:
                total += entry.amount
            else:
                total -= entry.amount
        return total
    return _sum
