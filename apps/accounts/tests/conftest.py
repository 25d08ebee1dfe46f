import pytest
from apps.accounts.models import User, UserStatus


@pytest.fixture
def inactive_installer(db):
    """Create and return a deactivated installer."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive Installer',
        status=UserStatus.INACTIVE,
    )


@pytest.fixture
def installer_data():
    """Valid payload for admin creation of an installer."""
    return {
        'email': 'newinstaller@example.com',
        'password': 'SecurePass123!',
        'display_name': 'New Installer',
        'phone': '+201012345678',
        'region': 'Cairo',
    }
