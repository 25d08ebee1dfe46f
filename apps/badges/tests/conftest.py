import pytest
from apps.badges.models import Badge


@pytest.fixture
def badges(db):
    """A spread of badges covering every threshold combination."""
    return {
        'welcome': Badge.objects.create(name='Welcome', icon='star'),
        'hundred': Badge.objects.create(name='Hundred Club', min_points=100),
        'five_jobs': Badge.objects.create(name='Five Installs', min_installations=5),
        'pro': Badge.objects.create(name='Pro', min_points=200, min_installations=3),
        'retired': Badge.objects.create(name='Retired', is_active=False),
    }
