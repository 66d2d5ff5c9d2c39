import pytest

from apps.pvz.models import PVZ
from apps.pvz.services import PVZManager


@pytest.fixture
def manager():
    return PVZManager()


@pytest.fixture
def pvz(db):
    """Create and return a PVZ."""
    return PVZ.objects.create(city='Москва')


@pytest.fixture
def allowed_cities(settings):
    settings.PVZ_ALLOWED_CITIES = ['Москва', 'Санкт-Петербург', 'Казань']
