import pytest

from apps.pvz.models import PVZ
from apps.receptions.models import Reception
from apps.receptions.services import ProductManager, ReceptionManager


@pytest.fixture
def reception_manager():
    return ReceptionManager()


@pytest.fixture
def product_manager():
    return ProductManager()


@pytest.fixture
def pvz(db):
    """Create and return a PVZ."""
    return PVZ.objects.create(city='Москва')


@pytest.fixture
def open_reception(pvz):
    """Create and return a reception in progress at the PVZ."""
    return Reception.objects.create(pvz=pvz)
