import threading
import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import IntegrityError, connection, connections, transaction
from django.test import TransactionTestCase
from django.test.utils import CaptureQueriesContext
from django.utils import timezone

from apps.core.exceptions import InvalidInputError
from apps.pvz.models import PVZ
from apps.pvz.services import PVZManager, PVZNotFoundError
from apps.receptions.models import Product, ProductType, Reception, ReceptionStatus
from apps.receptions.repository import ProductRepository, ReceptionRepository
from apps.receptions.services import (
    InvalidProductTypeError,
    NoReceptionError,
    ProductManager,
    ProductNotFoundError,
    ReceptionAlreadyClosedError,
    ReceptionAlreadyOpenError,
    ReceptionManager,
    ReceptionNotFoundError,
    validate_product_type,
)


# =============================================================================
# Reception Lifecycle Tests
# =============================================================================

@pytest.mark.django_db
class TestCreateReception:

    def test_open_reception(self, reception_manager, pvz):
        reception = reception_manager.create(pvz_id=pvz.id)

        assert reception.status == ReceptionStatus.IN_PROGRESS
        assert reception.pvz_id == pvz.id
        assert reception.date_time is not None

    def test_second_open_reception_rejected(self, reception_manager, open_reception):
        with pytest.raises(ReceptionAlreadyOpenError):
            reception_manager.create(pvz_id=open_reception.pvz_id)

        assert Reception.objects.filter(status=ReceptionStatus.IN_PROGRESS).count() == 1

    def test_open_after_close(self, reception_manager, pvz):
        first = reception_manager.create(pvz_id=pvz.id)
        reception_manager.close(pvz_id=pvz.id)

        second = reception_manager.create(pvz_id=pvz.id)

        assert second.id != first.id
        assert second.is_open

    def test_missing_pvz(self, reception_manager, db):
        with pytest.raises(PVZNotFoundError):
            reception_manager.create(pvz_id=uuid.uuid4())

    def test_unique_index_rejects_second_open_row(self, open_reception):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Reception.objects.create(pvz=open_reception.pvz)

    def test_unique_index_violation_reported_as_already_open(self, reception_manager, open_reception):
        # Simulates a concurrent opener that passed the check first
        with patch.object(ReceptionRepository, 'find_open_by_pvz_id', return_value=None):
            with pytest.raises(ReceptionAlreadyOpenError):
                reception_manager.create(pvz_id=open_reception.pvz_id)

        assert Reception.objects.count() == 1


@pytest.mark.django_db
class TestCloseReception:

    def test_close(self, reception_manager, open_reception):
        closed = reception_manager.close(pvz_id=open_reception.pvz_id)

        assert closed.id == open_reception.id
        open_reception.refresh_from_db()
        assert open_reception.status == ReceptionStatus.CLOSED

    def test_close_without_products(self, reception_manager, open_reception):
        reception_manager.close(pvz_id=open_reception.pvz_id)

        assert not Product.objects.exists()

    def test_close_twice(self, reception_manager, open_reception):
        reception_manager.close(pvz_id=open_reception.pvz_id)

        with pytest.raises(ReceptionAlreadyClosedError) as exc_info:
            reception_manager.close(pvz_id=open_reception.pvz_id)

        assert exc_info.value.entity_id == open_reception.id

    def test_close_reports_latest_reception(self, reception_manager, pvz):
        now = timezone.now()
        Reception.objects.create(pvz=pvz, date_time=now - timedelta(days=2), status=ReceptionStatus.CLOSED)
        latest = Reception.objects.create(pvz=pvz, date_time=now, status=ReceptionStatus.CLOSED)

        with pytest.raises(ReceptionAlreadyClosedError) as exc_info:
            reception_manager.close(pvz_id=pvz.id)

        assert exc_info.value.entity_id == latest.id

    def test_close_never_opened(self, reception_manager, pvz):
        with pytest.raises(NoReceptionError):
            reception_manager.close(pvz_id=pvz.id)

    def test_close_missing_pvz(self, reception_manager, db):
        with pytest.raises(PVZNotFoundError):
            reception_manager.close(pvz_id=uuid.uuid4())

    def test_closed_reception_not_served_from_cache(self, reception_manager, open_reception):
        assert reception_manager.get_by_id(reception_id=open_reception.id).is_open

        reception_manager.close(pvz_id=open_reception.pvz_id)

        assert not reception_manager.get_by_id(reception_id=open_reception.id).is_open


@pytest.mark.django_db
class TestReceptionQueries:

    def test_get_open_by_pvz_id(self, reception_manager, open_reception):
        assert reception_manager.get_open_by_pvz_id(pvz_id=open_reception.pvz_id) == open_reception

    def test_get_open_by_pvz_id_none_open(self, reception_manager, pvz):
        with pytest.raises(ReceptionNotFoundError):
            reception_manager.get_open_by_pvz_id(pvz_id=pvz.id)

    def test_get_by_id_missing(self, reception_manager, db):
        with pytest.raises(ReceptionNotFoundError):
            reception_manager.get_by_id(reception_id=uuid.uuid4())

    def test_list(self, reception_manager, pvz):
        now = timezone.now()
        Reception.objects.create(pvz=pvz, date_time=now - timedelta(days=1), status=ReceptionStatus.CLOSED)
        latest = Reception.objects.create(pvz=pvz, date_time=now)

        assert reception_manager.list(offset=0, limit=1) == [latest]

    def test_get_products_missing_reception(self, reception_manager, db):
        with pytest.raises(ReceptionNotFoundError):
            reception_manager.get_products(reception_id=uuid.uuid4())


# =============================================================================
# Product Tests
# =============================================================================

class TestValidateProductType:

    @pytest.mark.parametrize('value, expected', [
        ('electronics', 'electronics'),
        ('одежда', 'clothing'),
        ('обувь', 'shoes'),
    ])
    def test_accepts_values_and_labels(self, value, expected):
        assert validate_product_type(value) == expected

    @pytest.mark.parametrize('value', ['food', '', None])
    def test_rejects_unknown(self, value):
        with pytest.raises(InvalidProductTypeError):
            validate_product_type(value)


@pytest.mark.django_db
class TestCreateProduct:

    def test_add_product(self, product_manager, open_reception):
        product = product_manager.create(reception_id=open_reception.id, product_type='shoes')

        assert product.reception_id == open_reception.id
        assert product.type == ProductType.SHOES
        assert product.sequence == 1

    def test_closed_reception(self, product_manager, open_reception):
        open_reception.status = ReceptionStatus.CLOSED
        open_reception.save()

        with pytest.raises(ReceptionAlreadyClosedError):
            product_manager.create(reception_id=open_reception.id, product_type='shoes')

        assert not Product.objects.exists()

    def test_closed_check_precedes_type_check(self, product_manager, open_reception):
        open_reception.status = ReceptionStatus.CLOSED
        open_reception.save()

        with pytest.raises(ReceptionAlreadyClosedError):
            product_manager.create(reception_id=open_reception.id, product_type='food')

    def test_missing_reception(self, product_manager, db):
        with pytest.raises(ReceptionNotFoundError):
            product_manager.create(reception_id=uuid.uuid4(), product_type='shoes')

    def test_invalid_type(self, product_manager, open_reception):
        with pytest.raises(InvalidProductTypeError):
            product_manager.create(reception_id=open_reception.id, product_type='food')

    def test_create_for_pvz(self, product_manager, open_reception):
        product = product_manager.create_for_pvz(
            pvz_id=open_reception.pvz_id, product_type='электроника'
        )

        assert product.reception_id == open_reception.id
        assert product.type == ProductType.ELECTRONICS

    def test_create_for_pvz_after_close(self, product_manager, pvz):
        Reception.objects.create(pvz=pvz, status=ReceptionStatus.CLOSED)

        with pytest.raises(ReceptionAlreadyClosedError):
            product_manager.create_for_pvz(pvz_id=pvz.id, product_type='shoes')

        assert not Product.objects.exists()

    def test_create_for_pvz_never_opened(self, product_manager, pvz):
        with pytest.raises(NoReceptionError):
            product_manager.create_for_pvz(pvz_id=pvz.id, product_type='shoes')


@pytest.mark.django_db
class TestCreateBatch:

    def test_batch_keeps_order(self, product_manager, open_reception):
        types = ['shoes', 'clothing', 'electronics']
        products = product_manager.create_batch(reception_id=open_reception.id, product_types=types)

        assert [p.type for p in products] == types
        assert [p.sequence for p in products] == [1, 2, 3]

    def test_batch_continues_sequence(self, product_manager, open_reception):
        product_manager.create(reception_id=open_reception.id, product_type='shoes')
        products = product_manager.create_batch(
            reception_id=open_reception.id, product_types=['clothing', 'shoes']
        )

        assert [p.sequence for p in products] == [2, 3]

    def test_batch_is_all_or_nothing(self, product_manager, open_reception):
        with pytest.raises(InvalidProductTypeError):
            product_manager.create_batch(
                reception_id=open_reception.id, product_types=['shoes', 'food']
            )

        assert not Product.objects.exists()

    def test_empty_batch(self, product_manager, open_reception):
        with pytest.raises(InvalidInputError):
            product_manager.create_batch(reception_id=open_reception.id, product_types=[])


@pytest.mark.django_db
class TestDeleteLast:

    def test_lifo(self, product_manager, open_reception):
        product_manager.create_batch(
            reception_id=open_reception.id,
            product_types=['shoes', 'clothing', 'electronics'],
        )

        removed = [
            product_manager.delete_last(reception_id=open_reception.id).type
            for _ in range(3)
        ]

        assert removed == ['electronics', 'clothing', 'shoes']
        assert not Product.objects.exists()

    def test_same_timestamp_uses_insertion_order(self, product_manager, open_reception):
        stamp = timezone.now()
        Product.objects.create(reception=open_reception, type='shoes', date_time=stamp, sequence=1)
        Product.objects.create(reception=open_reception, type='clothing', date_time=stamp, sequence=2)

        assert product_manager.delete_last(reception_id=open_reception.id).type == 'clothing'

    def test_empty_reception(self, product_manager, open_reception):
        with pytest.raises(ProductNotFoundError):
            product_manager.delete_last(reception_id=open_reception.id)

    def test_closed_reception(self, product_manager, open_reception):
        Product.objects.create(reception=open_reception, type='shoes', sequence=1)
        open_reception.status = ReceptionStatus.CLOSED
        open_reception.save()

        with pytest.raises(ReceptionAlreadyClosedError):
            product_manager.delete_last(reception_id=open_reception.id)

        assert Product.objects.count() == 1

    def test_delete_last_for_pvz(self, product_manager, open_reception):
        product_manager.create(reception_id=open_reception.id, product_type='shoes')

        removed = product_manager.delete_last_for_pvz(pvz_id=open_reception.pvz_id)

        assert removed.type == 'shoes'
        assert not Product.objects.exists()

    def test_delete_last_for_pvz_after_close(self, product_manager, open_reception):
        Product.objects.create(reception=open_reception, type='shoes', sequence=1)
        open_reception.status = ReceptionStatus.CLOSED
        open_reception.save()

        with pytest.raises(ReceptionAlreadyClosedError):
            product_manager.delete_last_for_pvz(pvz_id=open_reception.pvz_id)

        assert Product.objects.count() == 1

    def test_delete_is_one_statement(self, open_reception):
        Product.objects.create(reception=open_reception, type='shoes', sequence=1)
        Product.objects.create(reception=open_reception, type='clothing', sequence=2)

        with CaptureQueriesContext(connection) as queries:
            removed = ProductRepository().delete_last(open_reception.id)

        deletes = [q['sql'] for q in queries.captured_queries if q['sql'].startswith('DELETE')]
        assert len(deletes) == 1
        assert 'LIMIT 1' in deletes[0]
        assert removed.type == 'clothing'
        assert list(Product.objects.values_list('type', flat=True)) == ['shoes']


# =============================================================================
# Scenario
# =============================================================================

@pytest.mark.django_db
def test_full_reception_scenario(reception_manager, product_manager, admin_user):
    """Open, refuse a second open, add three products, remove the last, close, then writes are refused."""
    pvz = PVZManager().create(city='Москва', user_id=admin_user.id)

    reception = reception_manager.create(pvz_id=pvz.id)
    assert reception.status == ReceptionStatus.IN_PROGRESS

    with pytest.raises(ReceptionAlreadyOpenError):
        reception_manager.create(pvz_id=pvz.id)

    for product_type in ['electronics', 'clothing', 'shoes']:
        product_manager.create(reception_id=reception.id, product_type=product_type)

    assert len(product_manager.get_by_reception_id(reception_id=reception.id)) == 3

    assert product_manager.delete_last(reception_id=reception.id).type == 'shoes'

    closed = reception_manager.close(pvz_id=pvz.id)
    assert closed.status == ReceptionStatus.CLOSED

    products = product_manager.get_by_reception_id(reception_id=reception.id)
    assert [p.type for p in products] == ['electronics', 'clothing']

    with pytest.raises(ReceptionAlreadyClosedError):
        product_manager.create(reception_id=reception.id, product_type='shoes')
    with pytest.raises(ReceptionAlreadyClosedError):
        product_manager.delete_last(reception_id=reception.id)


# =============================================================================
# Concurrency Tests (Race Conditions)
# =============================================================================

class TestConcurrency(TransactionTestCase):
    """
    Races between real threads, each on its own database connection.

    TransactionTestCase is required: a regular TestCase wraps the test in one
    transaction, which the worker threads cannot see.
    """

    def setUp(self):
        self.pvz = PVZ.objects.create(city='Москва')

    def run_concurrently(self, target, count):
        """Start count threads on target at the same moment; return (results, errors)."""
        barrier = threading.Barrier(count)
        results = []
        errors = []

        def worker():
            try:
                barrier.wait()
                results.append(target())
            except Exception as e:
                errors.append(e)
            finally:
                connections.close_all()

        threads = [threading.Thread(target=worker) for _ in range(count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        return results, errors

    def test_concurrent_opens_leave_one_reception_in_progress(self):
        """Only one of several simultaneous opens for the same PVZ succeeds."""
        results, errors = self.run_concurrently(
            lambda: ReceptionManager().create(pvz_id=self.pvz.id), count=5
        )

        assert len(results) == 1, f"Expected 1 opened reception, got {len(results)}"
        assert len(errors) == 4
        assert all(isinstance(e, ReceptionAlreadyOpenError) for e in errors), errors

        open_receptions = Reception.objects.filter(pvz=self.pvz, status=ReceptionStatus.IN_PROGRESS)
        assert list(open_receptions.values_list('id', flat=True)) == [results[0].id]

    def test_concurrent_delete_last_removes_distinct_products(self):
        """Simultaneous removals each take a different product."""
        reception = Reception.objects.create(pvz=self.pvz)
        created = ProductManager().create_batch(
            reception_id=reception.id, product_types=['shoes', 'clothing', 'electronics']
        )

        results, errors = self.run_concurrently(
            lambda: ProductManager().delete_last(reception_id=reception.id), count=4
        )

        assert len(results) == 3, f"Expected 3 removals, got {len(results)}: {errors}"
        assert sorted(p.id for p in results) == sorted(p.id for p in created)
        assert len(errors) == 1
        assert isinstance(errors[0], ProductNotFoundError)
        assert not Product.objects.filter(reception=reception).exists()

    def test_concurrent_close_succeeds_once(self):
        reception = Reception.objects.create(pvz=self.pvz)

        results, errors = self.run_concurrently(
            lambda: ReceptionManager().close(pvz_id=self.pvz.id), count=3
        )

        assert [r.id for r in results] == [reception.id]
        assert len(errors) == 2
        assert all(isinstance(e, ReceptionAlreadyClosedError) for e in errors), errors
