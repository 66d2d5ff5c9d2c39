"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 3 users (admin, employee, plain user)
- 3 PVZ, created through PVZManager so each gets an audit entry
- One closed reception with products per PVZ, and one open reception
  at the first PVZ
"""

import random

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, UserRole
from apps.pvz.models import PVZ
from apps.pvz.services import PVZManager
from apps.receptions.models import Product, ProductType, Reception, ReceptionStatus
from apps.receptions.services import ProductManager, ReceptionManager


CITIES = ['Москва', 'Санкт-Петербург', 'Казань']


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing PVZ, receptions and products first (the audit log is kept)',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        pvzs = self.create_pvzs(users['admin'])
        self.create_receptions(pvzs)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (admin, superuser)')
        self.stdout.write('  employee@example.com / password123 (employee)')
        self.stdout.write('  user@example.com / password123 (user)')

    def clear_data(self):
        """Remove PVZ and everything received at them."""
        Product.objects.all().delete()
        Reception.objects.all().delete()
        PVZ.objects.all().delete()

    def create_users(self):
        admin, created = User.objects.get_or_create(
            email='admin@example.com',
            defaults={'role': UserRole.ADMIN, 'is_staff': True, 'is_superuser': True},
        )
        if created:
            admin.set_password('admin123')
            admin.save()

        users = {'admin': admin}
        for key, role in [('employee', UserRole.EMPLOYEE), ('user', UserRole.USER)]:
            user, created = User.objects.get_or_create(
                email=f'{key}@example.com',
                defaults={'role': role},
            )
            if created:
                user.set_password('password123')
                user.save()
            users[key] = user

        self.stdout.write(f'  Users: {len(users)}')
        return users

    def create_pvzs(self, admin):
        manager = PVZManager()
        pvzs = []
        for city in CITIES:
            pvz = PVZ.objects.filter(city=city).first()
            if pvz is None:
                pvz = manager.create(city=city, user_id=admin.id)
            pvzs.append(pvz)

        self.stdout.write(f'  PVZ: {len(pvzs)}')
        return pvzs

    def create_receptions(self, pvzs):
        receptions = ReceptionManager()
        products = ProductManager()
        types = list(ProductType.values)

        created = 0
        for pvz in pvzs:
            if Reception.objects.filter(pvz=pvz).exists():
                continue

            reception = receptions.create(pvz_id=pvz.id)
            products.create_batch(
                reception_id=reception.id,
                product_types=[random.choice(types) for _ in range(random.randint(3, 8))],
            )
            receptions.close(pvz_id=pvz.id)
            created += 1

        if pvzs and not Reception.objects.filter(pvz=pvzs[0], status=ReceptionStatus.IN_PROGRESS).exists():
            reception = receptions.create(pvz_id=pvzs[0].id)
            products.create_batch(reception_id=reception.id, product_types=types)
            created += 1

        self.stdout.write(f'  Receptions: {created}')
