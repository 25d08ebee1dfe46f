"""
Management command to seed the rewards program.

Usage:
    python manage.py seed_program [--clear]

This creates:
- The program admin account
- Catalogue point values for the BAREEQ product lines
- A starter reward catalogue
- Badges
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, UserRole
from apps.badges.models import Badge, BadgeAssignment
from apps.rewards.models import Product, Reward, RewardKind


PRODUCTS = [
    ('BQ520 BAREEQ 50W', 20),
    ('BQ360 BAREEQ 30W', 15),
    ('BQ250 BAREEQ 25W', 10),
]

REWARDS = [
    ('Fuel voucher', 'Prepaid fuel card', RewardKind.VOUCHER, 500),
    ('Tool kit', 'Professional installation tool kit', RewardKind.PRODUCT, 1500),
    ('Weekend trip', 'Two-night trip for the top installers', RewardKind.TRAVEL, 10000),
]

BADGES = [
    {
        'name': 'Beginner',
        'icon': 'star',
        'description': 'Joined the program',
    },
    {
        'name': 'Gold Technician',
        'icon': 'award',
        'description': 'Completed 5 installations',
        'min_installations': 5,
    },
    {
        'name': 'Certified Technician',
        'icon': 'verified',
        'description': 'Reached 1000 points',
        'min_points': 1000,
    },
]


class Command(BaseCommand):
    help = 'Seed the admin account, product points, rewards and badges'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Remove catalogue entries and badges before seeding',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing catalogue and badges...')
            self.clear_data()

        self.stdout.write('Seeding rewards program...')

        self.create_admin()
        self.create_products()
        self.create_rewards()
        self.create_badges()

        self.stdout.write(self.style.SUCCESS('Rewards program seeded successfully!'))
        self.stdout.write('')
        self.stdout.write('Admin account:')
        self.stdout.write('  admin@example.com / admin123')

    def clear_data(self):
        """Ledger rows and claimed units are never removed."""
        BadgeAssignment.objects.all().delete()
        Badge.objects.all().delete()
        Reward.objects.all().delete()
        Product.objects.all().delete()

    def create_admin(self):
        self.stdout.write('  Creating admin...')

        admin, created = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Program Admin',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        if created:
            admin.set_password('admin123')
            admin.save()
        return admin

    def create_products(self):
        self.stdout.write('  Creating product point values...')

        for name, points in PRODUCTS:
            Product.objects.update_or_create(
                name=name,
                defaults={'reward_points': points, 'is_active': True}
            )

    def create_rewards(self):
        self.stdout.write('  Creating rewards...')

        for name, description, kind, cost in REWARDS:
            Reward.objects.get_or_create(
                name=name,
                defaults={
                    'description': description,
                    'kind': kind,
                    'points_cost': cost,
                }
            )

    def create_badges(self):
        self.stdout.write('  Creating badges...')

        for data in BADGES:
            data = dict(data)
            Badge.objects.update_or_create(name=data.pop('name'), defaults=data)
